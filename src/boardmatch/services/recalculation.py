"""Keep stored board scores in step with the board configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable

import pendulum
import structlog

from ..core import MatchScorer
from ..schemas import Board
from ..store import MatchStore, ScoreUpdate, ScoringRow


@dataclass(slots=True)
class RecalculationReport:
    """Summary of one recalculation run."""

    board_id: str
    agency_id: str
    config_version: int | None = None
    processed: int = 0
    failed: int = 0
    written: bool = False
    skipped_reason: str | None = None
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def stale(self) -> bool:
        return self.config_version is not None and self.skipped_reason is None and not self.written


class RecalculationService:
    """Re-score every application attached to a board.

    The run reads the whole board in one batch, scores it in memory and
    hands the results back in a single write keyed by the configuration
    version it read. If the board was edited in the meantime the store
    rejects the write and the newer run's results stand.
    """

    def __init__(
        self,
        *,
        store: MatchStore,
        scorer: MatchScorer | None = None,
        now_provider: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._scorer = scorer or MatchScorer()
        self._now_provider = now_provider or pendulum.now
        self._logger = structlog.get_logger(__name__)

    def recalculate(self, board_id: str, agency_id: str) -> RecalculationReport:
        report = RecalculationReport(board_id=board_id, agency_id=agency_id)
        log = self._logger.bind(board_id=board_id, agency_id=agency_id)

        board = self._store.get_board(board_id, agency_id)
        if board is None:
            report.skipped_reason = "board_not_found"
            log.info("recalculation.skipped", reason=report.skipped_reason)
            return report
        if not board.is_configured:
            report.skipped_reason = "board_not_configured"
            log.info("recalculation.skipped", reason=report.skipped_reason)
            return report

        report.config_version = board.config_version
        rows = self._store.load_scoring_batch(board_id, agency_id)
        calculated_at = self._now_provider()
        today = calculated_at.date()

        updates: list[ScoreUpdate] = []
        for row in rows:
            update = self._score_row(row, board, today)
            if "error" in update.match_details:
                report.failed += 1
                report.failures[update.application_id] = update.match_details["error"]
            updates.append(update)
        report.processed = len(updates)

        report.written = self._store.write_scores(
            board_id,
            board.config_version,
            updates,
            calculated_at,
        )
        if not report.written:
            log.warning(
                "recalculation.stale_discarded",
                config_version=board.config_version,
                processed=report.processed,
            )
            return report

        log.info(
            "recalculation.completed",
            config_version=board.config_version,
            processed=report.processed,
            failed=report.failed,
        )
        return report

    def _score_row(self, row: ScoringRow, board: Board, today: date) -> ScoreUpdate:
        application_id = row.application.application_id
        if row.profile is None:
            self._logger.warning(
                "recalculation.profile_missing",
                board_id=board.board_id,
                application_id=application_id,
                profile_id=row.application.profile_id,
            )
            return ScoreUpdate(application_id, 0, {"error": "profile_not_found"})

        try:
            result = self._scorer.score(
                row.profile,
                board.requirements,
                board.weights,
                today=today,
            )
        except Exception as exc:  # noqa: BLE001
            self._logger.warning(
                "recalculation.row_failed",
                board_id=board.board_id,
                application_id=application_id,
                error=str(exc),
                exc_info=True,
            )
            return ScoreUpdate(
                application_id,
                0,
                {"error": "calculation_failed", "message": str(exc)},
            )
        return ScoreUpdate(application_id, result.score, result.details)


def recalculate_board_scores(
    store: MatchStore,
    board_id: str,
    agency_id: str,
    *,
    scorer: MatchScorer | None = None,
) -> RecalculationReport:
    """Recalculate one board with a throwaway service instance."""
    return RecalculationService(store=store, scorer=scorer).recalculate(board_id, agency_id)
