"""Move applications onto and off boards."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable

import pendulum
import structlog

from ..core import MatchScorer
from ..errors import ApplicationNotFoundError, BoardNotFoundError
from ..schemas import Application, Board, BoardApplication
from ..store import MatchStore


class AssignmentService:
    """Keep each application on at most one board, scored on arrival."""

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

    def assign(
        self,
        application_id: str,
        board_id: str | None,
        *,
        agency_id: str | None = None,
    ) -> BoardApplication | None:
        """Attach the application to ``board_id``, or detach it when ``None``.

        Existing memberships are always dropped first. Returns the new
        membership, or ``None`` when the application was unassigned.
        """
        application = self._store.get_application(application_id)
        if application is None or (agency_id is not None and application.agency_id != agency_id):
            raise ApplicationNotFoundError(application_id, agency_id)

        if board_id is None:
            self._store.replace_membership(application_id, None, None)
            self._logger.info(
                "assignment.unassigned",
                application_id=application_id,
                agency_id=application.agency_id,
            )
            return None

        board = self._store.get_board(board_id, application.agency_id)
        if board is None:
            raise BoardNotFoundError(board_id, application.agency_id)

        calculated_at = self._now_provider()
        score, details = self._initial_score(application, board, calculated_at.date())
        membership = BoardApplication(
            board_id=board_id,
            application_id=application_id,
            match_score=score,
            match_details=details,
            is_primary=True,
            updated_at=calculated_at,
        )
        self._store.replace_membership(application_id, membership, calculated_at)
        self._logger.info(
            "assignment.assigned",
            application_id=application_id,
            board_id=board_id,
            previous_board_id=application.board_id,
            match_score=score,
        )
        return membership

    def _initial_score(
        self,
        application: Application,
        board: Board,
        today: date,
    ) -> tuple[int, dict[str, Any] | None]:
        if not board.is_configured or not application.profile_id:
            return 0, None
        try:
            profile = self._store.get_profile(application.profile_id)
            if profile is None:
                return 0, None
            result = self._scorer.score(
                profile,
                board.requirements,
                board.weights,
                today=today,
            )
        except Exception as exc:  # noqa: BLE001
            self._logger.warning(
                "assignment.score_failed",
                application_id=application.application_id,
                board_id=board.board_id,
                error=str(exc),
                exc_info=True,
            )
            return 0, {"error": "calculation_failed", "message": str(exc)}
        return result.score, result.details


def assign_board(
    store: MatchStore,
    application_id: str,
    board_id: str | None,
    *,
    agency_id: str | None = None,
) -> BoardApplication | None:
    return AssignmentService(store=store).assign(application_id, board_id, agency_id=agency_id)
