"""Board lifecycle: creation, configuration edits, duplication, deletion."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import structlog

from ..core import ScoreBands, ScoreDistribution, score_distribution
from ..errors import BoardNotFoundError, InvalidBoardError
from ..schemas import BOARD_METADATA_FIELDS, Board, Requirements, Weights
from ..store import MatchStore
from .recalculation import RecalculationReport, RecalculationService


@dataclass(slots=True)
class BoardSummary:
    board: Board
    application_count: int


class BoardService:
    """Agency-facing board operations.

    Every configuration write bumps the board's config version and is
    followed by a recalculation of the board's stored scores.
    """

    def __init__(
        self,
        *,
        store: MatchStore,
        recalculation: RecalculationService,
        id_factory: Callable[[], str] | None = None,
        bands: ScoreBands | None = None,
    ) -> None:
        self._store = store
        self._recalculation = recalculation
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._bands = bands or ScoreBands()
        self._logger = structlog.get_logger(__name__)

    def create_board(
        self,
        agency_id: str,
        name: str,
        *,
        description: str | None = None,
        is_active: bool = True,
        sort_order: int = 0,
        requirements: Requirements | Mapping[str, Any] | None = None,
        weights: Weights | Mapping[str, Any] | None = None,
    ) -> Board:
        name = self._clean_name(name)
        board = Board(
            board_id=self._id_factory(),
            agency_id=agency_id,
            name=name,
            description=description or None,
            is_active=is_active,
            sort_order=sort_order,
            requirements=_as_requirements(requirements),
            weights=_as_weights(weights),
        )
        self._store.save_board(board)
        self._logger.info("board.created", board_id=board.board_id, agency_id=agency_id)
        return board

    def update_board(self, board_id: str, agency_id: str, changes: Mapping[str, Any]) -> Board:
        """Update board metadata; configuration is edited separately."""
        board = self._get(board_id, agency_id)
        update = {key: value for key, value in changes.items() if key in BOARD_METADATA_FIELDS}
        if "name" in update:
            update["name"] = self._clean_name(update["name"])
        if "description" in update:
            update["description"] = update["description"] or None
        checked = Board.model_validate({**board.model_dump(), **update})
        # Configuration and config_version are left to the config writers.
        return self._store.update_board_metadata(
            board_id,
            {key: getattr(checked, key) for key in update},
        )

    def update_requirements(
        self,
        board_id: str,
        agency_id: str,
        requirements: Requirements | Mapping[str, Any],
    ) -> RecalculationReport:
        """Replace the requirements wholesale and re-score the board."""
        self._get(board_id, agency_id)
        version = self._store.save_requirements(board_id, _as_requirements(requirements))
        self._logger.info("board.requirements_updated", board_id=board_id, config_version=version)
        return self._recalculation.recalculate(board_id, agency_id)

    def update_weights(
        self,
        board_id: str,
        agency_id: str,
        weights: Weights | Mapping[str, Any],
    ) -> RecalculationReport:
        """Overlay the given weight fields, clamp them and re-score the board."""
        board = self._get(board_id, agency_id)
        payload = weights.model_dump() if isinstance(weights, Weights) else dict(weights)
        merged = (board.weights or Weights()).merged(payload)
        version = self._store.save_weights(board_id, merged)
        self._logger.info("board.weights_updated", board_id=board_id, config_version=version)
        return self._recalculation.recalculate(board_id, agency_id)

    def calculate_scores(self, board_id: str, agency_id: str) -> RecalculationReport:
        self._get(board_id, agency_id)
        return self._recalculation.recalculate(board_id, agency_id)

    def delete_board(self, board_id: str, agency_id: str) -> None:
        self._get(board_id, agency_id)
        self._store.delete_board(board_id)
        self._logger.info("board.deleted", board_id=board_id, agency_id=agency_id)

    def duplicate_board(self, board_id: str, agency_id: str) -> Board:
        """Copy configuration into a new, inactive board."""
        source = self._get(board_id, agency_id)
        copy = source.model_copy(
            update={
                "board_id": self._id_factory(),
                "name": f"{source.name} (Copy)",
                "is_active": False,
                "config_version": 0,
            },
            deep=True,
        )
        self._store.save_board(copy)
        self._logger.info("board.duplicated", source_board_id=board_id, board_id=copy.board_id)
        return copy

    def list_boards(self, agency_id: str) -> list[BoardSummary]:
        return [
            BoardSummary(
                board=board,
                application_count=len(self._store.list_board_applications(board.board_id)),
            )
            for board in self._store.list_boards(agency_id)
        ]

    def agency_distribution(self, agency_id: str) -> ScoreDistribution:
        return score_distribution(self._store.agency_scores(agency_id), self._bands)

    def _get(self, board_id: str, agency_id: str) -> Board:
        board = self._store.get_board(board_id, agency_id)
        if board is None:
            raise BoardNotFoundError(board_id, agency_id)
        return board

    @staticmethod
    def _clean_name(name: Any) -> str:
        if not isinstance(name, str) or not name.strip():
            raise InvalidBoardError("Board name is required")
        return name.strip()


def _as_requirements(value: Requirements | Mapping[str, Any] | None) -> Requirements:
    if value is None:
        return Requirements()
    if isinstance(value, Requirements):
        return value
    return Requirements.model_validate(dict(value))


def _as_weights(value: Weights | Mapping[str, Any] | None) -> Weights:
    if value is None:
        return Weights()
    if isinstance(value, Weights):
        return value
    return Weights.model_validate(dict(value))
