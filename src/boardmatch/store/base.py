"""Storage contract and transfer objects shared by the stores."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from ..schemas import (
    Application,
    Board,
    BoardApplication,
    CandidateProfile,
    Requirements,
    Weights,
)


@dataclass(slots=True)
class ScoringRow:
    """One board member loaded for recalculation."""

    membership: BoardApplication
    application: Application
    profile: CandidateProfile | Mapping[str, Any] | None


@dataclass(slots=True)
class ScoreUpdate:
    """Computed score for one application, ready to persist."""

    application_id: str
    match_score: int
    match_details: dict[str, Any]


@runtime_checkable
class MatchStore(Protocol):
    """Storage contract used by the orchestration services.

    Implementations own atomicity: ``write_scores`` and
    ``replace_membership`` must apply all of their changes or none.
    An application has at most one board membership at a time.
    """

    def get_board(self, board_id: str, agency_id: str | None = None) -> Board | None:
        """Return the board, restricted to ``agency_id`` when given."""

    def list_boards(self, agency_id: str) -> list[Board]:
        """Return the agency's boards ordered by ``sort_order``."""

    def save_board(self, board: Board) -> Board:
        """Insert or update board metadata and its configuration."""

    def update_board_metadata(self, board_id: str, changes: Mapping[str, Any]) -> Board:
        """Write only name/description/is_active/sort_order; keep configuration and version."""

    def save_requirements(self, board_id: str, requirements: Requirements) -> int:
        """Replace the board requirements and return the new config version."""

    def save_weights(self, board_id: str, weights: Weights) -> int:
        """Replace the board weights and return the new config version."""

    def delete_board(self, board_id: str) -> None:
        """Delete the board, its memberships and the matching cache fields."""

    def get_application(self, application_id: str) -> Application | None:
        """Return the application if it exists."""

    def save_application(self, application: Application) -> Application:
        """Insert or update an application."""

    def get_profile(self, profile_id: str) -> CandidateProfile | None:
        """Return the candidate profile snapshot if it exists."""

    def save_profile(self, profile: CandidateProfile) -> CandidateProfile:
        """Insert or update a candidate profile snapshot."""

    def list_board_applications(self, board_id: str) -> list[BoardApplication]:
        """Return every membership row of the board."""

    def load_scoring_batch(self, board_id: str, agency_id: str) -> list[ScoringRow]:
        """Bulk-read members of the board that belong to ``agency_id``."""

    def write_scores(
        self,
        board_id: str,
        config_version: int,
        updates: list[ScoreUpdate],
        calculated_at: datetime,
    ) -> bool:
        """Persist scores unless the board's config version moved on."""

    def replace_membership(
        self,
        application_id: str,
        membership: BoardApplication | None,
        calculated_at: datetime | None,
    ) -> None:
        """Drop current memberships, then attach ``membership`` if given."""

    def agency_scores(self, agency_id: str) -> list[int | None]:
        """Return stored board scores for all of the agency's applications."""
