"""Dictionary-backed store used by tests and embedded callers."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from ..schemas import (
    BOARD_METADATA_FIELDS,
    Application,
    Board,
    BoardApplication,
    CandidateProfile,
    Requirements,
    Weights,
)
from .base import ScoreUpdate, ScoringRow


class InMemoryMatchStore:
    """Thread-safe in-process implementation of ``MatchStore``.

    Memberships are keyed by application id, so an application can never
    sit on two boards at once.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._boards: dict[str, Board] = {}
        self._applications: dict[str, Application] = {}
        self._profiles: dict[str, CandidateProfile] = {}
        self._memberships: dict[str, BoardApplication] = {}

    def get_board(self, board_id: str, agency_id: str | None = None) -> Board | None:
        with self._lock:
            board = self._boards.get(board_id)
            if board is None or (agency_id is not None and board.agency_id != agency_id):
                return None
            return board.model_copy(deep=True)

    def list_boards(self, agency_id: str) -> list[Board]:
        with self._lock:
            boards = [b for b in self._boards.values() if b.agency_id == agency_id]
            boards.sort(key=lambda b: b.sort_order)
            return [b.model_copy(deep=True) for b in boards]

    def save_board(self, board: Board) -> Board:
        with self._lock:
            self._boards[board.board_id] = board.model_copy(deep=True)
            return board

    def update_board_metadata(self, board_id: str, changes: Mapping[str, Any]) -> Board:
        update = {k: v for k, v in changes.items() if k in BOARD_METADATA_FIELDS}
        with self._lock:
            board = self._boards[board_id].model_copy(update=update)
            self._boards[board_id] = board
            return board.model_copy(deep=True)

    def save_requirements(self, board_id: str, requirements: Requirements) -> int:
        return self._update_config(board_id, requirements=requirements)

    def save_weights(self, board_id: str, weights: Weights) -> int:
        return self._update_config(board_id, weights=weights)

    def _update_config(self, board_id: str, **config: Requirements | Weights) -> int:
        with self._lock:
            board = self._boards[board_id]
            version = board.config_version + 1
            update = {k: v.model_copy(deep=True) for k, v in config.items()}
            self._boards[board_id] = board.model_copy(
                update={**update, "config_version": version}
            )
            return version

    def delete_board(self, board_id: str) -> None:
        with self._lock:
            self._boards.pop(board_id, None)
            for application_id, membership in list(self._memberships.items()):
                if membership.board_id == board_id:
                    del self._memberships[application_id]
            for application_id, application in self._applications.items():
                if application.board_id == board_id:
                    self._applications[application_id] = application.model_copy(
                        update={
                            "board_id": None,
                            "match_score": None,
                            "match_calculated_at": None,
                        }
                    )

    def get_application(self, application_id: str) -> Application | None:
        with self._lock:
            application = self._applications.get(application_id)
            return application.model_copy() if application else None

    def save_application(self, application: Application) -> Application:
        with self._lock:
            self._applications[application.application_id] = application.model_copy()
            return application

    def get_profile(self, profile_id: str) -> CandidateProfile | None:
        with self._lock:
            profile = self._profiles.get(profile_id)
            return profile.model_copy(deep=True) if profile else None

    def save_profile(self, profile: CandidateProfile) -> CandidateProfile:
        if profile.profile_id is None:
            raise ValueError("profile_id is required to store a profile")
        with self._lock:
            self._profiles[profile.profile_id] = profile.model_copy(deep=True)
            return profile

    def list_board_applications(self, board_id: str) -> list[BoardApplication]:
        with self._lock:
            return [
                m.model_copy(deep=True)
                for m in sorted(self._memberships.values(), key=lambda m: m.application_id)
                if m.board_id == board_id
            ]

    def load_scoring_batch(self, board_id: str, agency_id: str) -> list[ScoringRow]:
        with self._lock:
            rows: list[ScoringRow] = []
            for membership in self.list_board_applications(board_id):
                application = self._applications.get(membership.application_id)
                if application is None or application.agency_id != agency_id:
                    continue
                profile = (
                    self.get_profile(application.profile_id)
                    if application.profile_id
                    else None
                )
                rows.append(ScoringRow(membership, application.model_copy(), profile))
            return rows

    def write_scores(
        self,
        board_id: str,
        config_version: int,
        updates: list[ScoreUpdate],
        calculated_at: datetime,
    ) -> bool:
        with self._lock:
            board = self._boards.get(board_id)
            if board is None or board.config_version != config_version:
                return False
            for update in updates:
                membership = self._memberships.get(update.application_id)
                # Reassigned since the batch was read.
                if membership is None or membership.board_id != board_id:
                    continue
                self._memberships[update.application_id] = membership.model_copy(
                    update={
                        "match_score": update.match_score,
                        "match_details": update.match_details,
                        "updated_at": calculated_at,
                    }
                )
                application = self._applications.get(update.application_id)
                if application is not None:
                    self._applications[update.application_id] = application.model_copy(
                        update={
                            "match_score": update.match_score,
                            "match_calculated_at": calculated_at,
                        }
                    )
            return True

    def replace_membership(
        self,
        application_id: str,
        membership: BoardApplication | None,
        calculated_at: datetime | None,
    ) -> None:
        with self._lock:
            self._memberships.pop(application_id, None)
            application = self._applications.get(application_id)
            if membership is not None:
                self._memberships[application_id] = membership.model_copy(deep=True)
            if application is None:
                return
            self._applications[application_id] = application.model_copy(
                update={
                    "board_id": membership.board_id if membership else None,
                    "match_score": membership.match_score if membership else None,
                    "match_calculated_at": calculated_at if membership else None,
                }
            )

    def agency_scores(self, agency_id: str) -> list[int | None]:
        with self._lock:
            agency_applications = {
                application_id
                for application_id, application in self._applications.items()
                if application.agency_id == agency_id
            }
            return [
                membership.match_score
                for membership in self._memberships.values()
                if membership.application_id in agency_applications
            ]
