"""
Relational store.

Uses SQLAlchemy so the same code runs on SQLite for local work and on a
server database in production. One board membership per application is a
schema constraint: ``board_applications.application_id`` is the primary key.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    create_engine,
    delete,
    select,
    update,
)
from sqlalchemy.orm import declarative_base, sessionmaker

from ..schemas import (
    BOARD_METADATA_FIELDS,
    Application,
    Board,
    BoardApplication,
    CandidateProfile,
    Requirements,
    Weights,
)
from ..schemas.fields import parse_details, parse_score
from .base import ScoreUpdate, ScoringRow

Base = declarative_base()


class BoardRow(Base):
    """Board metadata."""

    __tablename__ = "boards"

    id = Column(String, primary_key=True)
    agency_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    config_version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


class RequirementsRow(Base):
    """Board requirements; list columns hold JSON arrays."""

    __tablename__ = "board_requirements"

    board_id = Column(String, ForeignKey("boards.id", ondelete="CASCADE"), primary_key=True)
    min_age = Column(Float)
    max_age = Column(Float)
    min_height_cm = Column(Float)
    max_height_cm = Column(Float)
    min_bust = Column(Float)
    max_bust = Column(Float)
    min_waist = Column(Float)
    max_waist = Column(Float)
    min_hips = Column(Float)
    max_hips = Column(Float)
    genders = Column(JSON, nullable=False, default=list)
    body_types = Column(JSON, nullable=False, default=list)
    comfort_levels = Column(JSON, nullable=False, default=list)
    experience_levels = Column(JSON, nullable=False, default=list)
    skills = Column(JSON, nullable=False, default=list)
    locations = Column(JSON, nullable=False, default=list)
    min_social_reach = Column(Float)
    social_reach_importance = Column(String(20))


class WeightsRow(Base):
    """Board scoring weights."""

    __tablename__ = "board_scoring_weights"

    board_id = Column(String, ForeignKey("boards.id", ondelete="CASCADE"), primary_key=True)
    age_weight = Column(Float, nullable=False, default=0.0)
    height_weight = Column(Float, nullable=False, default=0.0)
    measurements_weight = Column(Float, nullable=False, default=0.0)
    body_type_weight = Column(Float, nullable=False, default=0.0)
    comfort_weight = Column(Float, nullable=False, default=0.0)
    experience_weight = Column(Float, nullable=False, default=0.0)
    skills_weight = Column(Float, nullable=False, default=0.0)
    location_weight = Column(Float, nullable=False, default=0.0)
    social_reach_weight = Column(Float, nullable=False, default=0.0)


class ProfileRow(Base):
    """Candidate profile snapshot as a JSON document."""

    __tablename__ = "profiles"

    id = Column(String, primary_key=True)
    data = Column(JSON, nullable=False, default=dict)


class ApplicationRow(Base):
    """Application with its cached match fields."""

    __tablename__ = "applications"

    id = Column(String, primary_key=True)
    agency_id = Column(String, nullable=False, index=True)
    profile_id = Column(String, nullable=True)
    board_id = Column(String, ForeignKey("boards.id", ondelete="SET NULL"), nullable=True, index=True)
    match_score = Column(Integer, nullable=True, index=True)
    match_calculated_at = Column(DateTime(timezone=True), nullable=True)


class BoardApplicationRow(Base):
    """Board membership with the stored score breakdown."""

    __tablename__ = "board_applications"

    application_id = Column(
        String,
        ForeignKey("applications.id", ondelete="CASCADE"),
        primary_key=True,
    )
    board_id = Column(String, ForeignKey("boards.id", ondelete="CASCADE"), nullable=False, index=True)
    match_score = Column(Integer, nullable=True, index=True)
    match_details = Column(JSON, nullable=True)
    is_primary = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime(timezone=True), nullable=True)


class SqlMatchStore:
    """``MatchStore`` backed by a SQLAlchemy engine."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self._engine = create_engine(url, echo=echo)
        self._sessions = sessionmaker(bind=self._engine, expire_on_commit=False)

    @classmethod
    def for_path(cls, db_path: Path) -> "SqlMatchStore":
        """Open (and create parent directories for) a SQLite database file."""
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return cls(f"sqlite:///{db_path}")

    def init_schema(self) -> None:
        Base.metadata.create_all(self._engine)

    def get_board(self, board_id: str, agency_id: str | None = None) -> Board | None:
        with self._sessions() as session:
            row = session.get(BoardRow, board_id)
            if row is None or (agency_id is not None and row.agency_id != agency_id):
                return None
            return self._board_from_rows(
                row,
                session.get(RequirementsRow, board_id),
                session.get(WeightsRow, board_id),
            )

    def list_boards(self, agency_id: str) -> list[Board]:
        with self._sessions() as session:
            rows = session.scalars(
                select(BoardRow)
                .where(BoardRow.agency_id == agency_id)
                .order_by(BoardRow.sort_order, BoardRow.created_at)
            ).all()
            return [
                self._board_from_rows(
                    row,
                    session.get(RequirementsRow, row.id),
                    session.get(WeightsRow, row.id),
                )
                for row in rows
            ]

    def save_board(self, board: Board) -> Board:
        with self._sessions.begin() as session:
            row = session.get(BoardRow, board.board_id)
            if row is None:
                row = BoardRow(id=board.board_id)
                session.add(row)
            row.agency_id = board.agency_id
            row.name = board.name
            row.description = board.description
            row.is_active = board.is_active
            row.sort_order = board.sort_order
            row.config_version = board.config_version
            if board.requirements is not None:
                session.merge(RequirementsRow(board_id=board.board_id, **board.requirements.model_dump()))
            if board.weights is not None:
                session.merge(WeightsRow(board_id=board.board_id, **board.weights.model_dump()))
        return board

    def update_board_metadata(self, board_id: str, changes: Mapping[str, Any]) -> Board:
        with self._sessions.begin() as session:
            row = self._require_board(session, board_id)
            for key, value in changes.items():
                if key in BOARD_METADATA_FIELDS:
                    setattr(row, key, value)
            session.flush()
            return self._board_from_rows(
                row,
                session.get(RequirementsRow, board_id),
                session.get(WeightsRow, board_id),
            )

    def save_requirements(self, board_id: str, requirements: Requirements) -> int:
        with self._sessions.begin() as session:
            board = self._require_board(session, board_id)
            session.merge(RequirementsRow(board_id=board_id, **requirements.model_dump()))
            board.config_version += 1
            return board.config_version

    def save_weights(self, board_id: str, weights: Weights) -> int:
        with self._sessions.begin() as session:
            board = self._require_board(session, board_id)
            session.merge(WeightsRow(board_id=board_id, **weights.model_dump()))
            board.config_version += 1
            return board.config_version

    def delete_board(self, board_id: str) -> None:
        with self._sessions.begin() as session:
            session.execute(delete(BoardApplicationRow).where(BoardApplicationRow.board_id == board_id))
            session.execute(
                update(ApplicationRow)
                .where(ApplicationRow.board_id == board_id)
                .values(board_id=None, match_score=None, match_calculated_at=None)
            )
            session.execute(delete(RequirementsRow).where(RequirementsRow.board_id == board_id))
            session.execute(delete(WeightsRow).where(WeightsRow.board_id == board_id))
            session.execute(delete(BoardRow).where(BoardRow.id == board_id))

    def get_application(self, application_id: str) -> Application | None:
        with self._sessions() as session:
            row = session.get(ApplicationRow, application_id)
            return self._application_from_row(row) if row else None

    def save_application(self, application: Application) -> Application:
        with self._sessions.begin() as session:
            session.merge(
                ApplicationRow(
                    id=application.application_id,
                    agency_id=application.agency_id,
                    profile_id=application.profile_id,
                    board_id=application.board_id,
                    match_score=application.match_score,
                    match_calculated_at=application.match_calculated_at,
                )
            )
        return application

    def get_profile(self, profile_id: str) -> CandidateProfile | None:
        with self._sessions() as session:
            row = session.get(ProfileRow, profile_id)
            if row is None:
                return None
            return CandidateProfile.model_validate(self._profile_payload(row))

    def save_profile(self, profile: CandidateProfile) -> CandidateProfile:
        if profile.profile_id is None:
            raise ValueError("profile_id is required to store a profile")
        data = profile.model_dump(mode="json", exclude={"profile_id"})
        with self._sessions.begin() as session:
            session.merge(ProfileRow(id=profile.profile_id, data=data))
        return profile

    def list_board_applications(self, board_id: str) -> list[BoardApplication]:
        with self._sessions() as session:
            rows = session.scalars(
                select(BoardApplicationRow)
                .where(BoardApplicationRow.board_id == board_id)
                .order_by(BoardApplicationRow.application_id)
            ).all()
            return [self._membership_from_row(row) for row in rows]

    def load_scoring_batch(self, board_id: str, agency_id: str) -> list[ScoringRow]:
        stmt = (
            select(BoardApplicationRow, ApplicationRow, ProfileRow)
            .join(ApplicationRow, ApplicationRow.id == BoardApplicationRow.application_id)
            .outerjoin(ProfileRow, ProfileRow.id == ApplicationRow.profile_id)
            .where(
                BoardApplicationRow.board_id == board_id,
                ApplicationRow.agency_id == agency_id,
            )
            .order_by(BoardApplicationRow.application_id)
        )
        with self._sessions() as session:
            return [
                ScoringRow(
                    membership=self._membership_from_row(membership),
                    application=self._application_from_row(application),
                    # Validation is left to the caller so one bad document
                    # cannot fail the whole batch read.
                    profile=self._profile_payload(profile) if profile else None,
                )
                for membership, application, profile in session.execute(stmt)
            ]

    def write_scores(
        self,
        board_id: str,
        config_version: int,
        updates: list[ScoreUpdate],
        calculated_at: datetime,
    ) -> bool:
        with self._sessions.begin() as session:
            current_version = session.scalar(
                select(BoardRow.config_version).where(BoardRow.id == board_id)
            )
            if current_version is None or current_version != config_version:
                return False

            members = set(
                session.scalars(
                    select(BoardApplicationRow.application_id).where(
                        BoardApplicationRow.board_id == board_id,
                        BoardApplicationRow.application_id.in_(
                            [item.application_id for item in updates]
                        ),
                    )
                )
            )
            pending = [item for item in updates if item.application_id in members]
            if not pending:
                return True

            session.execute(
                update(BoardApplicationRow),
                [
                    {
                        "application_id": item.application_id,
                        "match_score": item.match_score,
                        "match_details": item.match_details,
                        "updated_at": calculated_at,
                    }
                    for item in pending
                ],
            )
            session.execute(
                update(ApplicationRow),
                [
                    {
                        "id": item.application_id,
                        "match_score": item.match_score,
                        "match_calculated_at": calculated_at,
                    }
                    for item in pending
                ],
            )
            return True

    def replace_membership(
        self,
        application_id: str,
        membership: BoardApplication | None,
        calculated_at: datetime | None,
    ) -> None:
        with self._sessions.begin() as session:
            session.execute(
                delete(BoardApplicationRow).where(
                    BoardApplicationRow.application_id == application_id
                )
            )
            if membership is not None:
                session.add(
                    BoardApplicationRow(
                        application_id=application_id,
                        board_id=membership.board_id,
                        match_score=membership.match_score,
                        match_details=membership.match_details,
                        is_primary=membership.is_primary,
                        updated_at=membership.updated_at,
                    )
                )
            row = session.get(ApplicationRow, application_id)
            if row is None:
                return
            row.board_id = membership.board_id if membership else None
            row.match_score = membership.match_score if membership else None
            row.match_calculated_at = calculated_at if membership else None

    def agency_scores(self, agency_id: str) -> list[int | None]:
        with self._sessions() as session:
            scores = session.scalars(
                select(BoardApplicationRow.match_score)
                .join(ApplicationRow, ApplicationRow.id == BoardApplicationRow.application_id)
                .where(ApplicationRow.agency_id == agency_id)
            )
            return [parse_score(score) for score in scores]

    @staticmethod
    def _require_board(session: Any, board_id: str) -> BoardRow:
        board = session.get(BoardRow, board_id)
        if board is None:
            raise KeyError(board_id)
        return board

    @staticmethod
    def _board_from_rows(
        row: BoardRow,
        requirements: RequirementsRow | None,
        weights: WeightsRow | None,
    ) -> Board:
        return Board(
            board_id=row.id,
            agency_id=row.agency_id,
            name=row.name,
            description=row.description,
            is_active=row.is_active,
            sort_order=row.sort_order,
            config_version=row.config_version,
            requirements=Requirements.model_validate(_columns(requirements)) if requirements else None,
            weights=Weights.model_validate(_columns(weights)) if weights else None,
        )

    @staticmethod
    def _application_from_row(row: ApplicationRow) -> Application:
        return Application(
            application_id=row.id,
            agency_id=row.agency_id,
            profile_id=row.profile_id,
            board_id=row.board_id,
            match_score=parse_score(row.match_score),
            match_calculated_at=row.match_calculated_at,
        )

    @staticmethod
    def _membership_from_row(row: BoardApplicationRow) -> BoardApplication:
        # Older rows may hold serialized details or out-of-range scores.
        return BoardApplication(
            board_id=row.board_id,
            application_id=row.application_id,
            match_score=parse_score(row.match_score),
            match_details=parse_details(row.match_details),
            is_primary=row.is_primary,
            updated_at=row.updated_at,
        )

    @staticmethod
    def _profile_payload(row: ProfileRow) -> Any:
        if isinstance(row.data, Mapping):
            return {**row.data, "profile_id": row.id}
        return row.data


def _columns(row: Any) -> dict[str, Any]:
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}
