from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from boardmatch.schemas import (
    Application,
    Board,
    BoardApplication,
    CandidateProfile,
    Requirements,
    Weights,
)
from boardmatch.store import InMemoryMatchStore, MatchStore, ScoreUpdate, SqlMatchStore
from boardmatch.store.sql import BoardApplicationRow, ProfileRow

CALCULATED_AT = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(params=["memory", "sql"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> MatchStore:
    if request.param == "memory":
        return InMemoryMatchStore()
    sql_store = SqlMatchStore.for_path(tmp_path / "db" / "boardmatch.db")
    sql_store.init_schema()
    return sql_store


def seed(store: MatchStore) -> None:
    store.save_board(
        Board(
            board_id="B-1",
            agency_id="A-1",
            name="Runway",
            sort_order=2,
            requirements=Requirements(min_height_cm=170, skills=["runway"]),
            weights=Weights(height_weight=2, skills_weight=1),
        )
    )
    store.save_board(Board(board_id="B-2", agency_id="A-1", name="Commercial", sort_order=1))
    store.save_board(Board(board_id="B-X", agency_id="A-2", name="Other agency"))
    store.save_profile(CandidateProfile(profile_id="P-1", height_cm=178, skills=["runway"]))
    store.save_application(Application(application_id="APP-1", agency_id="A-1", profile_id="P-1"))
    store.save_application(Application(application_id="APP-2", agency_id="A-1", profile_id="P-missing"))
    store.save_application(Application(application_id="APP-3", agency_id="A-2", profile_id="P-1"))


def join(store: MatchStore, application_id: str, board_id: str, score: int = 10) -> None:
    store.replace_membership(
        application_id,
        BoardApplication(board_id=board_id, application_id=application_id, match_score=score),
        CALCULATED_AT,
    )


def test_store_satisfies_protocol(store: MatchStore):
    assert isinstance(store, MatchStore)


def test_board_round_trip_and_agency_scoping(store: MatchStore):
    seed(store)

    board = store.get_board("B-1", "A-1")

    assert board is not None
    assert board.requirements == Requirements(min_height_cm=170, skills=["runway"])
    assert board.weights == Weights(height_weight=2, skills_weight=1)
    assert store.get_board("B-1", "A-2") is None
    assert store.get_board("B-1") is not None
    assert store.get_board("B-2", "A-1").is_configured is False
    assert [b.board_id for b in store.list_boards("A-1")] == ["B-2", "B-1"]


def test_configuration_writes_bump_version(store: MatchStore):
    seed(store)

    first = store.save_requirements("B-1", Requirements(genders=["Female"]))
    second = store.save_weights("B-1", Weights(age_weight=1))

    board = store.get_board("B-1")
    assert (first, second) == (1, 2)
    assert board.config_version == 2
    assert board.requirements.genders == ["Female"]
    assert board.requirements.min_height_cm is None
    assert board.weights.age_weight == 1


def test_replace_membership_keeps_single_board(store: MatchStore):
    seed(store)

    join(store, "APP-1", "B-1", score=40)
    join(store, "APP-1", "B-2", score=70)

    assert store.list_board_applications("B-1") == []
    [membership] = store.list_board_applications("B-2")
    assert membership.match_score == 70
    application = store.get_application("APP-1")
    assert application.board_id == "B-2"
    assert application.match_score == 70
    assert application.match_calculated_at is not None

    store.replace_membership("APP-1", None, None)

    application = store.get_application("APP-1")
    assert store.list_board_applications("B-2") == []
    assert application.board_id is None
    assert application.match_score is None
    assert application.match_calculated_at is None


def test_scoring_batch_filters_agency_and_tolerates_missing_profile(store: MatchStore):
    seed(store)
    join(store, "APP-1", "B-1")
    join(store, "APP-2", "B-1")
    join(store, "APP-3", "B-1")

    rows = store.load_scoring_batch("B-1", "A-1")

    assert [row.application.application_id for row in rows] == ["APP-1", "APP-2"]
    assert rows[0].profile is not None
    assert CandidateProfile.model_validate(rows[0].profile).height_cm == 178
    assert rows[1].profile is None


def test_write_scores_updates_membership_and_cache(store: MatchStore):
    seed(store)
    join(store, "APP-1", "B-1")

    written = store.write_scores(
        "B-1",
        0,
        [ScoreUpdate("APP-1", 88, {"height": {"score": 100, "weight": 2.0}})],
        CALCULATED_AT,
    )

    assert written is True
    [membership] = store.list_board_applications("B-1")
    assert membership.match_score == 88
    assert membership.match_details == {"height": {"score": 100, "weight": 2.0}}
    assert store.get_application("APP-1").match_score == 88


def test_write_scores_rejects_stale_version(store: MatchStore):
    seed(store)
    join(store, "APP-1", "B-1", score=10)
    store.save_weights("B-1", Weights(age_weight=1))

    written = store.write_scores("B-1", 0, [ScoreUpdate("APP-1", 99, {})], CALCULATED_AT)

    assert written is False
    assert store.list_board_applications("B-1")[0].match_score == 10
    assert store.get_application("APP-1").match_score == 10


def test_write_scores_skips_reassigned_applications(store: MatchStore):
    seed(store)
    join(store, "APP-1", "B-2", score=55)

    written = store.write_scores("B-1", 0, [ScoreUpdate("APP-1", 99, {})], CALCULATED_AT)

    assert written is True
    assert store.list_board_applications("B-2")[0].match_score == 55
    assert store.get_application("APP-1").match_score == 55


def test_delete_board_cascades(store: MatchStore):
    seed(store)
    join(store, "APP-1", "B-1", score=60)
    join(store, "APP-2", "B-2", score=30)

    store.delete_board("B-1")

    assert store.get_board("B-1") is None
    assert store.list_board_applications("B-1") == []
    application = store.get_application("APP-1")
    assert application.board_id is None
    assert application.match_score is None
    assert store.get_application("APP-2").board_id == "B-2"


def test_agency_scores(store: MatchStore):
    seed(store)
    join(store, "APP-1", "B-1", score=60)
    join(store, "APP-2", "B-2", score=30)
    join(store, "APP-3", "B-X", score=90)

    assert sorted(store.agency_scores("A-1")) == [30, 60]
    assert store.agency_scores("A-2") == [90]


def test_save_profile_requires_id(store: MatchStore):
    with pytest.raises(ValueError):
        store.save_profile(CandidateProfile(height_cm=170))


def test_config_update_for_unknown_board_raises(store: MatchStore):
    with pytest.raises(KeyError):
        store.save_weights("missing", Weights())


def test_sql_batch_passes_malformed_profile_through(tmp_path: Path):
    store = SqlMatchStore.for_path(tmp_path / "boardmatch.db")
    store.init_schema()
    seed(store)
    with store._sessions.begin() as session:
        session.add(ProfileRow(id="P-bad", data=["not", "an", "object"]))
    store.save_application(Application(application_id="APP-9", agency_id="A-1", profile_id="P-bad"))
    join(store, "APP-9", "B-1")

    [row] = store.load_scoring_batch("B-1", "A-1")

    assert row.profile == ["not", "an", "object"]


def test_metadata_update_keeps_configuration(store: MatchStore):
    seed(store)
    store.save_requirements("B-1", Requirements(min_height_cm=175))

    board = store.update_board_metadata(
        "B-1",
        {"name": "Renamed", "is_active": False, "config_version": 0, "weights": None},
    )

    stored = store.get_board("B-1")
    assert board == stored
    assert stored.name == "Renamed"
    assert stored.is_active is False
    assert stored.config_version == 1
    assert stored.requirements.min_height_cm == 175
    assert stored.weights == Weights(height_weight=2, skills_weight=1)


def test_metadata_update_for_unknown_board_raises(store: MatchStore):
    with pytest.raises(KeyError):
        store.update_board_metadata("missing", {"name": "Nope"})


def test_sql_reads_legacy_membership_rows(tmp_path: Path):
    store = SqlMatchStore.for_path(tmp_path / "boardmatch.db")
    store.init_schema()
    seed(store)
    join(store, "APP-1", "B-1", score=40)
    with store._sessions.begin() as session:
        session.add(
            BoardApplicationRow(
                application_id="APP-2",
                board_id="B-1",
                match_score=150,
                match_details='{"legacy": "text"}',
            )
        )

    memberships = {m.application_id: m for m in store.list_board_applications("B-1")}
    rows = store.load_scoring_batch("B-1", "A-1")

    assert memberships["APP-2"].match_score is None
    assert memberships["APP-2"].match_details == {"legacy": "text"}
    assert memberships["APP-1"].match_score == 40
    assert [row.application.application_id for row in rows] == ["APP-1", "APP-2"]
    assert sorted(store.agency_scores("A-1"), key=str) == [40, None]
