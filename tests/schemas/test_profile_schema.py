from __future__ import annotations

from datetime import date

import pytest

from boardmatch.schemas import Application, CandidateProfile


def test_candidate_profile_defaults():
    profile = CandidateProfile()

    assert profile.profile_id is None
    assert profile.age is None
    assert profile.comfort_levels == []
    assert profile.skills == []
    assert profile.city is None
    assert profile.social_reach is None


def test_candidate_profile_coerces_numeric_strings():
    profile = CandidateProfile(height_cm="172", bust=" 86.5 ", waist="n/a", age="24")

    assert profile.height_cm == pytest.approx(172.0)
    assert profile.bust == pytest.approx(86.5)
    assert profile.waist is None
    assert profile.age == 24


def test_candidate_profile_parses_serialized_lists():
    profile = CandidateProfile(
        comfort_levels='["swimwear", "lingerie"]',
        skills="[broken",
        languages=["English", "French"],
    )

    assert profile.comfort_levels == ["swimwear", "lingerie"]
    assert profile.skills == []
    assert profile.languages == ["English", "French"]


def test_candidate_profile_date_of_birth_is_lenient():
    assert CandidateProfile(date_of_birth="1999-04-30").date_of_birth == date(1999, 4, 30)
    assert CandidateProfile(date_of_birth="someday").date_of_birth is None


def test_candidate_profile_keeps_extra_fields_and_blank_text():
    profile = CandidateProfile(profile_id=42, gender="  ", instagram="@someone")

    assert profile.profile_id == "42"
    assert profile.gender is None
    assert profile.model_extra == {"instagram": "@someone"}


def test_application_match_score_bounds():
    application = Application(application_id="APP-1", agency_id="A-1", match_score=100)

    assert application.match_score == 100
    with pytest.raises(ValueError):
        Application(application_id="APP-1", agency_id="A-1", match_score=101)
