from __future__ import annotations

from datetime import date
from typing import Any

import pytest

from boardmatch.core import (
    CRITERIA,
    CriterionScorer,
    score_age,
    score_body_type,
    score_comfort,
    score_experience,
    score_height,
    score_location,
    score_measurements,
    score_skills,
    score_social_reach,
)
from boardmatch.core.scorers import round_half_up
from boardmatch.schemas import CandidateProfile, Requirements


def build_profile(**kwargs: Any) -> CandidateProfile:
    defaults: dict[str, Any] = {"profile_id": "P-100"}
    defaults.update(kwargs)
    return CandidateProfile(**defaults)


def test_registry_covers_nine_criteria_in_order():
    assert [c.key for c in CRITERIA] == [
        "age",
        "height",
        "measurements",
        "body_type",
        "comfort",
        "experience",
        "skills",
        "location",
        "social_reach",
    ]
    assert all(isinstance(c.scorer, CriterionScorer) for c in CRITERIA)


def test_round_half_up():
    assert round_half_up(12.5) == 13
    assert round_half_up(66.666) == 67
    assert round_half_up(0.49) == 0


def test_age_scores():
    requirements = Requirements(min_age=18, max_age=30)

    assert score_age(build_profile(age=25), Requirements()) == 100
    assert score_age(build_profile(), Requirements()) == 100
    assert score_age(build_profile(age=25), requirements) == 100
    assert score_age(build_profile(age=35), requirements) == 0
    assert score_age(build_profile(), requirements) == 0
    assert score_age(build_profile(date_of_birth="2000-01-01"), requirements, date(2026, 1, 1)) == 100


@pytest.mark.parametrize(
    ("height", "expected"),
    [(170, 100), (180, 100), (185, 100), (165, 50), (155, 0), (140, 0), (188, 70), (169.5, 95)],
)
def test_height_linear_falloff(height, expected):
    requirements = Requirements(min_height_cm=170, max_height_cm=185)

    assert score_height(build_profile(height_cm=height), requirements) == pytest.approx(expected)


def test_height_without_range_or_value():
    assert score_height(build_profile(), Requirements()) == 100
    assert score_height(build_profile(), Requirements(max_height_cm=180)) == 0


def test_measurements_average_configured_dimensions_only():
    requirements = Requirements(min_bust=80, max_bust=90, min_waist=60, max_waist=70)

    assert score_measurements(build_profile(bust="85", waist=75, hips=200), requirements) == 50
    assert score_measurements(build_profile(bust=85, waist=65), requirements) == 100
    assert score_measurements(build_profile(), requirements) == 0
    assert score_measurements(build_profile(), Requirements()) == 100


def test_measurements_one_sided_bound():
    requirements = Requirements(max_hips=95)

    assert score_measurements(build_profile(hips=90), requirements) == 100
    assert score_measurements(build_profile(hips=99), requirements) == 0


def test_body_type_and_experience_allow_lists():
    body = Requirements(body_types=["slim", "athletic"])
    experience = Requirements(experience_levels=["professional"])

    assert score_body_type(build_profile(body_type="slim"), body) == 100
    assert score_body_type(build_profile(body_type="curvy"), body) == 0
    assert score_body_type(build_profile(), body) == 0
    assert score_body_type(build_profile(), Requirements()) == 100
    assert score_experience(build_profile(experience_level="professional"), experience) == 100
    assert score_experience(build_profile(experience_level="beginner"), experience) == 0
    assert score_experience(build_profile(), Requirements()) == 100


def test_comfort_and_skills_fractional_match():
    comfort = Requirements(comfort_levels=["A", "B", "C"])
    skills = Requirements(skills='["acting", "dance", "singing"]')

    assert score_comfort(build_profile(comfort_levels=["A", "B"]), comfort) == 67
    assert score_comfort(build_profile(), comfort) == 0
    assert score_comfort(build_profile(comfort_levels=["Z"]), Requirements()) == 100
    assert score_skills(build_profile(skills='["dance", "acting", "singing"]'), skills) == 100
    assert score_skills(build_profile(skills=["dance"]), skills) == 33
    assert score_skills(build_profile(skills="{bad json"), skills) == 0


def test_location_substring_match_case_insensitive():
    requirements = Requirements(locations=["paris", "LOND"])

    assert score_location(build_profile(city="Paris, France"), requirements) == 100
    assert score_location(build_profile(city="Berlin", city_secondary="London"), requirements) == 100
    assert score_location(build_profile(city="Berlin"), requirements) == 0
    assert score_location(build_profile(), requirements) == 0
    assert score_location(build_profile(), Requirements()) == 100


@pytest.mark.parametrize(
    ("reach", "expected"),
    [(None, 0), (0, 0), (500, 50), (125, 13), (1000, 100), (25_000, 100)],
)
def test_social_reach_linear_ramp(reach, expected):
    requirements = Requirements(min_social_reach=1000)

    assert score_social_reach(build_profile(social_reach=reach), requirements) == expected


def test_social_reach_without_threshold():
    assert score_social_reach(build_profile(), Requirements()) == 100
