"""Per-criterion scorers.

Every scorer is a pure, total function of ``(profile, requirements)`` that
returns a value in ``[0, 100]``. An unconfigured requirement scores 100;
missing candidate data scores 0 once the requirement exists.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable

from ..schemas import CandidateProfile, Requirements
from .filters import resolve_age

FULL_SCORE = 100
HEIGHT_PENALTY_PER_CM = 10
MEASUREMENT_DIMENSIONS: tuple[str, ...] = ("bust", "waist", "hips")

Scorer = Callable[[CandidateProfile, Requirements], float]


def round_half_up(value: float) -> int:
    """Round with .5 going up, independent of banker's rounding."""
    return int(math.floor(value + 0.5))


def score_age(
    profile: CandidateProfile,
    requirements: Requirements,
    today: date | None = None,
) -> float:
    if not requirements.has_range("age"):
        return FULL_SCORE
    age = resolve_age(profile, today)
    if age is None:
        return 0
    return FULL_SCORE if _within(age, *requirements.bounds("age")) else 0


def score_height(profile: CandidateProfile, requirements: Requirements) -> float:
    """Linear falloff of 10 points per centimetre outside the nearer bound."""
    if not requirements.has_range("height_cm"):
        return FULL_SCORE
    height = profile.height_cm
    if not height:
        return 0
    minimum, maximum = requirements.bounds("height_cm")
    if _within(height, minimum, maximum):
        return FULL_SCORE

    if minimum is not None and height < minimum:
        distance = minimum - height
    else:
        distance = height - maximum
    return max(0, FULL_SCORE - distance * HEIGHT_PENALTY_PER_CM)


def score_measurements(profile: CandidateProfile, requirements: Requirements) -> float:
    """Mean of the configured bust/waist/hips dimensions, each 0 or 100."""
    scores: list[float] = []
    for dimension in MEASUREMENT_DIMENSIONS:
        if not requirements.has_range(dimension):
            continue
        value = getattr(profile, dimension)
        if not value:
            scores.append(0)
            continue
        scores.append(FULL_SCORE if _within(value, *requirements.bounds(dimension)) else 0)

    if not scores:
        return FULL_SCORE
    return sum(scores) / len(scores)


def score_body_type(profile: CandidateProfile, requirements: Requirements) -> float:
    return _allow_list_score(profile.body_type, requirements.body_types)


def score_comfort(profile: CandidateProfile, requirements: Requirements) -> float:
    return _fraction_score(requirements.comfort_levels, profile.comfort_levels)


def score_experience(profile: CandidateProfile, requirements: Requirements) -> float:
    return _allow_list_score(profile.experience_level, requirements.experience_levels)


def score_skills(profile: CandidateProfile, requirements: Requirements) -> float:
    return _fraction_score(requirements.skills, profile.skills)


def score_location(profile: CandidateProfile, requirements: Requirements) -> float:
    """Case-insensitive substring match against primary or secondary city."""
    if not requirements.locations:
        return FULL_SCORE
    cities = [city.casefold() for city in (profile.city, profile.city_secondary) if city]
    for location in requirements.locations:
        needle = location.casefold()
        if any(needle in city for city in cities):
            return FULL_SCORE
    return 0


def score_social_reach(profile: CandidateProfile, requirements: Requirements) -> float:
    threshold = requirements.min_social_reach
    if threshold is None:
        return FULL_SCORE
    reach = profile.social_reach or 0
    if reach <= 0:
        return 0
    if reach >= threshold:
        return FULL_SCORE
    return round_half_up(reach / threshold * FULL_SCORE)


@dataclass(frozen=True, slots=True)
class Criterion:
    """One weighted scoring dimension."""

    key: str
    weight_field: str
    scorer: Scorer


CRITERIA: tuple[Criterion, ...] = (
    Criterion("age", "age_weight", score_age),
    Criterion("height", "height_weight", score_height),
    Criterion("measurements", "measurements_weight", score_measurements),
    Criterion("body_type", "body_type_weight", score_body_type),
    Criterion("comfort", "comfort_weight", score_comfort),
    Criterion("experience", "experience_weight", score_experience),
    Criterion("skills", "skills_weight", score_skills),
    Criterion("location", "location_weight", score_location),
    Criterion("social_reach", "social_reach_weight", score_social_reach),
)


def _within(value: float, minimum: float | None, maximum: float | None) -> bool:
    if minimum is not None and value < minimum:
        return False
    if maximum is not None and value > maximum:
        return False
    return True


def _allow_list_score(value: str | None, allowed: list[str]) -> float:
    if not allowed:
        return FULL_SCORE
    if not value:
        return 0
    return FULL_SCORE if value in allowed else 0


def _fraction_score(required: list[str], available: Iterable[str]) -> float:
    if not required:
        return FULL_SCORE
    present = set(available)
    if not present:
        return 0
    matches = sum(1 for item in required if item in present)
    return round_half_up(matches / len(required) * FULL_SCORE)


__all__ = [
    "CRITERIA",
    "Criterion",
    "round_half_up",
    "score_age",
    "score_body_type",
    "score_comfort",
    "score_experience",
    "score_height",
    "score_location",
    "score_measurements",
    "score_skills",
    "score_social_reach",
]
