"""Core matching engine components."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..schemas import CandidateProfile, Requirements

# NOTE: keep imports explicit for export clarity.
from .distribution import ScoreBands, ScoreDistribution, score_distribution
from .filters import HardFilterResult, passes_hard_filters, resolve_age
from .matching import MatchResult, MatchScorer, calculate_match_score
from .scorers import (
    CRITERIA,
    Criterion,
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


@runtime_checkable
class CriterionScorer(Protocol):
    """Contract for a single criterion scorer."""

    def __call__(self, profile: CandidateProfile, requirements: Requirements) -> float:
        """Return a score in [0, 100] for the profile under the requirements."""


__all__ = [
    "CRITERIA",
    "Criterion",
    "CriterionScorer",
    "HardFilterResult",
    "MatchResult",
    "MatchScorer",
    "ScoreBands",
    "ScoreDistribution",
    "calculate_match_score",
    "passes_hard_filters",
    "resolve_age",
    "score_age",
    "score_body_type",
    "score_comfort",
    "score_distribution",
    "score_experience",
    "score_height",
    "score_location",
    "score_measurements",
    "score_skills",
    "score_social_reach",
]
