"""Score band distribution for agency dashboards."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .scorers import round_half_up


@dataclass(frozen=True, slots=True)
class ScoreBands:
    """Lower bounds (inclusive) of each named band."""

    excellent: int = 80
    good: int = 60
    fair: int = 40


@dataclass(slots=True)
class ScoreDistribution:
    excellent: int = 0
    good: int = 0
    fair: int = 0
    poor: int = 0
    average: int = 0
    count: int = 0


def score_distribution(
    scores: Iterable[int | float | None],
    bands: ScoreBands | None = None,
) -> ScoreDistribution:
    bands = bands or ScoreBands()
    values = [float(score) for score in scores if score is not None]
    distribution = ScoreDistribution(count=len(values))
    for value in values:
        if value >= bands.excellent:
            distribution.excellent += 1
        elif value >= bands.good:
            distribution.good += 1
        elif value >= bands.fair:
            distribution.fair += 1
        else:
            distribution.poor += 1
    if values:
        distribution.average = round_half_up(sum(values) / len(values))
    return distribution


__all__ = ["ScoreBands", "ScoreDistribution", "score_distribution"]
