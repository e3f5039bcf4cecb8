"""Match score aggregation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Iterable, Mapping

import pendulum

from ..schemas import Board, CandidateProfile, Requirements, Weights
from .filters import passes_hard_filters, resolve_age
from .scorers import CRITERIA, FULL_SCORE, Criterion, round_half_up


@dataclass(slots=True)
class MatchResult:
    """Final score, gate decision and per-criterion breakdown."""

    score: int
    passed: bool
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"score": self.score, "passed": self.passed, "details": self.details}


class MatchScorer:
    """Combine hard filters and weighted criterion scores for one board."""

    def __init__(
        self,
        *,
        criteria: Iterable[Criterion] | None = None,
        today_provider: Callable[[], date] | None = None,
    ) -> None:
        self._criteria = tuple(criteria) if criteria is not None else CRITERIA
        self._today_provider = today_provider or (lambda: pendulum.today().date())

    def evaluate(
        self,
        profile: CandidateProfile | Mapping[str, Any],
        board: Board,
        *,
        today: date | None = None,
    ) -> MatchResult:
        return self.score(
            profile,
            board.requirements or Requirements(),
            board.weights or Weights(),
            today=today,
        )

    def score(
        self,
        profile: CandidateProfile | Mapping[str, Any],
        requirements: Requirements,
        weights: Weights,
        *,
        today: date | None = None,
    ) -> MatchResult:
        if not isinstance(profile, CandidateProfile):
            profile = CandidateProfile.model_validate(profile)
        today = today or self._today_provider()

        gate = passes_hard_filters(profile, requirements, today=today)
        if not gate.passed:
            return MatchResult(
                score=0,
                passed=False,
                details={"reason": gate.reason, **gate.details},
            )

        # Scorers read the explicit age, so settle date-of-birth once here.
        if profile.age is None:
            profile = profile.model_copy(update={"age": resolve_age(profile, today)})

        enabled = dict(weights.enabled())
        details: dict[str, Any] = {}
        weighted_sum = 0.0
        weight_sum = 0.0
        for criterion in self._criteria:
            weight = enabled.get(criterion.weight_field)
            if weight is None:
                continue
            subscore = criterion.scorer(profile, requirements)
            details[criterion.key] = {"score": subscore, "weight": weight}
            weighted_sum += subscore * weight
            weight_sum += weight

        final = round_half_up(weighted_sum / weight_sum) if weight_sum > 0 else 0
        return MatchResult(
            score=max(0, min(FULL_SCORE, final)),
            passed=True,
            details=details,
        )


_default_scorer = MatchScorer()


def calculate_match_score(
    profile: CandidateProfile | Mapping[str, Any],
    board: Board,
    *,
    today: date | None = None,
) -> MatchResult:
    """Score ``profile`` against ``board`` with the default criteria."""
    return _default_scorer.evaluate(profile, board, today=today)


__all__ = ["MatchResult", "MatchScorer", "calculate_match_score"]
