"""Hard filters evaluated before any weighted scoring."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any

import pendulum

from ..schemas import CandidateProfile, Requirements


@dataclass(slots=True)
class HardFilterResult:
    """Pass/fail gate outcome with a human-readable reason."""

    passed: bool
    reason: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


def resolve_age(profile: CandidateProfile, today: date | None = None) -> int | None:
    """Return the explicit age, or full years since ``date_of_birth``."""
    if profile.age is not None:
        return profile.age
    birth = profile.date_of_birth
    if birth is None:
        return None
    today = today or pendulum.today().date()
    years = today.year - birth.year - ((today.month, today.day) < (birth.month, birth.day))
    return years if years >= 0 else None


def passes_hard_filters(
    profile: CandidateProfile,
    requirements: Requirements,
    *,
    today: date | None = None,
) -> HardFilterResult:
    """Apply the configured gates in order and stop at the first failure."""
    for check in (_age_gate, _height_gate, _gender_gate, _critical_comfort_gate):
        failure = check(profile, requirements, today)
        if failure is not None:
            return failure
    return HardFilterResult(passed=True)


def _fail(reason: str, **details: Any) -> HardFilterResult:
    return HardFilterResult(passed=False, reason=reason, details=details)


def _age_gate(
    profile: CandidateProfile,
    requirements: Requirements,
    today: date | None,
) -> HardFilterResult | None:
    if not requirements.has_range("age"):
        return None
    minimum, maximum = requirements.bounds("age")
    age = resolve_age(profile, today)
    if age is None:
        return _fail("Missing age", age="missing")
    if minimum is not None and age < minimum:
        return _fail("Age below minimum", age=f"Age {age} < {_fmt(minimum)}")
    if maximum is not None and age > maximum:
        return _fail("Age above maximum", age=f"Age {age} > {_fmt(maximum)}")
    return None


def _height_gate(
    profile: CandidateProfile,
    requirements: Requirements,
    today: date | None,
) -> HardFilterResult | None:
    if not requirements.has_range("height_cm"):
        return None
    minimum, maximum = requirements.bounds("height_cm")
    height = profile.height_cm
    if not height:
        return _fail("Missing height", height="missing")
    if minimum is not None and height < minimum:
        return _fail(
            "Height below minimum",
            height=f"{_fmt(height)}cm < {_fmt(minimum)}cm",
        )
    if maximum is not None and height > maximum:
        return _fail(
            "Height above maximum",
            height=f"{_fmt(height)}cm > {_fmt(maximum)}cm",
        )
    return None


def _gender_gate(
    profile: CandidateProfile,
    requirements: Requirements,
    today: date | None,
) -> HardFilterResult | None:
    # A profile without a recorded gender is never blocked.
    if not requirements.genders or not profile.gender:
        return None
    if profile.gender in requirements.genders:
        return None
    return _fail(
        "Gender mismatch",
        gender=f"Profile: {profile.gender}, Required: {', '.join(requirements.genders)}",
    )


def _critical_comfort_gate(
    profile: CandidateProfile,
    requirements: Requirements,
    today: date | None,
) -> HardFilterResult | None:
    if not requirements.is_critical or not requirements.comfort_levels:
        return None
    available = set(profile.comfort_levels)
    missing = [tag for tag in requirements.comfort_levels if tag not in available]
    if not missing:
        return None
    return _fail(
        "Missing critical comfort levels",
        comfort="missing_required",
        missing_comfort_levels=missing,
    )


def _fmt(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


__all__ = ["HardFilterResult", "passes_hard_filters", "resolve_age"]
