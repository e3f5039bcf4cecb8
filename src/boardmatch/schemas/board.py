from __future__ import annotations

from typing import Any, Iterator, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .fields import parse_list, parse_number, parse_text

ImportanceLevel = Literal["none", "low", "medium", "high", "normal", "critical"]

MAX_WEIGHT = 5.0

BOARD_METADATA_FIELDS: tuple[str, ...] = ("name", "description", "is_active", "sort_order")

WEIGHT_FIELDS: tuple[str, ...] = (
    "age_weight",
    "height_weight",
    "measurements_weight",
    "body_type_weight",
    "comfort_weight",
    "experience_weight",
    "skills_weight",
    "location_weight",
    "social_reach_weight",
)


class Requirements(BaseModel):
    """Criteria an agency configures for one board."""

    min_age: float | None = None
    max_age: float | None = None
    min_height_cm: float | None = None
    max_height_cm: float | None = None
    min_bust: float | None = None
    max_bust: float | None = None
    min_waist: float | None = None
    max_waist: float | None = None
    min_hips: float | None = None
    max_hips: float | None = None
    genders: list[str] = Field(default_factory=list)
    body_types: list[str] = Field(default_factory=list)
    comfort_levels: list[str] = Field(default_factory=list)
    experience_levels: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    locations: list[str] = Field(default_factory=list)
    min_social_reach: float | None = None
    social_reach_importance: ImportanceLevel | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator(
        "min_age",
        "max_age",
        "min_height_cm",
        "max_height_cm",
        "min_bust",
        "max_bust",
        "min_waist",
        "max_waist",
        "min_hips",
        "max_hips",
        mode="before",
    )
    @classmethod
    def _coerce_bound(cls, value: object) -> float | None:
        return parse_number(value)

    @field_validator("min_social_reach", mode="before")
    @classmethod
    def _coerce_threshold(cls, value: object) -> float | None:
        number = parse_number(value)
        if number is None or number <= 0:
            return None
        return number

    @field_validator(
        "genders",
        "body_types",
        "comfort_levels",
        "experience_levels",
        "skills",
        "locations",
        mode="before",
    )
    @classmethod
    def _coerce_list(cls, value: object) -> list[str]:
        return parse_list(value)

    @field_validator("social_reach_importance", mode="before")
    @classmethod
    def _coerce_importance(cls, value: object) -> str | None:
        text = parse_text(value)
        if text is None:
            return None
        text = text.lower()
        return text if text in get_args(ImportanceLevel) else None

    @property
    def is_critical(self) -> bool:
        return self.social_reach_importance == "critical"

    def bounds(self, name: str) -> tuple[float | None, float | None]:
        """Return the ``(min, max)`` pair configured for ``name``."""
        return getattr(self, f"min_{name}"), getattr(self, f"max_{name}")

    def has_range(self, name: str) -> bool:
        low, high = self.bounds(name)
        return low is not None or high is not None


class Weights(BaseModel):
    """Per-criterion importance in [0, 5]; zero disables the criterion."""

    age_weight: float = 0.0
    height_weight: float = 0.0
    measurements_weight: float = 0.0
    body_type_weight: float = 0.0
    comfort_weight: float = 0.0
    experience_weight: float = 0.0
    skills_weight: float = 0.0
    location_weight: float = 0.0
    social_reach_weight: float = 0.0

    model_config = ConfigDict(extra="ignore")

    @field_validator(*WEIGHT_FIELDS, mode="before")
    @classmethod
    def _clamp(cls, value: object) -> float:
        number = parse_number(value)
        if number is None:
            return 0.0
        return max(0.0, min(MAX_WEIGHT, number))

    def merged(self, payload: dict[str, Any]) -> "Weights":
        """Overlay the weight fields present in ``payload``."""
        data = self.model_dump()
        data.update({k: v for k, v in payload.items() if k in WEIGHT_FIELDS})
        return Weights.model_validate(data)

    def enabled(self) -> Iterator[tuple[str, float]]:
        for name in WEIGHT_FIELDS:
            weight = getattr(self, name)
            if weight > 0:
                yield name, weight


class Board(BaseModel):
    """Agency-owned requirement and weight configuration."""

    board_id: str
    agency_id: str
    name: str
    description: str | None = None
    is_active: bool = True
    sort_order: int = 0
    config_version: int = 0
    requirements: Requirements | None = None
    weights: Weights | None = None

    model_config = ConfigDict(extra="forbid")

    @property
    def is_configured(self) -> bool:
        return self.requirements is not None and self.weights is not None
