from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .fields import parse_date, parse_list, parse_number, parse_text


class CandidateProfile(BaseModel):
    """Read-only snapshot of a candidate record.

    The profile subsystem owns the record, so unknown keys are kept and
    malformed values degrade to empty instead of failing validation.
    """

    profile_id: str | None = None
    age: int | None = None
    date_of_birth: date | None = None
    height_cm: float | None = None
    bust: float | None = None
    waist: float | None = None
    hips: float | None = None
    gender: str | None = None
    body_type: str | None = None
    experience_level: str | None = None
    ethnicity: str | None = None
    comfort_levels: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    specialties: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    city: str | None = None
    city_secondary: str | None = None
    social_reach: float | None = None

    model_config = ConfigDict(extra="allow")

    @field_validator("profile_id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> str | None:
        if value is None:
            return None
        return str(value)

    @field_validator("age", mode="before")
    @classmethod
    def _coerce_age(cls, value: object) -> int | None:
        number = parse_number(value)
        if number is None or number <= 0:
            return None
        return int(number)

    @field_validator("height_cm", "bust", "waist", "hips", "social_reach", mode="before")
    @classmethod
    def _coerce_number(cls, value: object) -> float | None:
        return parse_number(value)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _coerce_date(cls, value: object) -> date | None:
        return parse_date(value)

    @field_validator(
        "gender",
        "body_type",
        "experience_level",
        "ethnicity",
        "city",
        "city_secondary",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, value: object) -> str | None:
        return parse_text(value)

    @field_validator("comfort_levels", "skills", "specialties", "languages", mode="before")
    @classmethod
    def _coerce_list(cls, value: object) -> list[str]:
        return parse_list(value)
