"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, model_validator


class DatabaseConfig(BaseModel):
    url: str = "sqlite:///boardmatch.db"
    echo: bool = False


class LoggingConfig(BaseModel):
    level: str = "INFO"


class DistributionConfig(BaseModel):
    excellent: int = Field(default=80, ge=0, le=100)
    good: int = Field(default=60, ge=0, le=100)
    fair: int = Field(default=40, ge=0, le=100)

    @model_validator(mode="after")
    def _check_order(self) -> "DistributionConfig":
        if not self.excellent >= self.good >= self.fair:
            raise ValueError("distribution bands must satisfy excellent >= good >= fair")
        return self


class AppConfig(BaseModel):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    distribution: DistributionConfig = Field(default_factory=DistributionConfig)

    def to_settings(self) -> dict[str, Any]:
        return {
            "database": self.database.model_dump(),
            "distribution": self.distribution.model_dump(),
        }


def load_config(raw: Any) -> AppConfig:
    if raw is None:
        return AppConfig()
    if not isinstance(raw, dict):
        raise ValueError("Config must be a mapping")
    return AppConfig.model_validate(raw)
