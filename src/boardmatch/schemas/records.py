from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Application(BaseModel):
    """A candidate's application to an agency with its cached match fields."""

    application_id: str
    agency_id: str
    profile_id: str | None = None
    board_id: str | None = None
    match_score: int | None = Field(default=None, ge=0, le=100)
    match_calculated_at: datetime | None = None

    model_config = ConfigDict(extra="allow")


class BoardApplication(BaseModel):
    """Join record linking one application to one board."""

    board_id: str
    application_id: str
    match_score: int | None = Field(default=None, ge=0, le=100)
    match_details: dict[str, Any] | None = None
    is_primary: bool = True
    updated_at: datetime | None = None

    model_config = ConfigDict(extra="forbid")
