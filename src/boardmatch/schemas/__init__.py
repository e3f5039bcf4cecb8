"""Pydantic schema definitions for boards, profiles and applications."""

from __future__ import annotations

from .board import (
    BOARD_METADATA_FIELDS,
    MAX_WEIGHT,
    WEIGHT_FIELDS,
    Board,
    ImportanceLevel,
    Requirements,
    Weights,
)
from .profile import CandidateProfile
from .records import Application, BoardApplication

__all__ = [
    "BOARD_METADATA_FIELDS",
    "Application",
    "Board",
    "BoardApplication",
    "CandidateProfile",
    "ImportanceLevel",
    "MAX_WEIGHT",
    "Requirements",
    "WEIGHT_FIELDS",
    "Weights",
]
