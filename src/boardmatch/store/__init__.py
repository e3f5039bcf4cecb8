"""Persistence collaborators for boards, applications and stored scores."""

from __future__ import annotations

from .base import MatchStore, ScoreUpdate, ScoringRow
from .memory import InMemoryMatchStore
from .sql import SqlMatchStore

__all__ = [
    "InMemoryMatchStore",
    "MatchStore",
    "ScoreUpdate",
    "ScoringRow",
    "SqlMatchStore",
]
