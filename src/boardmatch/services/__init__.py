"""Orchestration services that read and write stored scores."""

from __future__ import annotations

from .assignment import AssignmentService, assign_board
from .boards import BoardService, BoardSummary
from .recalculation import (
    RecalculationReport,
    RecalculationService,
    recalculate_board_scores,
)

__all__ = [
    "AssignmentService",
    "BoardService",
    "BoardSummary",
    "RecalculationReport",
    "RecalculationService",
    "assign_board",
    "recalculate_board_scores",
]
