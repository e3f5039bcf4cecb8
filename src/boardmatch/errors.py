"""Exceptions raised by the service layer."""

from __future__ import annotations


class BoardMatchError(Exception):
    """Base class for caller-facing errors."""


class BoardNotFoundError(BoardMatchError, LookupError):
    """Raised when a board does not exist or belongs to another agency."""

    def __init__(self, board_id: str, agency_id: str | None = None):
        super().__init__(f"Board not found: {board_id!r}")
        self.board_id = board_id
        self.agency_id = agency_id


class ApplicationNotFoundError(BoardMatchError, LookupError):
    """Raised when an application does not exist or belongs to another agency."""

    def __init__(self, application_id: str, agency_id: str | None = None):
        super().__init__(f"Application not found: {application_id!r}")
        self.application_id = application_id
        self.agency_id = agency_id


class InvalidBoardError(BoardMatchError, ValueError):
    """Raised when board attributes fail validation."""
