"""
Exception hierarchy for the initiative tracker.

Every error raised by the tracker core derives from TrackerError, so callers
can handle tracker failures generically while still telling a missing
character apart from a name collision or a corrupt state file.
"""

from __future__ import annotations

from typing import Any


class TrackerError(Exception):
    """Base exception for all tracker errors.

    Attributes:
        message: Human-readable error message
        details: Optional dictionary of additional error context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFoundError(TrackerError):
    """An operation referenced a character name that is not in the tracker.

    Attributes:
        name: The character name that could not be found
    """

    def __init__(self, name: str, details: dict[str, Any] | None = None):
        super().__init__(f"Character '{name}' does not exist!", details)
        self.name = name


class DuplicateError(TrackerError):
    """A character with the given name is already in the tracker.

    Attributes:
        name: The conflicting character name
    """

    def __init__(self, name: str, details: dict[str, Any] | None = None):
        super().__init__(f"Character '{name}' already exists!", details)
        self.name = name


class StateError(TrackerError):
    """The persisted tracker document is unreadable or does not match the schema."""
    pass


__all__ = [
    "TrackerError",
    "NotFoundError",
    "DuplicateError",
    "StateError",
]
