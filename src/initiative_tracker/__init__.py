"""
Initiative Tracker - a persisted combat turn-order tracker with a FastMCP tool surface.
"""

from .exceptions import DuplicateError, NotFoundError, StateError, TrackerError
from .models import Character, TrackerState
from .storage import TrackerStorage
from .tracker import Tracker

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("initiative-tracker")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "Tracker",
    "TrackerStorage",
    "TrackerState",
    "Character",
    "TrackerError",
    "NotFoundError",
    "DuplicateError",
    "StateError",
]
