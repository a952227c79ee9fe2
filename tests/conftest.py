"""
Pytest configuration and fixtures for initiative-tracker tests.
"""

import sys
from pathlib import Path
import pytest

# Add src directory to Python path to allow importing initiative_tracker
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from initiative_tracker.tracker import Tracker  # noqa: E402


@pytest.fixture
def tracker_path(tmp_path: Path) -> Path:
    """Path for a tracker document inside a temporary directory."""
    return tmp_path / "tracker.json"


@pytest.fixture
def tracker(tracker_path: Path) -> Tracker:
    """An empty tracker persisted to a temporary file."""
    return Tracker(tracker_path)


@pytest.fixture
def four_tracker(tracker: Tracker) -> Tracker:
    """A tracker holding A, B, C, D in that order."""
    tracker.add_character("u1", "A", 20, 10)
    tracker.add_character("u2", "B", 15, 10)
    tracker.add_character("u3", "C", 10, 10)
    tracker.add_character("u4", "D", 5, 10)
    return tracker


# Configure anyio to only use asyncio (not trio)
@pytest.fixture
def anyio_backend():
    return "asyncio"
