"""
Unit tests for TrackerStorage.

Tests cover:
- Defaults when no document exists
- Round-tripping state through the JSON document
- Corrupt and schema-violating documents
- Dirty tracking and atomic writes
- Trackers keeping their state when a write fails
"""

import json
import pytest
from pathlib import Path
from unittest.mock import patch

from initiative_tracker.exceptions import StateError
from initiative_tracker.models import Character, TrackerState
from initiative_tracker.storage import TrackerStorage
from initiative_tracker.tracker import Tracker


@pytest.fixture
def storage(tracker_path: Path) -> TrackerStorage:
    return TrackerStorage(tracker_path)


@pytest.fixture
def sample_state() -> TrackerState:
    return TrackerState(
        round=2,
        turn=1,
        characters=[
            Character(owner_id="111", name="Gandalf", initiative=18, dexterity=14),
            Character(owner_id="222", name="Gimli", initiative=9, dexterity=10),
        ],
    )


class TestLoad:
    """Tests for reading tracker documents."""

    def test_missing_document_yields_defaults(self, storage: TrackerStorage) -> None:
        state = storage.load()

        assert not storage.exists()
        assert state == TrackerState()

    def test_load_legacy_document(self, tracker_path: Path, storage: TrackerStorage) -> None:
        tracker_path.write_text(json.dumps({
            "round": 3,
            "turn": 0,
            "characters": [
                {"userID": "42", "name": "Legolas", "initiative": 21, "dexterity": 20},
            ],
        }), encoding="utf-8")

        state = storage.load()

        assert state.round == 3
        assert state.characters[0].owner_id == "42"
        assert state.characters[0].name == "Legolas"

    def test_invalid_json_raises_state_error(self, tracker_path: Path, storage: TrackerStorage) -> None:
        tracker_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StateError) as exc_info:
            storage.load()
        assert exc_info.value.details["path"] == str(tracker_path)

    def test_schema_violation_raises_state_error(self, tracker_path: Path, storage: TrackerStorage) -> None:
        tracker_path.write_text(json.dumps({"round": -1, "turn": 0, "characters": []}), encoding="utf-8")

        with pytest.raises(StateError):
            storage.load()

    def test_duplicate_names_raise_state_error(self, tracker_path: Path, storage: TrackerStorage) -> None:
        duplicate = {"userID": "1", "name": "Twin", "initiative": 1, "dexterity": 1}
        tracker_path.write_text(
            json.dumps({"round": 0, "turn": 0, "characters": [duplicate, duplicate]}),
            encoding="utf-8",
        )

        with pytest.raises(StateError):
            storage.load()


class TestSave:
    """Tests for writing tracker documents."""

    def test_save_and_reload(self, tracker_path: Path, storage: TrackerStorage, sample_state: TrackerState) -> None:
        storage.save(sample_state)

        assert TrackerStorage(tracker_path).load() == sample_state

    def test_save_writes_on_disk_schema(self, tracker_path: Path, storage: TrackerStorage, sample_state: TrackerState) -> None:
        storage.save(sample_state)
        data = json.loads(tracker_path.read_text(encoding="utf-8"))

        assert set(data) == {"round", "turn", "characters"}
        assert set(data["characters"][0]) == {"userID", "name", "initiative", "dexterity"}

    def test_save_creates_parent_directories(self, tmp_path: Path, sample_state: TrackerState) -> None:
        storage = TrackerStorage(tmp_path / "nested" / "dir" / "tracker.json")
        storage.save(sample_state)

        assert storage.exists()

    def test_unchanged_state_is_not_rewritten(self, storage: TrackerStorage, sample_state: TrackerState) -> None:
        storage.save(sample_state)

        with patch("initiative_tracker.storage.os.replace") as mock_replace:
            storage.save(sample_state)
            mock_replace.assert_not_called()

            storage.save(sample_state, force=True)
            mock_replace.assert_called_once()

    def test_failed_write_leaves_no_temp_file(self, tracker_path: Path, storage: TrackerStorage, sample_state: TrackerState) -> None:
        with patch("initiative_tracker.storage.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                storage.save(sample_state)

        assert list(tracker_path.parent.iterdir()) == []

    def test_delete(self, storage: TrackerStorage, sample_state: TrackerState) -> None:
        storage.save(sample_state)
        storage.delete()

        assert not storage.exists()
        storage.delete()


class TestTrackerWriteFailure:
    """A tracker whose save fails keeps the state it had before the call."""

    def test_failed_remove_leaves_tracker_unchanged(self, four_tracker: Tracker, tracker_path: Path) -> None:
        four_tracker.set_turn(2)
        with patch("initiative_tracker.storage.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                four_tracker.remove_character("A")

        assert four_tracker.list_characters() == ["A", "B", "C", "D"]
        assert four_tracker.turn == 2
        assert Tracker(tracker_path).list_characters() == ["A", "B", "C", "D"]

    def test_failed_next_turn_leaves_tracker_unchanged(self, four_tracker: Tracker, tracker_path: Path) -> None:
        four_tracker.set_turn(3)
        with patch("initiative_tracker.storage.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(OSError):
                four_tracker.next_turn()

        assert four_tracker.turn == 3
        assert four_tracker.round == 0

        four_tracker.add_character("u5", "E", 1, 1)
        data = json.loads(tracker_path.read_text(encoding="utf-8"))
        assert data["turn"] == 3
        assert data["round"] == 0
