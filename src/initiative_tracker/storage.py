"""
Storage layer for the initiative tracker.
Persists the whole tracker state as a single JSON document.
"""

import json
import logging
import os
import tempfile
from hashlib import sha256
from pathlib import Path

from pydantic import ValidationError

from .exceptions import StateError
from .models import TrackerState

logger = logging.getLogger("initiative-tracker")


class TrackerStorage:
    """Loads and saves a TrackerState to one JSON file.

    Writes go to a temporary file next to the target and are moved into place
    with ``os.replace``, so the document on disk is always complete.
    """

    def __init__(self, data_path: str | Path = "tracker.json"):
        self.data_path = Path(data_path)
        logger.debug(f"📂 Initializing TrackerStorage with data_path: {self.data_path.resolve()}")

        # Dirty tracking: hash of last loaded or saved state
        self._state_hash: str = ""

    def exists(self) -> bool:
        """Whether a tracker document has been written yet."""
        return self.data_path.is_file()

    @staticmethod
    def _compute_hash(document: dict) -> str:
        """Compute hash of a state document for dirty tracking."""
        return sha256(json.dumps(document, sort_keys=True).encode()).hexdigest()

    def load(self) -> TrackerState:
        """Load the tracker state, or return defaults if no document exists.

        Raises:
            StateError: If the file is not valid JSON or does not match the schema.
        """
        if not self.exists():
            logger.debug(f"📂 No tracker document at {self.data_path}, using defaults.")
            self._state_hash = ""
            return TrackerState()

        logger.debug(f"📂 Loading tracker state from: {self.data_path}")
        try:
            with open(self.data_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            state = TrackerState.model_validate(data)
        except json.JSONDecodeError as e:
            logger.error(f"❌ Tracker document {self.data_path} is not valid JSON: {e}")
            raise StateError(
                f"Tracker document '{self.data_path}' is not valid JSON",
                details={"path": str(self.data_path), "error": str(e)},
            ) from e
        except ValidationError as e:
            logger.error(f"❌ Tracker document {self.data_path} does not match the schema: {e}")
            raise StateError(
                f"Tracker document '{self.data_path}' does not match the tracker schema",
                details={"path": str(self.data_path), "errors": e.errors(include_url=False)},
            ) from e

        self._state_hash = self._compute_hash(state.to_document())
        logger.debug(
            f"✅ Loaded tracker state: round {state.round}, turn {state.turn}, "
            f"{len(state.characters)} characters."
        )
        return state

    def save(self, state: TrackerState, force: bool = False) -> None:
        """Write the tracker state to disk.

        Args:
            state: The state to persist
            force: If True, write even when the state is unchanged
        """
        document = state.to_document()
        current_hash = self._compute_hash(document)
        if not force and current_hash == self._state_hash and self.exists():
            logger.debug("✅ Tracker state unchanged, skipping save.")
            return

        logger.debug(f"💾 Saving tracker state to {self.data_path}")
        self.data_path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            dir=self.data_path.parent, prefix=f".{self.data_path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_name, self.data_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        self._state_hash = current_hash
        logger.debug("✅ Tracker state saved successfully.")

    def delete(self) -> None:
        """Remove the tracker document if present."""
        if self.exists():
            logger.info(f"🗑️ Deleting tracker document {self.data_path}")
            self.data_path.unlink()
        self._state_hash = ""
