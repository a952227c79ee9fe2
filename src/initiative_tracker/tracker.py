"""
Initiative tracking for a single combat encounter.

The Tracker keeps an ordered roster of characters, a round counter and a turn
pointer. Every mutation is written through to storage before the method
returns. The turn pointer is purely positional: it indexes into the roster and
is never re-derived from a character's identity.
"""

import logging
from pathlib import Path

from .exceptions import DuplicateError, NotFoundError
from .models import Character, TrackerState
from .storage import TrackerStorage

logger = logging.getLogger("initiative-tracker")


class Tracker:
    """Turn-order tracker backed by a single persisted TrackerState.

    Mutators work on a copy of the state and only adopt it once storage has
    saved it, so a failed write leaves the tracker exactly as it was.
    Accessors hand out copies of characters; editing them does not change the
    tracker.

    Name lookups are linear scans over the roster, which holds at most a few
    dozen characters.
    """

    def __init__(
        self,
        data_path: str | Path = "tracker.json",
        storage: TrackerStorage | None = None,
    ):
        """
        Load the tracker, creating the default document if none exists.

        Args:
            data_path: JSON file holding the tracker state
            storage: Pre-built storage backend; overrides data_path when given
        """
        self._storage = storage or TrackerStorage(data_path)
        self._state = self._storage.load()
        if not self._storage.exists():
            self._storage.save(self._state, force=True)

    # State accessors

    @property
    def state(self) -> TrackerState:
        """A copy of the full tracker state."""
        return self._state.model_copy(deep=True)

    @property
    def all_characters(self) -> list[Character]:
        """Copies of all characters in turn order."""
        return [c.model_copy() for c in self._state.characters]

    @property
    def character_count(self) -> int:
        return len(self._state.characters)

    @property
    def round(self) -> int:
        return self._state.round

    @property
    def turn(self) -> int:
        return self._state.turn

    @property
    def progress(self) -> str:
        """Human-facing "round/characters" display; the round is shown 1-based."""
        return f"{self._state.round + 1}/{self.character_count}"

    @property
    def current_character(self) -> Character | None:
        """A copy of the character whose turn it is, or None if the turn is out of bounds."""
        if 0 <= self._state.turn < self.character_count:
            return self._state.characters[self._state.turn].model_copy()
        return None

    # Low-level setters

    def set_turn(self, index: int) -> None:
        """Overwrite the turn pointer. No validation is performed."""
        state = self._draft()
        state.turn = index
        self._commit(state)

    def set_round(self, index: int) -> None:
        """Overwrite the round counter. No validation is performed."""
        state = self._draft()
        state.round = index
        self._commit(state)

    # Lookups

    def _find(self, name: str) -> int | None:
        for index, character in enumerate(self._state.characters):
            if character.name == name:
                return index
        return None

    def _require(self, name: str) -> int:
        index = self._find(name)
        if index is None:
            e = NotFoundError(name)
            logger.error(f"❌ {e}")
            raise e
        return index

    def character_exists(self, name: str) -> bool:
        return self._find(name) is not None

    def get_character_owner_id(self, name: str) -> str:
        """Get the ID of the user controlling a character.

        Raises:
            NotFoundError: If no character has that name.
        """
        return self._state.characters[self._require(name)].owner_id

    def get_character_index(self, name: str) -> int:
        """Get a character's position in the turn order.

        Raises:
            NotFoundError: If no character has that name.
        """
        return self._require(name)

    def user_has_character(self, owner_id: str) -> bool:
        """Check whether a user already controls a character in the tracker."""
        return any(c.owner_id == owner_id for c in self._state.characters)

    # Roster mutation

    def add_character(
        self,
        owner_id: str,
        name: str,
        initiative: int | float,
        dexterity: int | float,
    ) -> Character:
        """Append a character to the end of the roster.

        The roster is not re-sorted and the turn pointer is left alone.

        Raises:
            DuplicateError: If a character with this name already exists.
            pydantic.ValidationError: If the scores are not numbers.
        """
        if self.character_exists(name):
            e = DuplicateError(name)
            logger.error(f"❌ {e}")
            raise e

        logger.info(f"➕ Adding character '{name}' (initiative {initiative}, dexterity {dexterity}).")
        character = Character(owner_id=owner_id, name=name, initiative=initiative, dexterity=dexterity)
        state = self._draft()
        state.characters.append(character)
        self._commit(state)
        return character.model_copy()

    def edit_character(
        self,
        name: str,
        new_name: str,
        initiative: int | float,
        dexterity: int | float,
    ) -> Character:
        """Rename a character and overwrite its scores, keeping its position.

        Raises:
            NotFoundError: If no character has that name.
            DuplicateError: If new_name belongs to a different character.
            pydantic.ValidationError: If the scores are not numbers.
        """
        index = self._require(name)
        if new_name != name and self.character_exists(new_name):
            e = DuplicateError(new_name, details={"renaming": name})
            logger.error(f"❌ Cannot rename '{name}': {e}")
            raise e

        logger.info(
            f"📝 Editing character '{name}': name -> '{new_name}', "
            f"initiative -> {initiative}, dexterity -> {dexterity}"
        )
        character = Character(
            owner_id=self._state.characters[index].owner_id,
            name=new_name,
            initiative=initiative,
            dexterity=dexterity,
        )
        state = self._draft()
        state.characters[index] = character
        self._commit(state)
        return character.model_copy()

    def remove_character(self, name: str) -> None:
        """Remove a character, keeping the turn pointer consistent.

        Removing a character ahead of the pointer shifts the pointer left so
        the same character keeps the turn. Removing the current character
        hands the turn to whoever slides into its slot; if it was the last in
        order, the round completes instead.

        Raises:
            NotFoundError: If no character has that name.
        """
        index = self._require(name)
        state = self._draft()
        turn = state.turn
        count = len(state.characters)

        logger.debug(f"🗑️ Removing character '{name}' at index {index} (turn {turn}, {count} characters).")
        if index < turn:
            del state.characters[index]
            state.turn = turn - 1
        elif index == turn:
            if index == count - 1:
                state.round += 1
                state.turn = 0
                logger.debug(f"🔄 Current character was last in order, advancing to round {state.round}.")
            del state.characters[index]
        else:
            del state.characters[index]

        self._commit(state)
        logger.info(f"✅ Character '{name}' removed.")

    def list_characters(self) -> list[str]:
        """Character names in turn order, also written to the debug log."""
        names = [c.name for c in self._state.characters]
        for name in names:
            logger.debug(name)
        return names

    # Progression

    def next_turn(self) -> None:
        """Advance the turn pointer, wrapping into a new, re-sorted round."""
        state = self._draft()
        if state.turn < len(state.characters) - 1:
            state.turn += 1
        else:
            state.turn = 0
            state.round += 1
            self._sort(state)
            logger.info(f"🔄 Round {state.round} begins.")
        self._commit(state)

    def start_combat(self) -> None:
        """Set round 1, turn 0. The roster is neither touched nor sorted."""
        logger.info("⚔️ Combat started.")
        state = self._draft()
        state.round = 1
        state.turn = 0
        self._commit(state)

    def sort_tracker(self) -> None:
        """Stable-sort by initiative then dexterity, both descending.

        The turn pointer is not adjusted, so after a mid-round sort it may
        point at a different character.
        """
        state = self._draft()
        self._sort(state)
        self._commit(state)

    def reset(self, wipe: bool = True) -> None:
        """Zero round and turn; with wipe, also clear the roster."""
        state = self._draft()
        if wipe:
            state.characters = []
        state.round = 0
        state.turn = 0
        self._commit(state)
        logger.info(f"✅ Tracker reset ({'roster cleared' if wipe else 'roster kept'}).")

    @staticmethod
    def _sort(state: TrackerState) -> None:
        state.characters.sort(key=Character.sort_key)
        logger.debug(f"🔃 Sorted tracker: {[c.name for c in state.characters]}")

    def _draft(self) -> TrackerState:
        return self._state.model_copy(deep=True)

    def _commit(self, state: TrackerState) -> None:
        # Adopt the new state only after it is on disk
        self._storage.save(state)
        self._state = state
