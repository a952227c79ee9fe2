"""
Data models for the initiative tracker.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Character(BaseModel):
    """A combatant in the turn order."""
    model_config = ConfigDict(populate_by_name=True)

    owner_id: str = Field(alias="userID", description="ID of the user controlling the character")
    name: str = Field(description="Character name, unique within the tracker")
    initiative: int | float = Field(description="Rolled initiative, primary sort key")
    dexterity: int | float = Field(description="Dexterity score, used to break initiative ties")

    def sort_key(self) -> tuple[int | float, int | float]:
        """Key for descending turn order (initiative first, then dexterity)."""
        return (-self.initiative, -self.dexterity)


class TrackerState(BaseModel):
    """Persisted state of one encounter: round, turn pointer and roster."""
    round: int = Field(default=0, ge=0, description="Current round, stored 0-based")
    turn: int = Field(default=0, ge=0, description="Index of the character whose turn it is")
    characters: list[Character] = Field(default_factory=list, description="Roster in turn order")

    @model_validator(mode="after")
    def validate_unique_names(self) -> "TrackerState":
        """Reject rosters where two characters share a name."""
        seen: set[str] = set()
        for character in self.characters:
            if character.name in seen:
                raise ValueError(f"Duplicate character name in tracker: '{character.name}'")
            seen.add(character.name)
        return self

    def to_document(self) -> dict:
        """Serialize to the on-disk JSON shape (``userID`` keys)."""
        return self.model_dump(mode="json", by_alias=True)


__all__ = [
    "Character",
    "TrackerState",
]
