"""
Initiative Tracker MCP Server
Exposes a persisted combat turn-order tracker as FastMCP tools.
"""

import logging
from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from .config import TrackerConfig
from .exceptions import TrackerError
from .tracker import Tracker

logger = logging.getLogger("initiative-tracker")

mcp = FastMCP(
    name="initiative-tracker"
)

# Created on first use so that importing this module has no filesystem side effects
tracker: Tracker | None = None


def get_tracker() -> Tracker:
    """Return the active tracker, loading it from the configured path if needed."""
    global tracker
    if tracker is None:
        config = TrackerConfig.from_env()
        logger.debug(f"📂 Data path: {config.data_path.resolve()}")
        tracker = Tracker(config.data_path)
        logger.debug("✅ Tracker initialized")
    return tracker


def format_tracker(t: Tracker) -> str:
    """Render the roster as markdown, marking the current turn."""
    if t.character_count == 0:
        return "**Initiative Tracker** is empty."

    lines = [f"**Initiative Tracker** (Round {t.progress})", ""]
    for i, c in enumerate(t.all_characters):
        marker = "▶" if i == t.turn else " "
        lines.append(f"{marker} {i+1}. {c.name} (Initiative: {c.initiative}, Dexterity: {c.dexterity})")
    return "\n".join(lines)


def _current_turn_text(t: Tracker) -> str:
    current = t.current_character
    if current is None:
        return "No characters in the tracker."
    return f"**Current Turn:** {current.name} (owner: {current.owner_id})"


@mcp.tool
def add_character(
    owner_id: Annotated[str, Field(description="ID of the user controlling the character")],
    name: Annotated[str, Field(description="Character name, unique within the tracker")],
    initiative: Annotated[int | float, Field(description="Rolled initiative")],
    dexterity: Annotated[int | float, Field(description="Dexterity score used to break ties")],
) -> str:
    """Add a character to the end of the initiative tracker."""
    try:
        get_tracker().add_character(owner_id, name, initiative, dexterity)
    except TrackerError as e:
        return f"Error: {e}"
    return f"Added **{name}** to the tracker (Initiative: {initiative}, Dexterity: {dexterity})."


@mcp.tool
def edit_character(
    name: Annotated[str, Field(description="Current character name")],
    new_name: Annotated[str, Field(description="New character name (may equal the current one)")],
    initiative: Annotated[int | float, Field(description="New initiative")],
    dexterity: Annotated[int | float, Field(description="New dexterity score")],
) -> str:
    """Rename a character and update its initiative and dexterity in place."""
    try:
        get_tracker().edit_character(name, new_name, initiative, dexterity)
    except TrackerError as e:
        return f"Error: {e}"
    return f"Updated **{new_name}** (Initiative: {initiative}, Dexterity: {dexterity})."


@mcp.tool
def remove_character(
    name: Annotated[str, Field(description="Name of the character to remove")],
) -> str:
    """Remove a character from the tracker."""
    t = get_tracker()
    try:
        t.remove_character(name)
    except TrackerError as e:
        return f"Error: {e}"
    return f"Removed **{name}** from the tracker.\n\n{format_tracker(t)}"


@mcp.tool
def next_turn() -> str:
    """Advance to the next turn; a new round re-sorts the initiative order."""
    t = get_tracker()
    if t.character_count == 0:
        return "No characters in the tracker."

    previous_round = t.round
    t.next_turn()
    result = _current_turn_text(t)
    if t.round != previous_round:
        result = f"**Round {t.round + 1} begins!**\n\n{format_tracker(t)}\n\n{result}"
    return result


@mcp.tool
def start_combat() -> str:
    """Start combat at round 1, turn 0."""
    t = get_tracker()
    t.start_combat()
    return f"**Combat Started!**\n\n{format_tracker(t)}\n\n{_current_turn_text(t)}"


@mcp.tool
def sort_tracker() -> str:
    """Sort the tracker by initiative then dexterity. The turn pointer stays on its position."""
    t = get_tracker()
    t.sort_tracker()
    return format_tracker(t)


@mcp.tool
def reset_tracker(
    wipe: Annotated[bool, Field(description="Also remove every character from the tracker")] = True,
) -> str:
    """Reset round and turn, optionally clearing the roster."""
    get_tracker().reset(wipe)
    return "Tracker reset. All characters removed." if wipe else "Tracker reset. Characters kept."


@mcp.tool
def set_turn(
    index: Annotated[int, Field(ge=0, description="Zero-based turn index")],
) -> str:
    """Set the turn pointer directly."""
    t = get_tracker()
    t.set_turn(index)
    return _current_turn_text(t)


@mcp.tool
def set_round(
    index: Annotated[int, Field(ge=0, description="Round counter value (stored 0-based)")],
) -> str:
    """Set the round counter directly."""
    t = get_tracker()
    t.set_round(index)
    return f"Round set. Progress: {t.progress}"


@mcp.tool
def show_tracker() -> str:
    """Show the current initiative order."""
    return format_tracker(get_tracker())


@mcp.tool
def whose_turn() -> str:
    """Show whose turn it is."""
    return _current_turn_text(get_tracker())


@mcp.tool
def character_owner(
    name: Annotated[str, Field(description="Character name")],
) -> str:
    """Show which user controls a character."""
    try:
        owner_id = get_tracker().get_character_owner_id(name)
    except TrackerError as e:
        return f"Error: {e}"
    return f"**{name}** is controlled by `{owner_id}`."


def main() -> None:
    """Main entry point for the Initiative Tracker server."""
    config = TrackerConfig.from_env()
    logging.basicConfig(level=config.log_level)
    logger.debug("✅ All tools registered. Initiative Tracker server running! 🎲")
    mcp.run()


if __name__ == "__main__":
    main()
