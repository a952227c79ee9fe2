"""
Configuration model for the initiative tracker.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger("initiative-tracker")

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class TrackerConfig(BaseModel):
    """Runtime settings for the tracker server.

    Values come from the environment (optionally seeded from a ``.env`` file)
    via ``from_env``.
    """

    data_path: Path = Field(
        default=Path("tracker.json"),
        description="JSON file the tracker state is persisted to"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level: CRITICAL, ERROR, WARNING, INFO or DEBUG"
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize the log level name and reject unknown levels."""
        level = str(v).strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(_LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls) -> "TrackerConfig":
        """Build a config from TRACKER_DATA_PATH and TRACKER_LOG_LEVEL."""
        if not load_dotenv():
            logger.debug("No .env file found, using process environment only.")

        values = {}
        if data_path := os.getenv("TRACKER_DATA_PATH"):
            values["data_path"] = Path(data_path)
        if log_level := os.getenv("TRACKER_LOG_LEVEL"):
            values["log_level"] = log_level
        return cls(**values)
