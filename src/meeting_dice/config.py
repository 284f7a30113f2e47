"""Runtime settings and data-file location.

Settings are read from environment variables prefixed with
MEETING_DICE_ (for example MEETING_DICE_DATA_DIR, MEETING_DICE_LOG_LEVEL).
"""

from __future__ import annotations

import os
import sys
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from meeting_dice.errors import StateFileError

APP_NAME = "meeting-dice"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MEETING_DICE_")

    data_dir: Optional[Path] = None
    data_file_name: str = "data.json"
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def default_data_dir() -> Path:
    """Per-user data directory for the application."""
    if sys.platform == "win32":
        base = os.environ.get("APPDATA")
        root = Path(base) if base else Path.home() / "AppData" / "Roaming"
    else:
        base = os.environ.get("XDG_DATA_HOME")
        root = Path(base) if base else Path.home() / ".local" / "share"
    return root / APP_NAME


def data_file_path(settings: Settings) -> Path:
    """Resolve the state file, creating its directory if needed."""
    data_dir = settings.data_dir.expanduser() if settings.data_dir else default_data_dir()
    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StateFileError(f"Cannot create data directory {data_dir}: {e}") from e
    return data_dir / settings.data_file_name
