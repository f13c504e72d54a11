"""Viewer preferences and where they are kept."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .config import settings
from .logging import logger


class Preferences(BaseModel):
    """Playback choices remembered between sessions."""

    model_config = ConfigDict(populate_by_name=True)

    playback_speed: int = Field(settings.playback_config.default_speed, alias="playbackSpeed")
    pause_on_all_stoppages: bool = Field(
        settings.playback_config.default_pause_on_all_stoppages,
        alias="pauseOnAllStoppages",
    )


class PreferencesStore(Protocol):
    """Protocol for preference persistence."""

    def load(self) -> Preferences:
        """Return stored preferences, or defaults when none are stored."""
        ...

    def save(self, preferences: Preferences) -> None:
        """Persist preferences, replacing whatever was stored."""
        ...


class MemoryPreferencesStore:
    """Keeps preferences for the lifetime of the process only."""

    def __init__(self, preferences: Preferences | None = None) -> None:
        self.preferences = preferences or Preferences()

    def load(self) -> Preferences:
        return self.preferences.model_copy()

    def save(self, preferences: Preferences) -> None:
        self.preferences = preferences.model_copy()


class JsonPreferencesStore:
    """Stores preferences as a small JSON document on disk."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path or settings.preferences_path).expanduser()

    def load(self) -> Preferences:
        if not self.path.exists():
            return Preferences()
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            return Preferences.model_validate(payload)
        except (OSError, ValueError, ValidationError) as exc:
            logger.warning("preferences_unreadable", path=str(self.path), error=str(exc))
            return Preferences()

    def save(self, preferences: Preferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(preferences.model_dump(by_alias=True), indent=2),
            encoding="utf-8",
        )
        logger.debug("preferences_saved", path=str(self.path), **preferences.model_dump())
