"""
Typed settings for the hockey replay engine.

Uses Pydantic Settings to load configuration from environment variables
with validation and type safety. A root .env file is honored for local
development but is never required.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .validate_env import validate_env

# Milliseconds of wall-clock time per virtual game second, fastest first.
DEFAULT_SPEED_LADDER = [4, 5, 6, 8, 10, 12, 15, 20, 25, 33, 40, 50, 67, 80, 100, 125, 200, 250, 333, 500, 1000]


class PlaybackConfig(BaseModel):
    speed_ladder: list[int] = Field(default_factory=lambda: list(DEFAULT_SPEED_LADDER))
    default_speed: int = 40
    # Used when stepping from a speed that is not on the ladder
    fallback_speed: int = 20
    # Minimum ms between ticks; faster speeds take bigger clock steps instead
    tick_floor_ms: int = 20
    fast_forward_factor: int = 10
    # Seeking further than this past an event hides its description and pause
    seek_overshoot_tolerance_seconds: int = 10
    default_pause_on_all_stoppages: bool = True

    @field_validator("speed_ladder")
    @classmethod
    def ladder_not_empty(cls, value: list[int]) -> list[int]:
        if not value:
            msg = "speed_ladder cannot be empty"
            raise ValueError(msg)
        return sorted(value)

    @model_validator(mode="after")
    def _speeds_on_ladder(self) -> PlaybackConfig:
        if self.fallback_speed not in self.speed_ladder:
            msg = f"fallback_speed {self.fallback_speed} is not on the speed ladder"
            raise ValueError(msg)
        return self


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    For local development, loads from the root .env file when present.
    All settings are validated by Pydantic.
    """
    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[1] / ".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="allow",
    )

    environment: str = Field("development", alias="ENVIRONMENT")
    log_level: str | None = Field(None, alias="LOG_LEVEL")
    feed_base_url: str = Field("https://statsapi.web.nhl.com/api/v1", alias="FEED_BASE_URL")
    request_timeout_seconds: int = Field(15, alias="REQUEST_TIMEOUT_SECONDS")
    preferences_path: Path = Field(
        Path.home() / ".hockey_replay" / "preferences.json",
        alias="PREFERENCES_PATH",
    )
    share_base_url: str = Field("https://hockeyreplay.example.com/", alias="SHARE_BASE_URL")
    playback_config: PlaybackConfig = Field(default_factory=PlaybackConfig)

    @field_validator("feed_base_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Endpoint paths are joined with a leading slash."""
        if isinstance(v, str):
            return v.rstrip("/")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Settings are cached to avoid re-parsing environment variables
    on every access.
    """
    validate_env()
    return Settings()


# Global settings instance - import this in other modules
settings = get_settings()
