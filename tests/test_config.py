"""Tests for config.py and validate_env.py modules."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from hockey_replay.config import DEFAULT_SPEED_LADDER, PlaybackConfig, Settings
from hockey_replay.validate_env import validate_env


class TestPlaybackConfig:
    """Tests for PlaybackConfig."""

    def test_defaults(self):
        config = PlaybackConfig()

        assert config.speed_ladder == DEFAULT_SPEED_LADDER
        assert config.default_speed == 40
        assert config.fallback_speed == 20
        assert config.tick_floor_ms == 20
        assert config.fast_forward_factor == 10
        assert config.seek_overshoot_tolerance_seconds == 10
        assert config.default_pause_on_all_stoppages is True

    def test_ladder_sorted(self):
        config = PlaybackConfig(speed_ladder=[100, 20, 40])

        assert config.speed_ladder == [20, 40, 100]

    def test_empty_ladder_rejected(self):
        with pytest.raises(ValidationError):
            PlaybackConfig(speed_ladder=[])

    def test_fallback_must_be_on_ladder(self):
        with pytest.raises(ValidationError, match="fallback_speed"):
            PlaybackConfig(speed_ladder=[40, 80], fallback_speed=20)


class TestSettings:
    """Tests for Settings loaded from the environment."""

    def test_env_overrides(self):
        env = {
            "ENVIRONMENT": "staging",
            "FEED_BASE_URL": "https://feed.example.com/api/",
            "REQUEST_TIMEOUT_SECONDS": "5",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(_env_file=None)

        assert settings.environment == "staging"
        assert settings.feed_base_url == "https://feed.example.com/api"
        assert settings.request_timeout_seconds == 5

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.feed_base_url == "https://statsapi.web.nhl.com/api/v1"
        assert settings.playback_config.default_speed == 40


class TestValidateEnv:
    """Tests for validate_env."""

    def test_unknown_environment_rejected(self):
        with patch.dict(os.environ, {"ENVIRONMENT": "qa"}, clear=True):
            validate_env.cache_clear()
            with pytest.raises(RuntimeError, match="ENVIRONMENT"):
                validate_env()
        validate_env.cache_clear()

    def test_production_rejects_localhost_feed(self):
        env = {"ENVIRONMENT": "production", "FEED_BASE_URL": "http://localhost:8000/api"}
        with patch.dict(os.environ, env, clear=True):
            validate_env.cache_clear()
            with pytest.raises(RuntimeError, match="FEED_BASE_URL"):
                validate_env()
        validate_env.cache_clear()

    def test_development_allows_localhost(self):
        env = {"ENVIRONMENT": "development", "FEED_BASE_URL": "http://localhost:8000/api"}
        with patch.dict(os.environ, env, clear=True):
            validate_env.cache_clear()
            validate_env()  # should not raise
        validate_env.cache_clear()

    def test_production_defaults_pass(self):
        with patch.dict(os.environ, {"ENVIRONMENT": "production"}, clear=True):
            validate_env.cache_clear()
            validate_env()  # should not raise
        validate_env.cache_clear()
