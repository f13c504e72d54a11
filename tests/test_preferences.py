"""Tests for preferences.py module."""

from __future__ import annotations

import json

from hockey_replay.preferences import JsonPreferencesStore, MemoryPreferencesStore, Preferences


class TestPreferences:
    def test_defaults(self):
        preferences = Preferences()

        assert preferences.playback_speed == 40
        assert preferences.pause_on_all_stoppages is True

    def test_accepts_stored_camel_case(self):
        preferences = Preferences.model_validate({"playbackSpeed": 100, "pauseOnAllStoppages": False})

        assert preferences.playback_speed == 100
        assert preferences.pause_on_all_stoppages is False


class TestJsonPreferencesStore:
    """Tests for JsonPreferencesStore."""

    def test_missing_file_gives_defaults(self, tmp_path):
        store = JsonPreferencesStore(tmp_path / "prefs.json")

        assert store.load() == Preferences()

    def test_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "prefs.json"
        store = JsonPreferencesStore(path)

        store.save(Preferences(playback_speed=25, pause_on_all_stoppages=False))

        assert json.loads(path.read_text()) == {"playbackSpeed": 25, "pauseOnAllStoppages": False}
        assert store.load() == Preferences(playback_speed=25, pause_on_all_stoppages=False)

    def test_corrupt_file_gives_defaults(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{not json")

        assert JsonPreferencesStore(path).load() == Preferences()

    def test_wrong_shape_gives_defaults(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text(json.dumps({"playbackSpeed": "fast"}))

        assert JsonPreferencesStore(path).load() == Preferences()

    def test_off_ladder_speed_kept(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text(json.dumps({"playbackSpeed": 41}))

        assert JsonPreferencesStore(path).load().playback_speed == 41


class TestMemoryPreferencesStore:
    def test_save_is_copied(self):
        store = MemoryPreferencesStore()
        preferences = Preferences(playback_speed=20)

        store.save(preferences)
        preferences.playback_speed = 1000

        assert store.load().playback_speed == 20
