"""Shared pytest fixtures and configuration."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any, Callable

import pytest

# Ensure the package is importable without installing it
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

# Set environment variables before any package imports
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("LOG_LEVEL", "WARNING")


def build_play(
    event_type: str,
    period: int | None,
    period_time: str | None,
    tri_code: str | None = None,
    *,
    description: str = "",
    coordinates: dict[str, Any] | None = None,
    players: list[dict[str, Any]] | None = None,
    period_type: str = "REGULAR",
    **result: Any,
) -> dict[str, Any]:
    """Build one liveData.plays.allPlays entry."""
    play: dict[str, Any] = {
        "result": {"eventTypeId": event_type, "description": description or event_type.title(), **result},
        "about": {"period": period, "periodType": period_type, "periodTime": period_time},
        "coordinates": coordinates if coordinates is not None else {},
    }
    if tri_code:
        play["team"] = {"triCode": tri_code}
    if players is not None:
        play["players"] = players
    return play


def build_scorer(player_id: int, name: str = "Sid Skater") -> list[dict[str, Any]]:
    return [{"playerType": "Scorer", "player": {"id": player_id, "fullName": name}}]


def build_game(
    plays: list[dict[str, Any]],
    *,
    game_pk: int = 2019020001,
    season: str = "20192020",
    game_type: str = "R",
    home: str = "TOR",
    away: str = "MTL",
) -> dict[str, Any]:
    """Build a complete raw game record around ``plays``."""
    return {
        "gamePk": game_pk,
        "gameData": {
            "game": {"pk": game_pk, "season": season, "type": game_type},
            "datetime": {"dateTime": "2019-10-02T23:00:00Z"},
            "venue": {"name": "Scotiabank Arena"},
            "teams": {
                "home": {
                    "id": 10,
                    "name": "Toronto Maple Leafs",
                    "triCode": home,
                    "locationName": "Toronto",
                    "teamName": "Maple Leafs",
                },
                "away": {
                    "id": 8,
                    "name": "Montréal Canadiens",
                    "triCode": away,
                    "locationName": "Montréal",
                    "teamName": "Canadiens",
                },
            },
        },
        "liveData": {"plays": {"allPlays": plays}},
    }


class ManualTimer:
    """IntervalTimer that only fires when the test says so."""

    def __init__(self) -> None:
        self.interval_ms: int | None = None
        self.callback: Callable[[], None] | None = None
        self.starts = 0
        self.cancels = 0

    @property
    def active(self) -> bool:
        return self.callback is not None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.interval_ms = interval_ms
        self.callback = callback
        self.starts += 1

    def cancel(self) -> None:
        self.callback = None
        self.cancels += 1

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            if self.callback is None:
                return
            self.callback()

    def run_until_idle(self, limit: int = 1_000_000) -> int:
        """Fire until the schedule is cancelled; returns the number of ticks."""
        ticks = 0
        while self.callback is not None and ticks < limit:
            self.callback()
            ticks += 1
        return ticks


class RecordingPresenter:
    """Presenter that keeps everything it is shown."""

    def __init__(self) -> None:
        self.frames: list[Any] = []
        self.clock_updates: list[Any] = []
        self.statuses: list[Any] = []

    def show_event(self, frame: Any) -> None:
        self.frames.append(frame)

    def show_clock(self, update: Any) -> None:
        self.clock_updates.append(update)

    def show_status(self, state: Any) -> None:
        self.statuses.append(state)


@pytest.fixture
def manual_timer() -> ManualTimer:
    return ManualTimer()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def mock_httpx_client():
    """Create a mock httpx client."""
    from unittest.mock import MagicMock

    client = MagicMock()
    client.get.return_value = MagicMock(status_code=200, json=lambda: {}, text="")
    return client


@pytest.fixture
def sample_game() -> dict[str, Any]:
    """A short modern game: a penalty, a power-play goal and a tied-up finish."""
    return build_game(
        [
            build_play("PERIOD_START", 1, "00:00"),
            build_play("FACEOFF", 1, "00:00", "TOR", coordinates={"x": 0, "y": 0}),
            build_play("SHOT", 1, "03:10", "TOR", coordinates={"x": -60, "y": 5}),
            build_play("PENALTY", 1, "05:00", "MTL", penaltyMinutes=2, penaltySeverity="Minor"),
            build_play(
                "GOAL",
                1,
                "06:00",
                "TOR",
                coordinates={"x": -80, "y": 2},
                players=build_scorer(100),
            ),
            build_play("STOP", 1, "08:00", description="Icing"),
            build_play("PERIOD_END", 1, "20:00"),
            build_play("PERIOD_START", 2, "00:00"),
            build_play("MISSED_SHOT", 2, "02:00", "MTL", description="Wide of Net", coordinates={"x": -70, "y": 3}),
            build_play("PERIOD_END", 2, "20:00"),
            build_play("PERIOD_START", 3, "00:00"),
            build_play("GOAL", 3, "10:00", "MTL", coordinates={"x": -75, "y": 0}, players=build_scorer(200)),
            build_play("PERIOD_END", 3, "20:00"),
        ]
    )
