"""Playback state and the payloads handed to the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .timeline import AdvantageState, Coordinates, ScoreSnapshot


class LoadingState(str, Enum):
    """Lifecycle of the currently selected game."""

    IDLE = "idle"
    ERROR = "error"
    DOWNLOADING = "downloading"
    INITIALIZING = "initializing"
    READY = "ready"


@dataclass(frozen=True)
class Frame:
    """Everything the scoreboard needs after an event is dispatched."""

    time_elapsed: int
    period: int
    description: str
    event_label: str
    score: ScoreSnapshot
    coordinates: Coordinates
    special_anim: str | None
    advantage: AdvantageState | None


@dataclass(frozen=True)
class ClockUpdate:
    """Clock movement between events."""

    time_elapsed: int
    period: int
    advantage: AdvantageState | None
