"""Typed models shared across the replay engine."""

from .playback import ClockUpdate, Frame, LoadingState
from .schemas import GameState, Side, TeamInfo, opponent
from .timeline import (
    CENTER_ICE,
    AdvantageState,
    Coordinates,
    FeedEvent,
    Penalty,
    PenaltyLedger,
    ScoreSnapshot,
    SyntheticEvent,
    TeamScore,
    Timeline,
    TimelineEvent,
)

__all__ = [
    "AdvantageState",
    "CENTER_ICE",
    "ClockUpdate",
    "Coordinates",
    "FeedEvent",
    "Frame",
    "GameState",
    "LoadingState",
    "Penalty",
    "PenaltyLedger",
    "ScoreSnapshot",
    "Side",
    "SyntheticEvent",
    "TeamInfo",
    "TeamScore",
    "Timeline",
    "TimelineEvent",
    "opponent",
]
