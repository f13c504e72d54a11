"""Timeline value types.

Everything in this module is immutable. Each timeline event owns its own
score and penalty snapshot, so scrubbing to any event never requires
replaying the game from the start and no later mutation can leak backwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterator, NamedTuple, Union

from ..constants import GOAL, OVERTIME_START_SECONDS, SHOT_ATTEMPT_TYPES, SHOT_ON_GOAL_TYPES
from .schemas import GameState, Side


@dataclass(frozen=True)
class Coordinates:
    """On-ice location. Opaque pass-through; (0, 0) is center ice."""

    x: float
    y: float


CENTER_ICE = Coordinates(0, 0)


# =============================================================================
# SCORE
# =============================================================================


@dataclass(frozen=True)
class TeamScore:
    goals: int = 0
    shots: int = 0
    shot_attempts: int = 0
    # One entry per shooter ('-' pending, 'O' scored, 'X' missed); None until a shootout starts
    shootout: tuple[str, ...] | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "goals": self.goals,
            "shots": self.shots,
            "shotAttempts": self.shot_attempts,
        }
        if self.shootout is not None:
            payload["shootoutState"] = list(self.shootout)
        return payload


@dataclass(frozen=True)
class ScoreSnapshot:
    """Cumulative score, shots and shot attempts for both sides."""

    home: TeamScore = field(default_factory=TeamScore)
    away: TeamScore = field(default_factory=TeamScore)

    def side(self, side: Side) -> TeamScore:
        return self.home if side == "home" else self.away

    def with_side(self, side: Side, score: TeamScore) -> ScoreSnapshot:
        return replace(self, **{side: score})

    @property
    def in_shootout(self) -> bool:
        return self.home.shootout is not None

    def to_dict(self) -> dict[str, Any]:
        return {"home": self.home.to_dict(), "away": self.away.to_dict()}


# =============================================================================
# PENALTIES
# =============================================================================


class Penalty(NamedTuple):
    """A running penalty: majors (and pre-1956 minors) survive goals."""

    is_major: bool
    expires_at: int


@dataclass(frozen=True)
class PenaltyLedger:
    """Snapshot of every running penalty, per side."""

    home: tuple[Penalty, ...] = ()
    away: tuple[Penalty, ...] = ()

    def is_empty(self) -> bool:
        return not self.home and not self.away

    def to_dict(self) -> dict[str, list[list[Any]]]:
        return {
            "home": [[p.is_major, p.expires_at] for p in self.home],
            "away": [[p.is_major, p.expires_at] for p in self.away],
        }


@dataclass(frozen=True)
class AdvantageState:
    """Numerical advantage at a moment in time."""

    team: Side  # side with the extra skater(s)
    tri_code: str | None
    type: str  # "PP" or "5v3"
    exp: int  # timestamp when the state next changes
    clock: str  # M:SS until exp

    def to_dict(self) -> dict[str, Any]:
        return {
            "team": self.team,
            "triCode": self.tri_code,
            "type": self.type,
            "exp": self.exp,
            "clock": self.clock,
        }


# =============================================================================
# EVENTS
# =============================================================================


@dataclass(frozen=True)
class _EventFields:
    event_type: str
    time_elapsed: int  # seconds since opening faceoff
    period: int | None = None
    description: str = ""
    coordinates: Coordinates | None = None
    tri_code: str | None = None
    team: Side | None = None
    stoppage_time: int = 0  # ms to pause after dispatch
    minor_stoppage: bool = False
    score: ScoreSnapshot = field(default_factory=ScoreSnapshot)
    penalty_info: PenaltyLedger = field(default_factory=PenaltyLedger)
    special_anim: str | None = None
    is_shootout: bool = False

    def is_shot(self) -> bool:
        """Whether this event counts as a shot on goal."""
        return self.event_type in SHOT_ON_GOAL_TYPES

    def is_shot_attempt(self) -> bool:
        return self.event_type in SHOT_ATTEMPT_TYPES

    def is_overtime(self) -> bool:
        return self.time_elapsed > OVERTIME_START_SECONDS

    @property
    def event_label(self) -> str:
        if self.event_type == GOAL:
            return "GOAL_HOME" if self.team == "home" else "GOAL_AWAY"
        return self.event_type


@dataclass(frozen=True)
class FeedEvent(_EventFields):
    """An event taken one-to-one from a play in the feed."""

    source_index: int = -1
    is_penalty_shot: bool = False
    penalty_minutes: int | None = None
    penalty_severity: str | None = None
    # None when the feed carried no player list
    scorer_ids: tuple[int, ...] | None = None
    shooter_name: str | None = None


@dataclass(frozen=True)
class SyntheticEvent(_EventFields):
    """An event invented during synthesis (period boundaries, faceoffs, shooter announcements)."""


TimelineEvent = Union[FeedEvent, SyntheticEvent]


@dataclass(frozen=True)
class Timeline:
    """Ordered, fully annotated event sequence for one game."""

    game: GameState
    events: tuple[TimelineEvent, ...] = ()

    def __len__(self) -> int:
        return len(self.events)

    def __getitem__(self, index: int) -> TimelineEvent:
        return self.events[index]

    def __iter__(self) -> Iterator[TimelineEvent]:
        return iter(self.events)

    @property
    def times(self) -> list[int]:
        return [event.time_elapsed for event in self.events]

    @property
    def end_time(self) -> int:
        return self.events[-1].time_elapsed if self.events else 0
