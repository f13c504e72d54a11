"""Timeline synthesis.

Turns the raw play list of one game into an ordered, gap-free Timeline.
A single left-to-right pass over the feed:

- drops plays with nothing to replay
- invents period boundaries for old records that lack them
- counts goals, shots and shot attempts into a per-event score snapshot
- runs the penalty tracker and attaches a ledger snapshot to every event
- announces shootout shooters and fills in the shootout board
- flags hat tricks and the dramatic pause after a penalty-shot call
- fixes the two same-second orderings the feed gets backwards
- decides whether the feed's coordinates are mirrored

Malformed plays never abort synthesis; the affected enrichment is skipped
and logged.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from typing import Any, Iterable

from .constants import (
    FACEOFF,
    FIRST_SEASON_MINORS_EXPIRE_ON_GOAL,
    GOAL,
    HAT_TRICK_AWAY,
    HAT_TRICK_HOME,
    IGNORED_EVENT_TYPES,
    LAST_SEASON_WITHOUT_PENALTY_TIMES,
    MAX_TRACKED_PENALTY_MINUTES,
    PENALTY,
    PERIOD_END,
    PERIOD_SECONDS,
    PERIOD_START,
    REGULATION_SECONDS,
    SHOOTOUT_SHOOTER_READY,
    STOPPAGE_LONG_MS,
    STOPPAGE_LONGEST_MS,
    TIMEOUT,
)
from .events import build_feed_event, build_synthetic_event
from .logging import logger
from .models import (
    CENTER_ICE,
    FeedEvent,
    GameState,
    PenaltyLedger,
    ScoreSnapshot,
    Side,
    Timeline,
    TimelineEvent,
)
from .penalties import PenaltyTracker

MAJOR_SEVERITY = "Major"
PENDING_SHOT = "-"
SHOOTOUT_GOAL = "O"
SHOOTOUT_MISS = "X"


def synthesize(game: GameState, raw_plays: Iterable[dict[str, Any]]) -> Timeline:
    """Build the replay timeline for one game.

    Args:
        game: Metadata built from the same raw record
        raw_plays: liveData.plays.allPlays, in feed order

    Returns:
        Timeline whose game carries the mirrored-coordinates decision
    """
    return TimelineSynthesizer(game).synthesize(raw_plays)


class TimelineSynthesizer:
    """Single-use builder holding the running state of one synthesis pass."""

    def __init__(self, game: GameState) -> None:
        self.game = game
        self.events: list[TimelineEvent] = []
        self.score = ScoreSnapshot()
        self.tracker = PenaltyTracker()
        self.scorer_goals: Counter[int] = Counter()
        self.orientation = {"right": 0, "wrong": 0}
        self.pending_penalty_shot = False
        self.shootout_first_shooter: Side | None = None
        # Next period whose boundary may still need inventing
        self.synthetic_period = 1
        # Held back while a batch of same-second penalties is still being assessed
        self.last_penalty_info = self.tracker.dump()

    def synthesize(self, raw_plays: Iterable[dict[str, Any]]) -> Timeline:
        feed_events = self._normalize(raw_plays)

        if not self.game.has_period_events:
            self._emit_synthetic(PERIOD_START, 0, period=1, description="Period Start")

        for index, event in enumerate(feed_events):
            next_event = feed_events[index + 1] if index + 1 < len(feed_events) else None
            self._fold(event, next_event)

        if not self.game.has_period_events:
            self._backfill_trailing_periods()

        mirror = self.orientation["wrong"] > self.orientation["right"]
        game = self.game.model_copy(update={"mirror_coordinates": mirror})

        logger.info(
            "timeline_synthesized",
            game_pk=game.game_pk,
            feed_events=len(feed_events),
            timeline_events=len(self.events),
            mirror_coordinates=mirror,
            home_goals=self.score.home.goals,
            away_goals=self.score.away.goals,
        )
        return Timeline(game=game, events=tuple(self.events))

    # -------------------------------------------------------------------------
    # Per-event folding
    # -------------------------------------------------------------------------

    def _normalize(self, raw_plays: Iterable[dict[str, Any]]) -> list[FeedEvent]:
        feed_events: list[FeedEvent] = []
        previous: FeedEvent | None = None
        for index, play in enumerate(raw_plays):
            if not isinstance(play, dict):
                logger.warning("feed_play_malformed", game_pk=self.game.game_pk, index=index)
                continue
            previous = build_feed_event(self.game, play, index, previous)
            feed_events.append(previous)
        return feed_events

    def _fold(self, event: FeedEvent, next_event: FeedEvent | None) -> None:
        if event.event_type in IGNORED_EVENT_TYPES:
            return
        if event.event_type == PENALTY and self._season_before(LAST_SEASON_WITHOUT_PENALTY_TIMES, inclusive=True):
            return

        if not self.game.has_period_events and event.period and event.period > self.synthetic_period:
            self._backfill_periods_until(event.period)

        ts = self._monotonic_time(event)
        stoppage_time = event.stoppage_time

        self._count_orientation(event)

        if event.is_shot_attempt() and self.pending_penalty_shot:
            self.pending_penalty_shot = False
            stoppage_time = STOPPAGE_LONGEST_MS
        if event.is_penalty_shot:
            self.pending_penalty_shot = True

        if event.is_shootout and not self.score.in_shootout:
            self.score = ScoreSnapshot(
                home=replace(self.score.home, shootout=()),
                away=replace(self.score.away, shootout=()),
            )

        self._count_shots(event)

        announcement_score: ScoreSnapshot | None = None
        if event.is_shootout and event.is_shot_attempt() and event.team is not None:
            announcement_score = self._shootout_attempt(event)
            if event.event_type != GOAL:
                stoppage_time = STOPPAGE_LONG_MS

        self._apply_penalties(event, ts)

        self.tracker.clean_up(ts)
        same_second_penalty_follows = (
            event.event_type == PENALTY
            and next_event is not None
            and next_event.event_type == PENALTY
            and next_event.time_elapsed == event.time_elapsed
        )
        if not same_second_penalty_follows:
            self.last_penalty_info = self.tracker.dump()

        folded = replace(
            event,
            time_elapsed=ts,
            stoppage_time=stoppage_time,
            score=self.score,
            penalty_info=self.last_penalty_info,
            special_anim=self._hat_trick(event) or event.special_anim,
        )

        announcement = None
        if announcement_score is not None:
            announcement = self._shooter_announcement(folded, announcement_score)

        self._append_in_causal_order(folded, announcement)

        # Old records have no faceoffs; add one to clear the goal display
        if not self.game.has_period_events and folded.event_type == GOAL and not folded.is_overtime():
            self._emit_synthetic(
                FACEOFF,
                ts,
                description="Faceoff",
                coordinates=CENTER_ICE,
                penalty_info=self.last_penalty_info,
            )

    def _monotonic_time(self, event: FeedEvent) -> int:
        if not self.events or event.time_elapsed >= self.events[-1].time_elapsed:
            return event.time_elapsed
        previous_time = self.events[-1].time_elapsed
        logger.warning(
            "timeline_out_of_order",
            game_pk=self.game.game_pk,
            index=event.source_index,
            event_type=event.event_type,
            time_elapsed=event.time_elapsed,
            clamped_to=previous_time,
        )
        return previous_time

    def _count_orientation(self, event: FeedEvent) -> None:
        """Most shot attempts happen near the attacked net; tally which end they came from."""
        if event.coordinates is None or event.team is None or not event.is_shot_attempt():
            return
        # Home attacks toward negative x in odd periods
        expected_side = -1 if event.team == "home" else 1
        if (event.period or 1) % 2 == 0:
            expected_side *= -1
        if expected_side * event.coordinates.x < 0:
            self.orientation["wrong"] += 1
        else:
            self.orientation["right"] += 1

    def _count_shots(self, event: FeedEvent) -> None:
        if not event.is_shot_attempt():
            return
        if event.team is None:
            logger.warning(
                "feed_event_team_missing",
                game_pk=self.game.game_pk,
                index=event.source_index,
                event_type=event.event_type,
            )
            return

        team_score = self.score.side(event.team)
        team_score = replace(
            team_score,
            shot_attempts=team_score.shot_attempts + 1,
            shots=team_score.shots + (1 if event.is_shot() else 0),
            goals=team_score.goals + (1 if event.event_type == GOAL else 0),
        )
        self.score = self.score.with_side(event.team, team_score)

    def _shootout_attempt(self, event: FeedEvent) -> ScoreSnapshot:
        """Record a shootout attempt; returns the score to show while the shooter is announced."""
        team = event.team
        if self.shootout_first_shooter is None:
            self.shootout_first_shooter = team

        home, away = self.score.home, self.score.away
        # A new round opens a pending square for both sides
        if team == self.shootout_first_shooter:
            home = replace(home, shootout=(home.shootout or ()) + (PENDING_SHOT,))
            away = replace(away, shootout=(away.shootout or ()) + (PENDING_SHOT,))
        announcement_score = ScoreSnapshot(home=home, away=away)

        shooter = announcement_score.side(team)
        result = SHOOTOUT_GOAL if event.event_type == GOAL else SHOOTOUT_MISS
        board = (shooter.shootout or ())[:-1] + (result,)
        self.score = announcement_score.with_side(team, replace(shooter, shootout=board))
        return announcement_score

    def _shooter_announcement(self, event: FeedEvent, score: ScoreSnapshot) -> TimelineEvent:
        description = f"{self.game.team(event.team).location_name} shooter"
        if event.shooter_name:
            description = f"{description}: {event.shooter_name}"
        return build_synthetic_event(
            SHOOTOUT_SHOOTER_READY,
            event.time_elapsed,
            score,
            period=event.period,
            description=description,
            penalty_info=self.last_penalty_info,
            team=event.team,
            tri_code=event.tri_code,
            coordinates=CENTER_ICE,
            stoppage_time=STOPPAGE_LONG_MS,
            is_shootout=True,
        )

    def _season_before(self, season: str, inclusive: bool = False) -> bool:
        """Compare against a rule cut-over; records without a season follow modern rules."""
        if not self.game.season:
            return False
        if inclusive:
            return self.game.season <= season
        return self.game.season < season

    def _apply_penalties(self, event: FeedEvent, ts: int) -> None:
        if event.team is None:
            return
        if event.event_type == GOAL:
            self.tracker.goal(event.team, ts)
        elif event.event_type == PENALTY:
            # Misconducts and penalty shots do not change the manpower
            minutes = event.penalty_minutes
            if minutes is None or not 0 < minutes <= MAX_TRACKED_PENALTY_MINUTES:
                return
            is_major = (
                self._season_before(FIRST_SEASON_MINORS_EXPIRE_ON_GOAL)
                or event.penalty_severity == MAJOR_SEVERITY
            )
            self.tracker.assess(event.team, ts, minutes, is_major)

    def _hat_trick(self, event: FeedEvent) -> str | None:
        if event.event_type != GOAL or event.is_shootout:
            return None
        if event.scorer_ids is None:
            logger.info(
                "hat_trick_check_skipped",
                game_pk=self.game.game_pk,
                index=event.source_index,
                reason="no_players",
            )
            return None

        special_anim = None
        for player_id in event.scorer_ids:
            self.scorer_goals[player_id] += 1
            if self.scorer_goals[player_id] == 3:
                special_anim = HAT_TRICK_HOME if event.team == "home" else HAT_TRICK_AWAY
        return special_anim

    def _append_in_causal_order(self, event: FeedEvent, announcement: TimelineEvent | None) -> None:
        """Append ``event``, moving it ahead of a same-second period end or timeout.

        The feed orders same-second plays arbitrarily. An overtime or
        shootout goal has to land before the period end it caused, and a
        goal before the timeout called right after it.
        """
        previous = self.events[-1] if self.events else None
        decides_period = (event.is_overtime() and event.event_type == GOAL) or (
            event.is_shootout and event.is_shot_attempt()
        )
        swap = (
            previous is not None
            and previous.time_elapsed == event.time_elapsed
            and (
                (decides_period and previous.event_type == PERIOD_END)
                or (event.event_type == GOAL and previous.event_type == TIMEOUT)
            )
        )

        if swap:
            displaced = self.events.pop()
            logger.debug(
                "timeline_reordered",
                game_pk=self.game.game_pk,
                moved=event.event_type,
                displaced=displaced.event_type,
                time_elapsed=event.time_elapsed,
            )
        if announcement is not None:
            self.events.append(announcement)
        self.events.append(event)
        if swap:
            self.events.append(replace(displaced, score=self.score))

    # -------------------------------------------------------------------------
    # Period boundaries for records without them
    # -------------------------------------------------------------------------

    def _emit_synthetic(
        self,
        event_type: str,
        ts: int,
        *,
        period: int | None = None,
        description: str = "",
        penalty_info: PenaltyLedger | None = None,
        **fields: Any,
    ) -> None:
        if penalty_info is None:
            self.tracker.clean_up(ts)
            penalty_info = self.tracker.dump()
        self.events.append(
            build_synthetic_event(
                event_type,
                ts,
                self.score,
                period=period,
                description=description,
                penalty_info=penalty_info,
                **fields,
            )
        )

    def _emit_period_change(self, ended_period: int, ts: int) -> None:
        self._emit_synthetic(PERIOD_END, ts, period=ended_period, description="Period End")
        self._emit_synthetic(PERIOD_START, ts, period=ended_period + 1, description="Period Start")

    def _backfill_periods_until(self, period: int) -> None:
        while self.synthetic_period < period:
            ts = self.synthetic_period * PERIOD_SECONDS
            if not self.game.is_playoffs:
                ts = min(self.game.max_game_seconds, ts)
            self._emit_period_change(self.synthetic_period, ts)
            self.synthetic_period += 1

    def _backfill_trailing_periods(self) -> None:
        """Close out regulation, plus an overtime period when the game ended tied."""
        last_period = 4 if self.score.home.goals == self.score.away.goals else 3
        while self.synthetic_period < last_period:
            self._emit_period_change(self.synthetic_period, self.synthetic_period * PERIOD_SECONDS)
            self.synthetic_period += 1

        last_event = self.events[-1]
        final_period = 3
        final_time = REGULATION_SECONDS
        if last_event.period and last_event.period > 3:
            final_period = last_event.period
            # Sudden death: the period ends with the deciding goal
            if last_event.event_type == GOAL:
                final_time = last_event.time_elapsed
            else:
                final_time = max(self.game.max_game_seconds, last_event.time_elapsed)
        self._emit_synthetic(PERIOD_END, final_time, period=final_period, description="Period End")
