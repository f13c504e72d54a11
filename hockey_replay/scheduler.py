"""
Playback scheduler.

Advances a virtual game clock on a repeating timer, dispatches timeline
events when the clock reaches them, pauses for stoppages and supports
scrubbing to any point of the game.

Speeds are expressed in milliseconds of wall-clock time per virtual game
second, so a smaller number plays faster. The timer never fires faster
than ``tick_floor_ms``; faster speeds advance the clock by more than one
second per tick instead.
"""

from __future__ import annotations

import math
from bisect import bisect_left
from typing import Literal, Protocol

from .config import PlaybackConfig, settings
from .constants import PERIOD_SECONDS
from .logging import logger
from .models import (
    CENTER_ICE,
    AdvantageState,
    ClockUpdate,
    Coordinates,
    Frame,
    LoadingState,
    ScoreSnapshot,
    Timeline,
    TimelineEvent,
)
from .penalties import PenaltyTracker
from .preferences import MemoryPreferencesStore, Preferences, PreferencesStore
from .timers import AsyncioIntervalTimer, IntervalTimer

SpeedDirection = Literal["up", "down"]


class Presenter(Protocol):
    """Protocol for whatever renders the scoreboard."""

    def show_event(self, frame: Frame) -> None:
        """Render the state right after an event is dispatched."""
        ...

    def show_clock(self, update: ClockUpdate) -> None:
        """Render clock movement between events."""
        ...

    def show_status(self, state: LoadingState) -> None:
        """Render the loading state of the selected game."""
        ...


class PlaybackScheduler:
    """Steps through one loaded Timeline at the viewer's chosen speed."""

    def __init__(
        self,
        presenter: Presenter,
        timer: IntervalTimer | None = None,
        preferences_store: PreferencesStore | None = None,
        config: PlaybackConfig | None = None,
    ) -> None:
        self.presenter = presenter
        self.timer = timer or AsyncioIntervalTimer()
        self.preferences_store = preferences_store or MemoryPreferencesStore()
        self.config = config or settings.playback_config

        preferences = self.preferences_store.load()
        self.playback_speed = preferences.playback_speed
        self.pause_on_all_stoppages = preferences.pause_on_all_stoppages

        self.loading_state = LoadingState.IDLE
        self.timeline: Timeline | None = None
        self._tracker = PenaltyTracker()
        self._reset_clock()

    def _reset_clock(self) -> None:
        self.time_elapsed = 0
        self.period = 1
        self.next_index = 0
        self.stoppage_remaining = 0
        self.is_playing = False
        self.fast_forward = False
        self.score = ScoreSnapshot()
        self.coordinates: Coordinates = CENTER_ICE
        self.advantage: AdvantageState | None = None

    # -------------------------------------------------------------------------
    # Loading lifecycle
    # -------------------------------------------------------------------------

    def _set_loading_state(self, state: LoadingState) -> None:
        self.loading_state = state
        self.presenter.show_status(state)

    def begin_download(self) -> None:
        """Drop the current game and wait for a new one to arrive."""
        self.unload()
        self._set_loading_state(LoadingState.DOWNLOADING)

    def begin_initializing(self) -> None:
        self._set_loading_state(LoadingState.INITIALIZING)

    def fail(self, reason: str) -> None:
        """Record that the selected game could not be loaded."""
        self.pause()
        self.timeline = None
        logger.warning("playback_load_failed", reason=reason)
        self._set_loading_state(LoadingState.ERROR)

    def load(self, timeline: Timeline) -> None:
        """Start a new timeline from the opening faceoff."""
        self.pause()
        self.timeline = timeline
        self._tracker = PenaltyTracker(timeline.game.home.tri_code, timeline.game.away.tri_code)
        self._reset_clock()
        self._set_loading_state(LoadingState.READY)
        logger.info(
            "playback_loaded",
            game_pk=timeline.game.game_pk,
            events=len(timeline),
            end_time=timeline.end_time,
        )
        self.play()

    def unload(self) -> None:
        self.pause()
        self.timeline = None
        self._set_loading_state(LoadingState.IDLE)

    # -------------------------------------------------------------------------
    # Transport controls
    # -------------------------------------------------------------------------

    @property
    def tick_interval_ms(self) -> int:
        return max(self.config.tick_floor_ms, self.playback_speed)

    def play(self) -> None:
        if self.timeline is None:
            logger.debug("playback_play_ignored", reason="no_timeline")
            return
        self.timer.start(self.tick_interval_ms, self.tick)
        self.is_playing = True
        self.fast_forward = False

    def pause(self) -> None:
        self.timer.cancel()
        self.is_playing = False
        self.fast_forward = False

    def set_speed(self, direction: SpeedDirection) -> None:
        """Step one rung faster ("up") or slower ("down") on the speed ladder."""
        ladder = self.config.speed_ladder
        if self.playback_speed in ladder:
            index = ladder.index(self.playback_speed)
        else:
            index = ladder.index(self.config.fallback_speed)

        if direction == "up" and index > 0:
            index -= 1
        elif direction == "down" and index < len(ladder) - 1:
            index += 1
        else:
            return

        previous = self.playback_speed
        self.playback_speed = ladder[index]
        logger.info("playback_speed_changed", previous=previous, speed=self.playback_speed)
        if self.is_playing:
            self.pause()
            self.play()
        self._save_preferences()

    def set_fast_forward(self, enabled: bool) -> None:
        """Hold fast forward. Has no effect while paused."""
        if enabled and not self.is_playing:
            return
        self.fast_forward = enabled

    def set_stoppage_setting(self, pause_on_all_stoppages: bool) -> None:
        """Choose whether minor stoppages (icings, offsides) pause the clock."""
        self.pause_on_all_stoppages = pause_on_all_stoppages
        self._save_preferences()

    def _save_preferences(self) -> None:
        self.preferences_store.save(
            Preferences(
                playback_speed=self.playback_speed,
                pause_on_all_stoppages=self.pause_on_all_stoppages,
            )
        )

    # -------------------------------------------------------------------------
    # Clock
    # -------------------------------------------------------------------------

    def tick(self) -> None:
        """Advance playback by one timer tick."""
        if not self.is_playing or self.timeline is None:
            return

        events = self.timeline.events
        if self.next_index >= len(events):
            self._finish()
            return

        speed: float = self.playback_speed
        if self.fast_forward:
            speed = max(1, speed / self.config.fast_forward_factor)

        if self.stoppage_remaining > 0:
            decrement = max(self.config.tick_floor_ms, speed)
            if self.fast_forward:
                decrement *= self.config.fast_forward_factor
            self.stoppage_remaining -= decrement
            return

        next_event = events[self.next_index]
        time_elapsed = self.time_elapsed
        if time_elapsed < next_event.time_elapsed:
            time_elapsed += max(1, math.floor(self.config.tick_floor_ms / speed))

        if time_elapsed >= next_event.time_elapsed:
            self._dispatch(next_event)
            self.next_index += 1
            if self.next_index >= len(events):
                self._finish()
            return

        self.time_elapsed = time_elapsed
        self.period = self._period_for(time_elapsed)
        self.advantage = self._tracker.get_advantage_state(time_elapsed)
        self.presenter.show_clock(
            ClockUpdate(time_elapsed=time_elapsed, period=self.period, advantage=self.advantage)
        )

    def _period_for(self, time_elapsed: int) -> int:
        """Period implied by the clock; events set it, this only keeps it sane."""
        if time_elapsed > 0 and time_elapsed % PERIOD_SECONDS == 0:
            # On a boundary both the ending and the starting period are valid
            candidates = (math.ceil(time_elapsed / PERIOD_SECONDS), math.ceil((time_elapsed + 1) / PERIOD_SECONDS))
            if self.period in candidates:
                return self.period
            return time_elapsed // PERIOD_SECONDS
        return time_elapsed // PERIOD_SECONDS + 1

    def _finish(self) -> None:
        self.pause()
        logger.info(
            "playback_finished",
            game_pk=self.timeline.game.game_pk if self.timeline else None,
            time_elapsed=self.time_elapsed,
        )

    def seek(self, value: int) -> None:
        """Jump to ``value`` seconds into the game.

        Restores the state of the last event before ``value``. Out-of-range
        values are clamped to the game's extent.
        """
        if self.timeline is None or not self.timeline.events:
            return

        target = min(max(0, int(value)), self.timeline.end_time)
        index = bisect_left(self.timeline.times, target, lo=1)

        self.stoppage_remaining = 0
        self.next_index = index
        self._dispatch(self.timeline.events[index - 1], ts=target)
        logger.debug("playback_seek", requested=value, target=target, next_index=index)

    def _dispatch(self, event: TimelineEvent, ts: int | None = None) -> None:
        """Apply an event's snapshots and hand the result to the presenter.

        Args:
            event: Timeline event to apply
            ts: Clock value to show instead of the event's own time (seeking)
        """
        description = event.description
        stoppage_time = event.stoppage_time
        if ts is None:
            ts = event.time_elapsed
        elif ts - event.time_elapsed > self.config.seek_overshoot_tolerance_seconds:
            description = ""
            stoppage_time = 0

        self._tracker.load(event.penalty_info)
        self.advantage = self._tracker.get_advantage_state(ts)
        self.score = event.score
        self.time_elapsed = ts
        if event.coordinates is not None:
            self.coordinates = event.coordinates
        if event.period:
            self.period = event.period

        self.presenter.show_event(
            Frame(
                time_elapsed=ts,
                period=self.period,
                description=description,
                event_label=event.event_label,
                score=event.score,
                coordinates=self.coordinates,
                special_anim=event.special_anim,
                advantage=self.advantage,
            )
        )

        if stoppage_time and (not event.minor_stoppage or self.pause_on_all_stoppages):
            self.stoppage_remaining = stoppage_time
        else:
            self.stoppage_remaining = 0
