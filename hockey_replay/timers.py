"""Repeating timers that drive playback ticks."""

from __future__ import annotations

import asyncio
from typing import Callable, Protocol


class IntervalTimer(Protocol):
    """Protocol for a repeating timer.

    Starting an active timer replaces the previous schedule. After cancel()
    returns the callback must never run again for that schedule.
    """

    @property
    def active(self) -> bool:
        """Whether a schedule is currently armed."""
        ...

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        """Call ``callback`` every ``interval_ms`` milliseconds."""
        ...

    def cancel(self) -> None:
        """Stop the current schedule, if any."""
        ...


class AsyncioIntervalTimer:
    """IntervalTimer on an asyncio event loop.

    Each tick re-arms itself with call_later. A generation counter is bumped
    on every start/cancel, so a handle that already fired its way into the
    loop's ready queue sees a stale generation and does nothing.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._generation = 0

    @property
    def active(self) -> bool:
        return self._handle is not None

    def start(self, interval_ms: int, callback: Callable[[], None]) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        generation = self._generation
        delay = interval_ms / 1000

        def fire() -> None:
            if generation != self._generation:
                return
            self._handle = loop.call_later(delay, fire)
            callback()

        self._handle = loop.call_later(delay, fire)

    def cancel(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
