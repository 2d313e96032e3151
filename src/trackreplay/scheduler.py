"""Timer hosts for the playback engine's advancing clock.

The engine never sleeps or spawns threads. It asks a scheduler to call it back
after a delay and cancels the returned handle when playback stops.
"""

from __future__ import annotations

import asyncio
import heapq
import itertools
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TickScheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class ManualTimer:
    """Handle for a callback queued on a ManualScheduler."""

    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual-time scheduler: callbacks fire only when advance() is called.

    Usage:
        scheduler = ManualScheduler()
        engine = PlaybackEngine(track, scheduler=scheduler)
        engine.play()
        scheduler.advance(1.5)   # fires every tick due within 1.5 virtual seconds
    """

    def __init__(self) -> None:
        self._now = 0.0
        self._queue: list[tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending(self) -> int:
        """Number of timers queued and not cancelled."""
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(round(self._now + max(0.0, delay), 9), callback)
        heapq.heappush(self._queue, (timer.when, next(self._seq), timer))
        return timer

    def advance(self, seconds: float) -> int:
        """Move virtual time forward, firing due callbacks in order.

        Callbacks scheduled by a firing callback run in the same call if they
        fall due before the target time. Returns the number of callbacks fired.
        """
        # Round so repeated 0.1 s steps land exactly on their due times
        target = round(self._now + seconds, 9)
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            when, _, timer = heapq.heappop(self._queue)
            self._now = when
            if timer.cancelled:
                continue
            timer.callback()
            fired += 1
        self._now = target
        return fired


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop's call_later."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback)
