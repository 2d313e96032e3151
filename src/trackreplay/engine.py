"""Track playback engine: a cursor over a recorded track driven by a tick clock."""

from __future__ import annotations

import bisect
import math
from collections import deque
from collections.abc import Callable

from trackreplay._logging import get_logger, log_command
from trackreplay.config import PlaybackConfig
from trackreplay.events import EventChannel, Subscription
from trackreplay.exceptions import DisposedError
from trackreplay.geo import cumulative_distances, relative_offsets_ms
from trackreplay.models.playback import PlaybackCursorState, PlaybackUpdate, PositionSnapshot
from trackreplay.models.track import Track
from trackreplay.scheduler import TickScheduler, TimerHandle


class PlaybackEngine:
    """Replays a recorded track for a map marker, progress bar and scrub control.

    The track is read-only for the lifetime of the engine. Autoplay accumulates
    virtual time (``base_tick_ms * speed`` per tick) and moves the cursor to the
    last sample whose offset from the first sample has been reached, pausing at
    the end of the track. Seeks clamp out-of-range targets instead of raising.

    Every state change is pushed to subscribers as a ``PlaybackUpdate``, once,
    right after the mutation.

    Usage:
        scheduler = ManualScheduler()
        with PlaybackEngine(track, scheduler=scheduler) as engine:
            engine.subscribe(render)
            engine.play()
            scheduler.advance(5.0)
    """

    def __init__(
        self,
        track: Track,
        scheduler: TickScheduler,
        config: PlaybackConfig | None = None,
    ) -> None:
        self._config = config or PlaybackConfig()
        self._speeds = self._config.speed_table
        self._scheduler = scheduler

        self._track = track
        self._samples = track.samples
        self._offsets_ms = relative_offsets_ms(self._samples)
        self._distances = cumulative_distances(self._samples)

        self._index = 0
        self._playing = False
        self._speed = float(self._config.initial_speed)
        self._virtual_ms = 0.0

        self._timer: TimerHandle | None = None
        self._generation = 0
        self._disposed = False
        self._updates: EventChannel[PlaybackUpdate] = EventChannel("playback")
        self._pending: deque[PlaybackUpdate] = deque()
        self._delivering = False

        get_logger().info(
            "Playback session opened for track %r (%d samples)", track.id, len(self._samples),
        )

    def __enter__(self) -> PlaybackEngine:
        return self

    def __exit__(self, *args: object) -> None:
        self.dispose()

    # ── State readout ──────────────────────────────────────────

    @property
    def track(self) -> Track:
        return self._track

    @property
    def config(self) -> PlaybackConfig:
        return self._config

    @property
    def current_index(self) -> int:
        return self._index

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def speed(self) -> float:
        return self._speed

    @property
    def allowed_speeds(self) -> tuple[float, ...]:
        return self._speeds.speeds

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def cursor(self) -> PlaybackCursorState:
        return PlaybackCursorState(
            current_index=self._index,
            is_playing=self._playing,
            speed_multiplier=self._speed,
        )

    @property
    def _last_index(self) -> int:
        return max(0, len(self._samples) - 1)

    def compute_snapshot(self) -> PositionSnapshot:
        """Position, elapsed time and distance implied by the current cursor."""
        count = len(self._samples)
        if count == 0:
            return PositionSnapshot()

        index = self._index
        sample = self._samples[index]
        elapsed = (sample.timestamp_ms - self._samples[0].timestamp_ms) / 1000
        return PositionSnapshot(
            index=index,
            sample=sample,
            progress=index / (count - 1) if count > 1 else 0.0,
            time_elapsed_seconds=max(0.0, elapsed),
            distance_traveled_meters=self._distances[index],
        )

    def subscribe(self, callback: Callable[[PlaybackUpdate], None]) -> Subscription:
        """Register a callback for every state change."""
        self._ensure_alive()
        return self._updates.subscribe(callback)

    # ── Commands ───────────────────────────────────────────────

    @log_command
    def play(self) -> None:
        """Start autoplay. No-op when already playing or nothing is left to animate."""
        self._ensure_alive()
        if self._playing or len(self._samples) < 2 or self._index >= self._last_index:
            return
        self._playing = True
        self._arm()
        self._notify()

    @log_command
    def pause(self) -> None:
        """Stop autoplay. Idempotent."""
        self._ensure_alive()
        if not self._playing:
            return
        self._stop_clock()
        self._playing = False
        self._notify()

    def toggle_play_pause(self) -> None:
        if self._playing:
            self.pause()
        else:
            self.play()

    @log_command
    def set_speed(self, multiplier: float) -> None:
        """Select a speed from the allowed table; raises InvalidSpeedError otherwise.

        The new speed applies from the next tick; accumulated progress is kept.
        """
        self._ensure_alive()
        speed = self._speeds.validate(multiplier)
        if speed == self._speed:
            return
        self._speed = speed
        self._notify()

    def cycle_speed(self) -> float:
        """Advance to the next allowed speed, wrapping around; return it."""
        self.set_speed(self._speeds.next_after(self._speed))
        return self._speed

    @log_command
    def seek_to_index(self, index: int) -> None:
        """Move the cursor to *index*, clamped to the track. Play state is kept."""
        self._ensure_alive()
        target = max(0, min(int(index), self._last_index))
        self._virtual_ms = float(self._offsets_ms[target]) if self._offsets_ms else 0.0
        if target == self._index:
            return
        self._index = target
        self._notify()

    def seek_to_progress(self, progress: float) -> None:
        """Move the cursor to a normalized position in [0, 1] (clamped)."""
        if math.isnan(progress):
            progress = 0.0
        progress = max(0.0, min(1.0, progress))
        self.seek_to_index(math.floor(progress * self._last_index))

    def skip_forward(self) -> None:
        self._ensure_alive()
        if self._samples:
            self.seek_to_index(self._index + self._skip_step())

    def skip_backward(self) -> None:
        self._ensure_alive()
        if self._samples:
            self.seek_to_index(self._index - self._skip_step())

    @log_command
    def reset(self) -> None:
        """Rewind to the first sample and stop."""
        self._ensure_alive()
        self._stop_clock()
        self._virtual_ms = 0.0
        changed = self._playing or self._index != 0
        self._playing = False
        self._index = 0
        if changed:
            self._notify()

    def dispose(self) -> None:
        """End the session: stop the clock and drop subscribers. Idempotent.

        Any later command raises DisposedError; a timer that still fires is ignored.
        """
        if self._disposed:
            return
        self._stop_clock()
        self._playing = False
        self._disposed = True
        self._updates.clear()
        self._pending.clear()
        get_logger().info("Playback session closed for track %r", self._track.id)

    # ── Clock ──────────────────────────────────────────────────

    def _skip_step(self) -> int:
        return max(1, math.floor(self._config.skip_fraction * len(self._samples)))

    def _arm(self) -> None:
        generation = self._generation
        self._timer = self._scheduler.call_later(
            self._config.base_tick_seconds, lambda: self._tick(generation),
        )

    def _stop_clock(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _tick(self, generation: int) -> None:
        if self._disposed or generation != self._generation or not self._playing:
            return
        self._timer = None

        self._virtual_ms += self._config.base_tick_ms * self._speed
        reached = bisect.bisect_right(self._offsets_ms, self._virtual_ms) - 1
        new_index = min(max(self._index, reached), self._last_index)
        changed = new_index != self._index
        self._index = new_index

        if self._index >= self._last_index:
            self._stop_clock()
            self._playing = False
            changed = True
        else:
            self._arm()

        if changed:
            self._notify()

    def _ensure_alive(self) -> None:
        if self._disposed:
            raise DisposedError(f"Playback session for track {self._track.id!r} was disposed")

    def _notify(self) -> None:
        # Updates raised by a subscriber wait until the current one reaches everyone
        self._pending.append(PlaybackUpdate(snapshot=self.compute_snapshot(), cursor=self.cursor))
        if self._delivering:
            return
        self._delivering = True
        try:
            while self._pending:
                self._updates.emit(self._pending.popleft())
        finally:
            self._delivering = False
