"""Recording sessions: location fan-out and appending fixes to stored tracks."""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable

from trackreplay._logging import get_logger
from trackreplay.constants import MAX_ACCURACY_M
from trackreplay.events import EventChannel, Subscription
from trackreplay.exceptions import StorageError, TrackReplayError
from trackreplay.models.location import LocationSample
from trackreplay.models.track import CurrentTrackInfo, Track
from trackreplay.storage.tracks import TrackStorage


def _now_ms() -> int:
    return int(time.time() * 1000)


class LocationService:
    """Pushes GPS fixes and acquisition errors to subscribers.

    Construct one per recording host and pass it to whatever needs fixes; a
    platform adapter feeds it through ``publish`` and ``publish_error``.
    """

    def __init__(self, max_accuracy_m: float = MAX_ACCURACY_M) -> None:
        self.max_accuracy_m = max_accuracy_m
        self._locations: EventChannel[LocationSample] = EventChannel("locations")
        self._errors: EventChannel[str] = EventChannel("location-errors")
        self.last_location: LocationSample | None = None

    def subscribe_locations(self, callback: Callable[[LocationSample], None]) -> Subscription:
        return self._locations.subscribe(callback)

    def subscribe_errors(self, callback: Callable[[str], None]) -> Subscription:
        return self._errors.subscribe(callback)

    def publish(self, sample: LocationSample) -> None:
        """Fan *sample* out to subscribers, unless its accuracy is too poor to use."""
        if sample.accuracy is not None and sample.accuracy > self.max_accuracy_m:
            get_logger().warning(
                "Very poor accuracy, skipping fix: %.1f m > %.1f m",
                sample.accuracy, self.max_accuracy_m,
            )
            return
        self.last_location = sample
        self._locations.emit(sample)

    def publish_error(self, message: str) -> None:
        get_logger().warning("Location error: %s", message)
        self._errors.emit(message)


class TrackRecorder:
    """Records fixes from a LocationService into a stored track.

    Usage:
        recorder = TrackRecorder(storage, service)
        recorder.start("Morning run")
        ...                      # service.publish(sample) for each fix
        track = recorder.stop()
    """

    def __init__(
        self,
        storage: TrackStorage,
        service: LocationService,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        self._storage = storage
        self._service = service
        self._clock = clock
        self._subscription: Subscription | None = None
        self._track_id: str | None = None

    @property
    def is_recording(self) -> bool:
        return self._subscription is not None

    @property
    def track_id(self) -> str | None:
        return self._track_id

    def start(self, name: str) -> Track:
        """Create a new, incomplete track and start appending fixes to it."""
        if self.is_recording:
            raise TrackReplayError(f"Already recording track {self._track_id!r}")
        now = self._clock()
        track = Track(
            id=f"track_{uuid.uuid4().hex}",
            name=name,
            created_at=now,
            last_modified=now,
        )
        self._storage.save_track(track)
        self._begin(track, now)
        return track

    def resume(self, track_id: str) -> Track:
        """Reopen a stored track (complete or not) and keep recording into it."""
        if self.is_recording:
            raise TrackReplayError(f"Already recording track {self._track_id!r}")
        track = self._storage.get_track(track_id)
        if track is None:
            raise StorageError(f"No stored track with id {track_id!r}")
        now = self._clock()
        track = track.with_status(is_complete=False, now_ms=now)
        self._storage.save_track(track)
        self._begin(track, now)
        return track

    def stop(self) -> Track | None:
        """Stop recording; mark the track complete and return it."""
        if self._subscription is None:
            return None
        self._subscription.unsubscribe()
        self._subscription = None

        track_id, self._track_id = self._track_id, None
        self._storage.clear_current_track_info()
        track = self._storage.get_track(track_id) if track_id else None
        if track is None:
            return None
        track = track.with_status(is_complete=True, now_ms=self._clock())
        self._storage.save_track(track)
        get_logger().info("Stopped recording %r with %d samples", track.id, len(track))
        return track

    def _begin(self, track: Track, now: int) -> None:
        self._storage.set_current_track_info(
            CurrentTrackInfo(track_id=track.id, track_name=track.name, start_time=now),
        )
        self._track_id = track.id
        self._subscription = self._service.subscribe_locations(self._on_location)
        get_logger().info("Recording into track %r", track.id)

    def _on_location(self, sample: LocationSample) -> None:
        self._storage.add_location_to_current_track(sample, now_ms=self._clock())
