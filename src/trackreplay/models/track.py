"""Recorded track and recording-session models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, computed_field

from trackreplay.geo import cumulative_distance, elapsed_seconds
from trackreplay.models.location import LocationSample


class Track(BaseModel):
    """A named, ordered sequence of location samples.

    ``total_distance`` and ``duration`` are derived from ``samples`` on access, so
    they can never go stale. They are written out on serialization and ignored
    when a stored track is loaded.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    samples: tuple[LocationSample, ...] = ()
    created_at: int
    last_modified: int
    is_complete: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_distance(self) -> float:
        """Path length in meters."""
        return cumulative_distance(self.samples)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration(self) -> float:
        """Seconds between the first and last sample."""
        return elapsed_seconds(self.samples)

    def __len__(self) -> int:
        return len(self.samples)

    def with_sample(self, sample: LocationSample, now_ms: int) -> Track:
        """Return a copy with *sample* appended."""
        return self.model_copy(
            update={"samples": (*self.samples, sample), "last_modified": now_ms},
        )

    def with_status(self, is_complete: bool, now_ms: int) -> Track:
        """Return a copy marked complete or incomplete."""
        return self.model_copy(
            update={"is_complete": is_complete, "last_modified": now_ms},
        )


class CurrentTrackInfo(BaseModel):
    """Marker for the track a background recording session appends to."""

    model_config = ConfigDict(frozen=True)

    track_id: str
    track_name: str
    is_tracking: bool = True
    start_time: int
