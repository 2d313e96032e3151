"""Great-circle distance and elapsed-time math for location sequences.

Functions here accept any objects exposing ``latitude``/``longitude`` (and
``timestamp_ms`` for time math), so they work on ``LocationSample`` as well as
lightweight test doubles.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from trackreplay.constants import EARTH_RADIUS_M


class LatLon(Protocol):
    @property
    def latitude(self) -> float: ...

    @property
    def longitude(self) -> float: ...


class Timestamped(Protocol):
    @property
    def timestamp_ms(self) -> int: ...


@dataclass(frozen=True)
class TrackStats:
    """Distance (meters) and duration (seconds) of a location sequence."""

    distance: float
    duration: float


def haversine_meters(a: LatLon, b: LatLon) -> float:
    """Great-circle distance between two points in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    d_phi = math.radians(b.latitude - a.latitude)
    d_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_M * c


def cumulative_distances(points: Sequence[LatLon]) -> list[float]:
    """Prefix sums of segment distances: one entry per point, the first is 0."""
    if not points:
        return []
    totals = [0.0]
    for prev, curr in zip(points, points[1:]):
        totals.append(totals[-1] + haversine_meters(prev, curr))
    return totals


def cumulative_distance(points: Sequence[LatLon]) -> float:
    """Total path length in meters; 0 for fewer than two points."""
    if len(points) < 2:
        return 0.0
    return cumulative_distances(points)[-1]


def elapsed_seconds(points: Sequence[Timestamped]) -> float:
    """Seconds between the first and last sample; 0 for fewer than two points."""
    if len(points) < 2:
        return 0.0
    return (points[-1].timestamp_ms - points[0].timestamp_ms) / 1000


def relative_offsets_ms(points: Sequence[Timestamped]) -> list[int]:
    """Offset of each sample from the first, as a running maximum.

    Out-of-order timestamps never pull the offset backwards, so the result is
    always non-decreasing.
    """
    if not points:
        return []
    first = points[0].timestamp_ms
    offsets: list[int] = []
    high = 0
    for p in points:
        high = max(high, p.timestamp_ms - first)
        offsets.append(high)
    return offsets


def compute_track_stats(points: Sequence[LatLon]) -> TrackStats:
    """Distance and duration of a full location sequence."""
    if len(points) < 2:
        return TrackStats(distance=0.0, duration=0.0)
    return TrackStats(
        distance=cumulative_distance(points),
        duration=elapsed_seconds(points),  # type: ignore[arg-type]
    )
