"""Shared constants for trackreplay."""

from __future__ import annotations

EARTH_RADIUS_M = 6371000.0

BASE_TICK_MS = 100

# Speed button on the compact playback controls
STANDARD_SPEEDS: tuple[float, ...] = (0.25, 0.5, 1, 1.5, 2, 4, 8)

# Full-screen playback view, for long recordings
EXTENDED_SPEEDS: tuple[float, ...] = (
    0.5, 1, 2, 4, 6, 8, 10, 12, 16, 24, 32, 48, 64, 80, 100,
)

DEFAULT_SPEED = 1.0

SKIP_FRACTION = 0.1

# Fixes reporting a worse horizontal accuracy than this are dropped
MAX_ACCURACY_M = 1000.0

TRACKS_KEY = "location-tracker-tracks"
CURRENT_TRACK_KEY = "location-tracker-current-track"

DEFAULT_TRACK_NAME = "GPS Track"
