"""trackreplay: GPS track storage, KML/GPX export and deterministic playback."""

from trackreplay._speeds import SpeedTable
from trackreplay.config import PlaybackConfig
from trackreplay.constants import EXTENDED_SPEEDS, STANDARD_SPEEDS
from trackreplay.engine import PlaybackEngine
from trackreplay.events import EventChannel, Subscription
from trackreplay.exceptions import (
    DisposedError,
    InvalidSpeedError,
    StorageError,
    TrackParseError,
    TrackReplayError,
)
from trackreplay.export import generate_gpx, generate_kml, import_track, parse_gpx, parse_kml
from trackreplay.geo import TrackStats, compute_track_stats, cumulative_distance, haversine_meters
from trackreplay.models import (
    CurrentTrackInfo,
    LocationSample,
    PlaybackCursorState,
    PlaybackUpdate,
    PositionSnapshot,
    Track,
)
from trackreplay.recording import LocationService, TrackRecorder
from trackreplay.scheduler import AsyncioScheduler, ManualScheduler
from trackreplay.storage import FileKeyValueStore, KeyValueStore, MemoryKeyValueStore, TrackStorage

__all__ = [
    "AsyncioScheduler",
    "CurrentTrackInfo",
    "DisposedError",
    "EXTENDED_SPEEDS",
    "EventChannel",
    "FileKeyValueStore",
    "InvalidSpeedError",
    "KeyValueStore",
    "LocationSample",
    "LocationService",
    "ManualScheduler",
    "MemoryKeyValueStore",
    "PlaybackConfig",
    "PlaybackCursorState",
    "PlaybackEngine",
    "PlaybackUpdate",
    "PositionSnapshot",
    "STANDARD_SPEEDS",
    "SpeedTable",
    "StorageError",
    "Subscription",
    "Track",
    "TrackParseError",
    "TrackRecorder",
    "TrackReplayError",
    "TrackStats",
    "TrackStorage",
    "compute_track_stats",
    "cumulative_distance",
    "generate_gpx",
    "generate_kml",
    "haversine_meters",
    "import_track",
    "parse_gpx",
    "parse_kml",
]

__version__ = "0.1.0"
