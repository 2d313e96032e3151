"""trackreplay data models."""

from trackreplay.models.location import LocationSample
from trackreplay.models.playback import PlaybackCursorState, PlaybackUpdate, PositionSnapshot
from trackreplay.models.track import CurrentTrackInfo, Track

__all__ = [
    "CurrentTrackInfo",
    "LocationSample",
    "PlaybackCursorState",
    "PlaybackUpdate",
    "PositionSnapshot",
    "Track",
]
