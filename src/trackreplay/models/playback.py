"""Playback cursor and position snapshot models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from trackreplay.models.location import LocationSample


class PlaybackCursorState(BaseModel):
    """Where the cursor is, whether it is advancing, and how fast."""

    model_config = ConfigDict(frozen=True)

    current_index: int = Field(default=0, ge=0)
    is_playing: bool = False
    speed_multiplier: float = 1.0


class PositionSnapshot(BaseModel):
    """Point-in-time readout derived from the cursor. Never stored."""

    model_config = ConfigDict(frozen=True)

    index: int = 0
    sample: LocationSample | None = None
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    time_elapsed_seconds: float = 0.0
    distance_traveled_meters: float = 0.0


class PlaybackUpdate(BaseModel):
    """What the presentation layer receives after every state change."""

    model_config = ConfigDict(frozen=True)

    snapshot: PositionSnapshot
    cursor: PlaybackCursorState
