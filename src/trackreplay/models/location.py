"""GPS fix model."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class LocationSample(BaseModel):
    """One timestamped GPS fix. Immutable once recorded."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    timestamp_ms: int
    accuracy: float | None = None
    speed: float | None = None
    heading: float | None = None
    altitude: float | None = None

    @property
    def recorded_at(self) -> datetime:
        """Timestamp as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp_ms / 1000, tz=UTC)

    @property
    def speed_kmh(self) -> float | None:
        """Ground speed in km/h, or None if the fix carried no speed."""
        if self.speed is None:
            return None
        return self.speed * 3.6
