"""Playback configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from trackreplay._speeds import SpeedTable
from trackreplay.constants import BASE_TICK_MS, DEFAULT_SPEED, SKIP_FRACTION, STANDARD_SPEEDS


class PlaybackConfig(BaseModel):
    """Tunables for a playback session.

    Usage:
        PlaybackConfig()                                   # 100 ms ticks, standard speeds
        PlaybackConfig(speeds=EXTENDED_SPEEDS, initial_speed=10)
    """

    model_config = ConfigDict(frozen=True)

    base_tick_ms: int = Field(default=BASE_TICK_MS, gt=0)
    speeds: tuple[float, ...] = STANDARD_SPEEDS
    initial_speed: float = DEFAULT_SPEED
    skip_fraction: float = Field(default=SKIP_FRACTION, gt=0, le=1)

    @field_validator("speeds")
    @classmethod
    def _check_speeds(cls, value: tuple[float, ...]) -> tuple[float, ...]:
        # SpeedTable raises ValueError, which pydantic reports as a validation error
        return SpeedTable(value).speeds

    @model_validator(mode="after")
    def _check_initial_speed(self) -> PlaybackConfig:
        if self.initial_speed not in self.speeds:
            raise ValueError(
                f"initial_speed {self.initial_speed} is not one of {self.speeds}"
            )
        return self

    @property
    def speed_table(self) -> SpeedTable:
        return SpeedTable(self.speeds)

    @property
    def base_tick_seconds(self) -> float:
        return self.base_tick_ms / 1000
