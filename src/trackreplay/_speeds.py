"""Allowed playback speed table."""

from __future__ import annotations

from dataclasses import dataclass

from trackreplay.constants import STANDARD_SPEEDS
from trackreplay.exceptions import InvalidSpeedError


@dataclass(frozen=True)
class SpeedTable:
    """Fixed, ordered set of speed multipliers a playback session may use.

    Usage:
        table = SpeedTable((0.5, 1, 2))
        table.validate(2)      # returns 2.0
        table.validate(3)      # raises InvalidSpeedError
        table.next_after(2)    # wraps around to 0.5
    """

    speeds: tuple[float, ...] = STANDARD_SPEEDS

    def __post_init__(self) -> None:
        if not self.speeds:
            raise ValueError("Speed table must not be empty")
        if any(s <= 0 for s in self.speeds):
            raise ValueError("Speeds must be positive")
        if len(set(self.speeds)) != len(self.speeds):
            raise ValueError("Speeds must be unique")
        object.__setattr__(self, "speeds", tuple(float(s) for s in self.speeds))

    def __contains__(self, speed: object) -> bool:
        return speed in self.speeds

    def __len__(self) -> int:
        return len(self.speeds)

    def validate(self, speed: float) -> float:
        """Return *speed* as a float, or raise InvalidSpeedError if not allowed."""
        if isinstance(speed, bool) or speed not in self.speeds:
            raise InvalidSpeedError(speed, self.speeds)
        return float(speed)

    def index_of(self, speed: float) -> int:
        """Position of *speed* in the table, or -1 if absent."""
        try:
            return self.speeds.index(speed)
        except ValueError:
            return -1

    def next_after(self, speed: float) -> float:
        """Next speed in the table, wrapping from the last back to the first."""
        return self.speeds[(self.index_of(speed) + 1) % len(self.speeds)]
