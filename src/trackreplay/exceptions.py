"""Custom exceptions for trackreplay."""

from __future__ import annotations


class TrackReplayError(Exception):
    """Base exception for all trackreplay errors."""


class InvalidSpeedError(TrackReplayError, ValueError):
    """Raised when a playback speed is not in the allowed speed table."""

    def __init__(self, speed: float, allowed: tuple[float, ...]) -> None:
        self.speed = speed
        self.allowed = allowed
        super().__init__(
            f"Speed {speed!r} is not allowed (choose one of {', '.join(map(str, allowed))})"
        )


class DisposedError(TrackReplayError):
    """Raised when a command is sent to a playback engine after dispose()."""


class StorageError(TrackReplayError):
    """Raised when the track store cannot be read or written."""


class TrackParseError(TrackReplayError):
    """Raised when KML/GPX content cannot be turned into location samples."""
