"""Formatting helpers for playback readouts."""

from __future__ import annotations


def format_elapsed(seconds: float | None) -> str:
    """Format seconds as m:ss, or h:mm:ss from one hour up; '\u2014' if None."""
    if seconds is None:
        return "\u2014"
    total = max(0, int(seconds))
    hours, rem = divmod(total, 3600)
    mins, secs = divmod(rem, 60)
    if hours:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins}:{secs:02d}"


def format_distance(meters: float | None) -> str:
    """Format a distance as whole meters below 1 km, otherwise km with two decimals."""
    if meters is None:
        return "\u2014"
    if meters < 1000:
        return f"{round(meters)} m"
    return f"{meters / 1000:.2f} km"


def format_speed_kmh(speed_ms: float | None) -> str:
    """Format a speed given in m/s as whole km/h."""
    if speed_ms is None:
        return "\u2014"
    return f"{speed_ms * 3.6:.0f} km/h"
