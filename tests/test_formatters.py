"""Tests for readout formatting helpers."""

from __future__ import annotations

from trackreplay.formatters import format_distance, format_elapsed, format_speed_kmh


class TestFormatElapsed:
    def test_none(self) -> None:
        assert format_elapsed(None) == "\u2014"

    def test_minutes(self) -> None:
        assert format_elapsed(0) == "0:00"
        assert format_elapsed(75.9) == "1:15"

    def test_hours(self) -> None:
        assert format_elapsed(3723) == "1:02:03"

    def test_negative_clamped(self) -> None:
        assert format_elapsed(-5) == "0:00"


class TestFormatDistance:
    def test_none(self) -> None:
        assert format_distance(None) == "\u2014"

    def test_meters(self) -> None:
        assert format_distance(850.4) == "850 m"

    def test_kilometers(self) -> None:
        assert format_distance(1234.5) == "1.23 km"


class TestFormatSpeed:
    def test_none(self) -> None:
        assert format_speed_kmh(None) == "\u2014"

    def test_conversion(self) -> None:
        assert format_speed_kmh(10) == "36 km/h"
