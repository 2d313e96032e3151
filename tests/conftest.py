"""Shared test fixtures and sample tracks."""

from __future__ import annotations

import logging

import pytest

from trackreplay import LocationSample, ManualScheduler, PlaybackEngine, Track

T0 = 1_700_000_000_000

SAMPLE_FIX = {
    "latitude": 52.520008,
    "longitude": 13.404954,
    "timestamp_ms": T0,
    "accuracy": 4.7,
    "speed": 3.2,
    "heading": 90.0,
    "altitude": 34.0,
}

SAMPLE_TRACK = {
    "id": "track_1",
    "name": "Morning run",
    "samples": [
        {"latitude": 0.0, "longitude": 0.0, "timestamp_ms": T0},
        {"latitude": 0.0, "longitude": 0.001, "timestamp_ms": T0 + 1000},
        {"latitude": 0.0, "longitude": 0.002, "timestamp_ms": T0 + 2000},
    ],
    "created_at": T0,
    "last_modified": T0 + 2000,
    "is_complete": True,
}

# One degree of arc on a sphere of radius 6371 km
ONE_DEGREE_M = 111194.92664455873


def make_samples(count: int, step_ms: int = 1000, start: int = T0) -> tuple[LocationSample, ...]:
    """Samples heading east along the equator, 0.001 degrees apart."""
    return tuple(
        LocationSample(latitude=0.0, longitude=i * 0.001, timestamp_ms=start + i * step_ms)
        for i in range(count)
    )


def make_track(count: int = 3, step_ms: int = 1000, track_id: str = "track_1") -> Track:
    return Track(
        id=track_id,
        name=f"Track {track_id}",
        samples=make_samples(count, step_ms),
        created_at=T0,
        last_modified=T0,
    )


def _drop_file_handlers(logger: logging.Logger) -> None:
    for h in logger.handlers[:]:
        if isinstance(h, logging.FileHandler):
            h.close()
            logger.removeHandler(h)


@pytest.fixture(autouse=True)
def _redirect_logs(tmp_path):
    """Send the package log file to tmp_path and reset the cached logger."""
    import trackreplay._logging as mod

    old_logger = mod._logger
    old_dir = mod._LOG_DIR
    old_file = mod._LOG_FILE

    named_logger = logging.getLogger(mod.LOGGER_NAME)
    _drop_file_handlers(named_logger)

    mod._logger = None
    mod._LOG_DIR = str(tmp_path / "logs")
    mod._LOG_FILE = str(tmp_path / "logs" / "trackreplay.log")

    yield tmp_path / "logs"

    _drop_file_handlers(named_logger)
    mod._logger = old_logger
    mod._LOG_DIR = old_dir
    mod._LOG_FILE = old_file


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def engine_factory(scheduler):
    """Build engines on the shared manual scheduler and record their updates."""
    created: list[PlaybackEngine] = []

    def _factory(track: Track, config=None) -> tuple[PlaybackEngine, list]:
        engine = PlaybackEngine(track, scheduler=scheduler, config=config)
        updates: list = []
        engine.subscribe(updates.append)
        created.append(engine)
        return engine, updates

    yield _factory

    for engine in created:
        engine.dispose()
