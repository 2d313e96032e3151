"""Tests for the location service and track recorder."""

from __future__ import annotations

import itertools

import pytest

from trackreplay import (
    LocationSample,
    LocationService,
    MemoryKeyValueStore,
    StorageError,
    TrackRecorder,
    TrackReplayError,
    TrackStorage,
)
from trackreplay.constants import MAX_ACCURACY_M
from tests.conftest import T0, make_samples, make_track


@pytest.fixture
def storage() -> TrackStorage:
    return TrackStorage(MemoryKeyValueStore())


@pytest.fixture
def service() -> LocationService:
    return LocationService()


@pytest.fixture
def recorder(storage, service) -> TrackRecorder:
    ticks = itertools.count(T0, 1000)
    return TrackRecorder(storage, service, clock=lambda: next(ticks))


class TestLocationService:
    def test_fan_out(self, service) -> None:
        a: list = []
        b: list = []
        service.subscribe_locations(a.append)
        service.subscribe_locations(b.append)
        fix = make_samples(1)[0]
        service.publish(fix)
        assert a == [fix]
        assert b == [fix]
        assert service.last_location == fix

    def test_failing_subscriber_isolated(self, service) -> None:
        seen: list = []

        def broken(sample: LocationSample) -> None:
            raise ValueError("bad renderer")

        service.subscribe_locations(broken)
        service.subscribe_locations(seen.append)
        service.publish(make_samples(1)[0])
        assert len(seen) == 1

    def test_errors(self, service, _redirect_logs) -> None:
        errors: list[str] = []
        service.subscribe_errors(errors.append)
        service.publish_error("GPS signal lost")
        assert errors == ["GPS signal lost"]
        content = (_redirect_logs / "trackreplay.log").read_text()
        assert "Location error: GPS signal lost" in content

    def test_poor_accuracy_dropped(self, service, _redirect_logs) -> None:
        seen: list = []
        service.subscribe_locations(seen.append)
        good = LocationSample(latitude=1.0, longitude=2.0, timestamp_ms=T0, accuracy=MAX_ACCURACY_M)
        bad = LocationSample(latitude=5.0, longitude=6.0, timestamp_ms=T0 + 1000, accuracy=1500.0)
        service.publish(good)
        service.publish(bad)
        assert seen == [good]
        assert service.last_location == good
        content = (_redirect_logs / "trackreplay.log").read_text()
        assert "WARNING | Very poor accuracy, skipping fix: 1500.0 m" in content

    def test_missing_accuracy_accepted(self, service) -> None:
        seen: list = []
        service.subscribe_locations(seen.append)
        service.publish(make_samples(1)[0])
        assert len(seen) == 1

    def test_unsubscribe(self, service) -> None:
        seen: list = []
        sub = service.subscribe_locations(seen.append)
        sub.unsubscribe()
        service.publish(make_samples(1)[0])
        assert seen == []

    def test_independent_instances(self) -> None:
        first, second = LocationService(), LocationService()
        seen: list = []
        first.subscribe_locations(seen.append)
        second.publish(make_samples(1)[0])
        assert seen == []


class TestTrackRecorder:
    def test_start_creates_incomplete_track(self, recorder, storage) -> None:
        track = recorder.start("Morning run")
        assert recorder.is_recording
        assert recorder.track_id == track.id
        stored = storage.get_track(track.id)
        assert stored is not None
        assert stored.name == "Morning run"
        assert not stored.is_complete
        assert len(stored) == 0
        info = storage.get_current_track_info()
        assert info.track_id == track.id
        assert info.start_time == T0

    def test_records_published_fixes(self, recorder, storage, service) -> None:
        track = recorder.start("Ride")
        for fix in make_samples(4):
            service.publish(fix)
        stored = storage.get_track(track.id)
        assert len(stored) == 4
        assert stored.duration == 3.0
        assert stored.total_distance > 0

    def test_poor_accuracy_fix_not_stored(self, recorder, storage, service) -> None:
        track = recorder.start("Walk")
        first, second = make_samples(2)
        service.publish(first)
        service.publish(second.model_copy(update={"accuracy": 2500.0, "latitude": 40.0}))
        stored = storage.get_track(track.id)
        assert len(stored) == 1
        assert stored.total_distance == 0.0

    def test_stop_marks_complete(self, recorder, storage, service) -> None:
        track = recorder.start("Ride")
        service.publish(make_samples(1)[0])
        finished = recorder.stop()
        assert finished.id == track.id
        assert finished.is_complete
        assert not recorder.is_recording
        assert storage.get_current_track_info() is None
        assert storage.get_track(track.id).is_complete

    def test_fixes_after_stop_ignored(self, recorder, storage, service) -> None:
        track = recorder.start("Ride")
        recorder.stop()
        service.publish(make_samples(1)[0])
        assert len(storage.get_track(track.id)) == 0

    def test_stop_when_idle(self, recorder) -> None:
        assert recorder.stop() is None

    def test_double_start_rejected(self, recorder) -> None:
        recorder.start("One")
        with pytest.raises(TrackReplayError):
            recorder.start("Two")

    def test_resume(self, recorder, storage, service) -> None:
        existing = make_track(2).with_status(is_complete=True, now_ms=T0)
        storage.save_track(existing)

        resumed = recorder.resume(existing.id)
        assert not resumed.is_complete
        assert not storage.get_track(existing.id).is_complete

        service.publish(LocationSample(latitude=0.0, longitude=0.002, timestamp_ms=T0 + 5000))
        finished = recorder.stop()
        assert len(finished) == 3
        assert finished.is_complete

    def test_resume_unknown_track(self, recorder) -> None:
        with pytest.raises(StorageError):
            recorder.resume("nope")
        assert not recorder.is_recording
