"""Tests for key-value backends and track storage."""

from __future__ import annotations

import json

import pytest

from trackreplay import (
    CurrentTrackInfo,
    FileKeyValueStore,
    KeyValueStore,
    LocationSample,
    MemoryKeyValueStore,
    StorageError,
    TrackStorage,
)
from trackreplay.constants import CURRENT_TRACK_KEY, TRACKS_KEY
from tests.conftest import T0, make_track


@pytest.fixture(params=["memory", "file"])
def store(request, tmp_path) -> KeyValueStore:
    if request.param == "memory":
        return MemoryKeyValueStore()
    return FileKeyValueStore(tmp_path / "store")


@pytest.fixture
def storage(store) -> TrackStorage:
    return TrackStorage(store)


class TestKeyValueStore:
    def test_cannot_instantiate_abc(self) -> None:
        with pytest.raises(TypeError):
            KeyValueStore()  # type: ignore[abstract]

    def test_missing_key(self, store) -> None:
        assert store.get_item("nope") is None

    def test_set_get(self, store) -> None:
        store.set_item("k", "value")
        assert store.get_item("k") == "value"

    def test_overwrite(self, store) -> None:
        store.set_item("k", "one")
        store.set_item("k", "two")
        assert store.get_item("k") == "two"

    def test_remove(self, store) -> None:
        store.set_item("k", "v")
        store.remove_item("k")
        assert store.get_item("k") is None

    def test_remove_missing_is_noop(self, store) -> None:
        store.remove_item("never-set")

    def test_file_store_survives_reopen(self, tmp_path) -> None:
        FileKeyValueStore(tmp_path / "s").set_item(TRACKS_KEY, "[]")
        assert FileKeyValueStore(tmp_path / "s").get_item(TRACKS_KEY) == "[]"

    def test_file_store_sanitizes_keys(self, tmp_path) -> None:
        store = FileKeyValueStore(tmp_path / "s")
        store.set_item("../escape", "x")
        assert store.get_item("../escape") == "x"
        assert all(p.parent == tmp_path / "s" for p in (tmp_path / "s").iterdir())

    def test_file_store_rejects_empty_key(self, tmp_path) -> None:
        with pytest.raises(StorageError):
            FileKeyValueStore(tmp_path / "s").get_item("")

    def test_file_store_directory_is_a_file(self, tmp_path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(StorageError):
            FileKeyValueStore(blocker)


class TestTrackStorage:
    def test_empty(self, storage) -> None:
        assert storage.get_all_tracks() == []
        assert storage.get_track("missing") is None

    def test_save_and_get(self, storage) -> None:
        track = make_track(3)
        storage.save_track(track)
        assert storage.get_track(track.id) == track
        assert storage.get_all_tracks() == [track]

    def test_save_replaces_same_id(self, storage) -> None:
        storage.save_track(make_track(2, track_id="a"))
        storage.save_track(make_track(2, track_id="b"))
        storage.save_track(make_track(5, track_id="a"))
        tracks = storage.get_all_tracks()
        assert [t.id for t in tracks] == ["a", "b"]
        assert len(tracks[0]) == 5

    def test_delete(self, storage) -> None:
        storage.save_track(make_track(2, track_id="a"))
        storage.save_track(make_track(2, track_id="b"))
        storage.delete_track("a")
        assert [t.id for t in storage.get_all_tracks()] == ["b"]

    def test_delete_missing_is_noop(self, storage) -> None:
        storage.save_track(make_track(2, track_id="a"))
        storage.delete_track("zzz")
        assert len(storage.get_all_tracks()) == 1

    def test_stored_blob_shape(self) -> None:
        store = MemoryKeyValueStore()
        TrackStorage(store).save_track(make_track(3))
        blob = json.loads(store.get_item(TRACKS_KEY))
        assert blob[0]["id"] == "track_1"
        assert blob[0]["duration"] == 2.0
        assert len(blob[0]["samples"]) == 3

    def test_corrupt_blob_raises(self) -> None:
        store = MemoryKeyValueStore({TRACKS_KEY: "{not json"})
        with pytest.raises(StorageError):
            TrackStorage(store).get_all_tracks()

    def test_logs_calls(self, storage, _redirect_logs) -> None:
        storage.save_track(make_track(2))
        storage.get_all_tracks()
        content = (_redirect_logs / "trackreplay.log").read_text()
        assert "CALL: TrackStorage.save_track(" in content
        assert "OK: TrackStorage.get_all_tracks() -> 1 items" in content

    def test_logs_failures(self, _redirect_logs) -> None:
        storage = TrackStorage(MemoryKeyValueStore({TRACKS_KEY: "[{]"}))
        with pytest.raises(StorageError):
            storage.get_all_tracks()
        content = (_redirect_logs / "trackreplay.log").read_text()
        assert "FAIL: TrackStorage.get_all_tracks() -> StorageError" in content


class TestCurrentTrack:
    def test_set_get_clear(self, storage) -> None:
        info = CurrentTrackInfo(track_id="a", track_name="Run", start_time=T0)
        storage.set_current_track_info(info)
        assert storage.get_current_track_info() == info
        storage.clear_current_track_info()
        assert storage.get_current_track_info() is None

    def test_corrupt_info_raises(self) -> None:
        store = MemoryKeyValueStore({CURRENT_TRACK_KEY: '{"track_id": 1}'})
        with pytest.raises(StorageError):
            TrackStorage(store).get_current_track_info()

    def test_add_location_without_session(self, storage) -> None:
        sample = LocationSample(latitude=0, longitude=0, timestamp_ms=T0)
        assert storage.add_location_to_current_track(sample) is None

    def test_add_location_missing_track(self, storage) -> None:
        storage.set_current_track_info(CurrentTrackInfo(track_id="gone", track_name="x", start_time=T0))
        sample = LocationSample(latitude=0, longitude=0, timestamp_ms=T0)
        assert storage.add_location_to_current_track(sample) is None
        assert storage.get_all_tracks() == []

    def test_add_location_appends_and_recomputes(self, storage) -> None:
        track = make_track(2)
        storage.save_track(track)
        storage.set_current_track_info(
            CurrentTrackInfo(track_id=track.id, track_name=track.name, start_time=T0),
        )
        sample = LocationSample(latitude=0.0, longitude=0.002, timestamp_ms=T0 + 4000)
        updated = storage.add_location_to_current_track(sample, now_ms=T0 + 4500)

        assert updated is not None
        assert len(updated) == 3
        assert updated.duration == 4.0
        assert updated.total_distance > track.total_distance
        assert updated.last_modified == T0 + 4500
        assert storage.get_track(track.id) == updated
