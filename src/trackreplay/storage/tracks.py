"""Track persistence on top of a key-value store."""

from __future__ import annotations

import time

from pydantic import TypeAdapter, ValidationError

from trackreplay._logging import log_storage_call
from trackreplay.constants import CURRENT_TRACK_KEY, TRACKS_KEY
from trackreplay.exceptions import StorageError
from trackreplay.models.location import LocationSample
from trackreplay.models.track import CurrentTrackInfo, Track
from trackreplay.storage.base import KeyValueStore

_TRACK_LIST = TypeAdapter(list[Track])


def _now_ms() -> int:
    return int(time.time() * 1000)


class TrackStorage:
    """Reads and writes tracks as one JSON array under a single key.

    Every write rewrites the whole array (last write wins). Undecodable blobs and
    backend failures surface as StorageError.

    Usage:
        storage = TrackStorage(FileKeyValueStore("~/tracks"))
        storage.save_track(track)
        storage.get_track(track.id)
    """

    def __init__(
        self,
        store: KeyValueStore,
        tracks_key: str = TRACKS_KEY,
        current_track_key: str = CURRENT_TRACK_KEY,
    ) -> None:
        self._store = store
        self._tracks_key = tracks_key
        self._current_track_key = current_track_key

    def _write_tracks(self, tracks: list[Track]) -> None:
        self._store.set_item(self._tracks_key, _TRACK_LIST.dump_json(tracks).decode("utf-8"))

    @log_storage_call
    def get_all_tracks(self) -> list[Track]:
        raw = self._store.get_item(self._tracks_key)
        if not raw:
            return []
        try:
            return _TRACK_LIST.validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"Stored tracks are unreadable: {exc}") from exc

    @log_storage_call
    def get_track(self, track_id: str) -> Track | None:
        return next((t for t in self.get_all_tracks() if t.id == track_id), None)

    @log_storage_call
    def save_track(self, track: Track) -> None:
        """Insert *track*, or replace the stored track with the same id."""
        tracks = self.get_all_tracks()
        for i, existing in enumerate(tracks):
            if existing.id == track.id:
                tracks[i] = track
                break
        else:
            tracks.append(track)
        self._write_tracks(tracks)

    @log_storage_call
    def delete_track(self, track_id: str) -> None:
        tracks = self.get_all_tracks()
        self._write_tracks([t for t in tracks if t.id != track_id])

    # ── Current recording session ──────────────────────────────

    @log_storage_call
    def set_current_track_info(self, info: CurrentTrackInfo) -> None:
        self._store.set_item(self._current_track_key, info.model_dump_json())

    @log_storage_call
    def get_current_track_info(self) -> CurrentTrackInfo | None:
        raw = self._store.get_item(self._current_track_key)
        if not raw:
            return None
        try:
            return CurrentTrackInfo.model_validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"Stored current-track info is unreadable: {exc}") from exc

    @log_storage_call
    def clear_current_track_info(self) -> None:
        self._store.remove_item(self._current_track_key)

    @log_storage_call
    def add_location_to_current_track(
        self, sample: LocationSample, now_ms: int | None = None,
    ) -> Track | None:
        """Append *sample* to the track being recorded.

        Returns the updated track, or None when no recording session is active or
        its track no longer exists.
        """
        info = self.get_current_track_info()
        if info is None:
            return None
        track = self.get_track(info.track_id)
        if track is None:
            return None
        updated = track.with_sample(sample, now_ms if now_ms is not None else _now_ms())
        self.save_track(updated)
        return updated
