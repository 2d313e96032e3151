"""Storage layer: key-value backends and track persistence."""

from __future__ import annotations

from .backends import FileKeyValueStore, MemoryKeyValueStore
from .base import KeyValueStore
from .tracks import TrackStorage

__all__ = [
    "FileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
    "TrackStorage",
]
