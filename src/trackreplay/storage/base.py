"""Abstract key-value store that track storage is built on."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """String blobs addressed by string keys. Single writer, last write wins."""

    @abstractmethod
    def get_item(self, key: str) -> str | None: ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove_item(self, key: str) -> None: ...
