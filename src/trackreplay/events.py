"""Subscription fan-out with per-subscriber failure isolation."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

from trackreplay._logging import get_logger

T = TypeVar("T")


class Subscription:
    """Handle returned by EventChannel.subscribe(); call unsubscribe() to detach."""

    def __init__(self, detach: Callable[[], None]) -> None:
        self._detach: Callable[[], None] | None = detach

    @property
    def active(self) -> bool:
        return self._detach is not None

    def unsubscribe(self) -> None:
        """Detach the callback. Safe to call more than once."""
        if self._detach is not None:
            self._detach()
            self._detach = None


class EventChannel(Generic[T]):
    """Ordered list of callbacks that all receive every emitted value.

    A callback that raises is logged and skipped; the remaining callbacks still
    receive the value.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._callbacks: list[Callable[[T], None]] = []

    def __len__(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        self._callbacks.append(callback)
        return Subscription(lambda: self._remove(callback))

    def _remove(self, callback: Callable[[T], None]) -> None:
        try:
            self._callbacks.remove(callback)
        except ValueError:
            pass

    def clear(self) -> None:
        self._callbacks.clear()

    def emit(self, value: T) -> int:
        """Deliver *value* to every subscriber; return how many failed."""
        failures = 0
        # Copy so callbacks may unsubscribe while being notified
        for callback in list(self._callbacks):
            try:
                callback(value)
            except Exception:
                failures += 1
                get_logger().exception(
                    "Subscriber %r on channel %r failed", callback, self.name,
                )
        return failures
