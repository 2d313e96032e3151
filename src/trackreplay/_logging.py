"""Call logging for the storage layer and the playback engine."""

from __future__ import annotations

import functools
import logging
import os
import threading
import time
from typing import Any, Callable, TypeVar

F = TypeVar("F", bound=Callable[..., Any])

LOGGER_NAME = "trackreplay"

_LOG_DIR = os.environ.get(
    "TRACKREPLAY_LOG_DIR",
    os.path.join(os.path.expanduser("~"), ".trackreplay", "logs"),
)
_LOG_FILE = os.path.join(_LOG_DIR, "trackreplay.log")

_logger: logging.Logger | None = None
_logger_lock = threading.Lock()


def get_logger() -> logging.Logger:
    """Return the file logger, creating log dir and handler on first use."""
    global _logger
    if _logger is not None:
        return _logger

    with _logger_lock:
        if _logger is not None:
            return _logger

        os.makedirs(_LOG_DIR, exist_ok=True)

        _logger = logging.getLogger(LOGGER_NAME)
        _logger.setLevel(logging.DEBUG)
        _logger.propagate = False

        log_file = os.path.abspath(_LOG_FILE)
        if not any(
            isinstance(h, logging.FileHandler) and h.baseFilename == log_file
            for h in _logger.handlers
        ):
            handler = logging.FileHandler(_LOG_FILE, encoding="utf-8")
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(message)s"),
            )
            _logger.addHandler(handler)

    return _logger


def _describe_args(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    # args[0] is self
    arg_parts = [repr(a) for a in args[1:]]
    arg_parts += [f"{k}={v!r}" for k, v in kwargs.items()]
    return ", ".join(arg_parts)


def _count(result: Any) -> int:
    if result is None:
        return 0
    if isinstance(result, (list, tuple)):
        return len(result)
    return 1


def log_storage_call(fn: F) -> F:
    """Decorator that logs storage method calls to the log file."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = get_logger()
        arg_str = _describe_args(args, kwargs)
        logger.info("CALL: %s(%s)", fn.__qualname__, arg_str)

        start = time.monotonic()
        try:
            result = fn(*args, **kwargs)
            elapsed = time.monotonic() - start
            logger.info(
                "OK: %s(%s) -> %d items (%.3fs)",
                fn.__qualname__, arg_str, _count(result), elapsed,
            )
            return result
        except Exception as exc:
            elapsed = time.monotonic() - start
            logger.error(
                "FAIL: %s(%s) -> %s: %s (%.3fs)",
                fn.__qualname__, arg_str, type(exc).__name__, exc, elapsed,
            )
            raise

    return wrapper  # type: ignore[return-value]


def log_command(fn: F) -> F:
    """Decorator that logs playback commands at debug level.

    Failures (for example an invalid speed) are logged as warnings and re-raised.
    """

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        logger = get_logger()
        arg_str = _describe_args(args, kwargs)
        logger.debug("COMMAND: %s(%s)", fn.__qualname__, arg_str)
        try:
            return fn(*args, **kwargs)
        except Exception as exc:
            logger.warning(
                "COMMAND FAIL: %s(%s) -> %s: %s",
                fn.__qualname__, arg_str, type(exc).__name__, exc,
            )
            raise

    return wrapper  # type: ignore[return-value]
