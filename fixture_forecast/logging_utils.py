"""Throttled and one-shot log helpers for the resolver and the API client."""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, Hashable, Optional, Set


class KeyedThrottle:
    """Log at a fixed level, at most once per key within ``window_seconds``.

    Used for messages that repeat on every render, e.g. resolver misses.
    """

    def __init__(
        self,
        logger: logging.Logger,
        window_seconds: float = 60.0,
        level: int = logging.DEBUG,
    ) -> None:
        self._logger = logger
        self._level = level
        self._window = float(max(window_seconds, 0))
        self._emitted_at: Dict[Hashable, float] = {}
        self._lock = threading.Lock()

    def __call__(self, key: Hashable, msg: str, *args: Any) -> bool:
        now = time.monotonic()
        with self._lock:
            last = self._emitted_at.get(key)
            if last is not None and (now - last) < self._window:
                return False
            self._emitted_at[key] = now
        self._logger.log(self._level, msg, *args)
        return True

    def reset(self, window_seconds: Optional[float] = None) -> None:
        with self._lock:
            self._emitted_at.clear()
            if window_seconds is not None:
                self._window = float(max(window_seconds, 0))


_warned: Set[Hashable] = set()
_warned_lock = threading.Lock()


def warn_once(key: Hashable, msg: str, *args: Any, logger: Optional[logging.Logger] = None) -> bool:
    """Emit a warning the first time `key` is seen in this process."""

    with _warned_lock:
        if key in _warned:
            return False
        _warned.add(key)
    (logger or logging.getLogger(__name__)).warning(msg, *args)
    return True


def reset_warn_once_cache() -> None:
    """Forget every key passed to :func:`warn_once`."""

    with _warned_lock:
        _warned.clear()
