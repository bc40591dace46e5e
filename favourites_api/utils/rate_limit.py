"""Minimum-interval request throttling keyed by user or client address."""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable

__all__ = ["RateLimiter", "rate_limit_key"]


def rate_limit_key(path: str, client_host: str | None) -> str:
    """Key requests by the user in ``/users/{id}/...`` paths, else by client host."""

    parts = path.strip("/").split("/")
    if len(parts) >= 2 and parts[0] == "users" and parts[1]:
        return f"user:{parts[1]}"
    return f"client:{client_host or 'unknown'}"


class RateLimiter:
    """Allow at most one request per ``min_interval`` seconds for each key.

    This is a flood guard rather than a quota system. A rejected request does
    not push back the window of the key it was rejected for. Keys whose window
    has lapsed are swept at most once per interval, so the table only holds
    keys seen within roughly the last two intervals.
    """

    def __init__(
        self,
        min_interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._min_interval = min_interval
        self._clock = clock
        self._last_seen: dict[str, float] = {}
        self._last_sweep: float | None = None
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._min_interval > 0

    def allow(self, key: str) -> bool:
        if not self.enabled:
            return True
        now = self._clock()
        with self._lock:
            self._sweep(now)
            previous = self._last_seen.get(key)
            if previous is not None and now - previous < self._min_interval:
                return False
            self._last_seen[key] = now
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._last_seen)

    def _sweep(self, now: float) -> None:
        if self._last_sweep is not None and now - self._last_sweep < self._min_interval:
            return
        self._last_seen = {
            key: seen
            for key, seen in self._last_seen.items()
            if now - seen < self._min_interval
        }
        self._last_sweep = now

    def retry_after_seconds(self) -> int:
        """Whole seconds a rejected caller should wait (at least one)."""

        return max(1, math.ceil(self._min_interval))
