"""Fixed-window request counters keyed by client.

Counters live in process memory: they reset on restart and are not shared
between server instances. Swap ``RateLimiter`` for a shared-store
implementation with the same ``hit`` signature to scale past one process.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class RateLimitWindow:
    count: int
    reset_at: float


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    limit: int
    remaining: int
    retry_after: int


class RateLimiter:
    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, RateLimitWindow] = {}
        self._lock = threading.Lock()
        self._next_sweep = 0.0

    def hit(self, key: str) -> RateLimitResult:
        """Count one request for ``key`` and report whether it is within quota."""
        now = self._clock()
        with self._lock:
            if now >= self._next_sweep:
                self._drop_expired(now)
                self._next_sweep = now + self.window_seconds
            window = self._windows.get(key)
            if window is None or now >= window.reset_at:
                window = RateLimitWindow(count=0, reset_at=now + self.window_seconds)
                self._windows[key] = window
            window.count += 1
            count, reset_at = window.count, window.reset_at

        return RateLimitResult(
            allowed=count <= self.max_requests,
            limit=self.max_requests,
            remaining=max(0, self.max_requests - count),
            retry_after=max(0, math.ceil(reset_at - now)),
        )

    def reset(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._windows.clear()
            else:
                self._windows.pop(key, None)

    def __len__(self) -> int:
        return len(self._windows)

    def _drop_expired(self, now: float) -> int:
        expired = [k for k, w in self._windows.items() if now >= w.reset_at]
        for k in expired:
            del self._windows[k]
        return len(expired)

    def prune(self) -> int:
        """Drop expired windows; returns how many were removed."""
        now = self._clock()
        with self._lock:
            return self._drop_expired(now)
