"""In-memory sliding-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Stale buckets are swept during ``consume``, at most once per window length.
"""

from __future__ import annotations

import math
import threading
import time
from typing import Callable

from clue_server.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class InMemorySlidingWindowRateLimiter(AbstractRateLimiter):
    """Admit at most ``limit`` requests per key in any trailing ``window_ms``.

    Each key maps to the list of timestamps (ms) of its admitted requests that
    are still inside the window. A rejected request is not recorded, so a
    client hammering the server is admitted again as soon as its oldest
    admitted request ages out.

    Buckets of clients that went quiet would otherwise stay around forever.
    Every ``consume`` checks whether a full window has passed since the last
    sweep and, if so, drops every bucket whose newest timestamp is already
    outside the window.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_ms: int,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum number of admitted requests per window.
            window_ms: Window length in milliseconds.
            clock: Time source returning UNIX time in milliseconds.

        Raises:
            ValueError: If limit or window_ms are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_ms < 1:
            raise ValueError("window_ms must be >= 1")

        self._limit = limit
        self._window_ms = window_ms
        self._clock = clock
        self._lock = threading.RLock()
        self._buckets: dict[str, list[int]] = {}
        self._last_sweep_ms: int | None = None

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_ms(self) -> int:
        return self._window_ms

    def __len__(self) -> int:
        with self._lock:
            return len(self._buckets)

    def _live(self, timestamps: list[int], now: int) -> list[int]:
        cutoff = now - self._window_ms
        return [t for t in timestamps if t > cutoff]

    def _reset_at_seconds(self, oldest_ms: int) -> int:
        return int(math.ceil((oldest_ms + self._window_ms) / 1000))

    def sweep(self, now: int | None = None) -> int:
        """Drop buckets with no timestamp inside the window.

        Returns:
            Number of buckets removed.
        """
        now = self._clock() if now is None else now
        cutoff = now - self._window_ms
        with self._lock:
            stale = [key for key, ts in self._buckets.items() if not ts or ts[-1] <= cutoff]
            for key in stale:
                del self._buckets[key]
            self._last_sweep_ms = now
            return len(stale)

    def _maybe_sweep_locked(self, now: int) -> None:
        if self._last_sweep_ms is None:
            self._last_sweep_ms = now
        elif now - self._last_sweep_ms >= self._window_ms:
            self.sweep(now)

    def consume(self, key: str) -> RateLimitResult:
        """Check the window for ``key`` and record the request if admitted.

        Never raises: an unseen key is an empty window.
        """
        now = self._clock()

        with self._lock:
            self._maybe_sweep_locked(now)

            window = self._live(self._buckets.get(key, []), now)

            if len(window) >= self._limit:
                # Blocked requests leave the bucket untouched.
                reset_at_ms = window[0] + self._window_ms
                return RateLimitResult(
                    allowed=False,
                    limit=self._limit,
                    remaining=0,
                    reset_at=self._reset_at_seconds(window[0]),
                    retry_after_seconds=max(1, int(math.ceil((reset_at_ms - now) / 1000))),
                )

            window.append(now)
            self._buckets[key] = window
            return RateLimitResult(
                allowed=True,
                limit=self._limit,
                remaining=self._limit - len(window),
                reset_at=self._reset_at_seconds(window[0]),
                retry_after_seconds=None,
            )

    def reset(self) -> None:
        with self._lock:
            self._buckets.clear()
            self._last_sweep_ms = None
