"""In-memory TTL cache used to avoid repeated clue generations.

Thread-safe and dependency-free, with the same get/set surface a Redis-backed
cache would offer. Expiry is stamped at write time and checked at read time;
writes also sweep whatever has expired, so no timers are involved.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from clue_server.utils.text_normalizer import normalize_name

logger = logging.getLogger(__name__)

V = TypeVar("V")

DEFAULT_TTL_MS = 3_600_000


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def build_cache_key(
    animal_name: str,
    scientific_name: str | None,
    language: str,
    *,
    namespace: str = "clues",
    version: str | None = None,
) -> str:
    """Build a deterministic cache key for one generation request.

    Args:
        animal_name: Subject name as sent by the client.
        scientific_name: Optional secondary identifier.
        language: Requested output language.
        namespace: Endpoint the key belongs to.
        version: Optional prompt version, so prompt changes invalidate entries.

    Returns:
        Key of the form ``namespace[:version]::["name", "scientific", "language"]``.
        The parts are JSON-encoded so separators inside names cannot collide.
    """

    prefix = f"{namespace}:{version}" if version else namespace
    parts = [
        normalize_name(animal_name),
        normalize_name(scientific_name),
        language.casefold(),
    ]
    return f"{prefix}::{json.dumps(parts, ensure_ascii=False)}"


@dataclass
class CacheItem(Generic[V]):
    """Container for cached values with expiration metadata."""

    value: V
    expires_at_ms: int


class SimpleTTLCache(Generic[V]):
    """Thread-safe, in-memory TTL cache with optional LRU bound.

    Attributes:
        ttl_ms: Default time-to-live applied by ``set``.
        max_entries: Maximum number of cached items (None for unlimited).
    """

    def __init__(
        self,
        ttl_ms: int = DEFAULT_TTL_MS,
        max_entries: int | None = 1024,
        *,
        clock: Callable[[], int] = _now_ms,
    ) -> None:
        if ttl_ms < 1:
            raise ValueError("ttl_ms must be >= 1")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1 or None")

        self._ttl_ms = ttl_ms
        self._max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheItem[V]] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"SimpleTTLCache(ttl_ms={self._ttl_ms}, max_entries={self._max_entries}, "
            f"size={len(self._store)}, hits={self._hits}, misses={self._misses}, "
            f"evictions={self._evictions})"
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            item = self._store.get(key)
            return item is not None and not self._is_expired(item, self._clock())

    def get(self, key: str) -> V | None:
        """Return the cached value, or None if absent or expired."""

        with self._lock:
            item = self._store.get(key)
            if item is None:
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key, "reason": "not_found"})
                return None

            if self._is_expired(item, self._clock()):
                self._evict_single(key)
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key, "reason": "expired"})
                return None

            self._hits += 1
            self._store.move_to_end(key)  # mark as recently used
            logger.debug("cache.hit", extra={"cache_key": key})
            return item.value

    def set(self, key: str, value: V, ttl_ms: int | None = None) -> None:
        """Store ``value`` under ``key``, replacing any previous entry.

        Args:
            key: Cache key.
            value: Value to store.
            ttl_ms: Override of the default TTL for this entry.
        """

        ttl = self._ttl_ms if ttl_ms is None else ttl_ms
        with self._lock:
            now = self._clock()
            self._evict_expired_locked(now)
            self._store[key] = CacheItem(value=value, expires_at_ms=now + ttl)
            self._store.move_to_end(key)
            self._evict_if_over_capacity_locked()

            logger.debug(
                "cache.set",
                extra={"cache_key": key, "size": len(self._store), "ttl_ms": ttl},
            )

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""

        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict[str, int | None]:
        """Return lightweight cache metrics without exposing values."""

        with self._lock:
            return {
                "ttl_ms": self._ttl_ms,
                "max_entries": self._max_entries,
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def _evict_single(self, key: str) -> None:
        if self._store.pop(key, None) is not None:
            self._evictions += 1

    def _evict_expired_locked(self, now: int) -> None:
        expired_keys = [k for k, item in self._store.items() if self._is_expired(item, now)]
        for key in expired_keys:
            self._evict_single(key)

    def _evict_if_over_capacity_locked(self) -> None:
        if self._max_entries is None:
            return

        while len(self._store) > self._max_entries:
            # popitem(last=False) removes the least recently used entry
            self._store.popitem(last=False)
            self._evictions += 1

    @staticmethod
    def _is_expired(item: CacheItem, now: int) -> bool:
        return now >= item.expires_at_ms
