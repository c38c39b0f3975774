"""In-memory TTL cache for upstream payloads.

Entries expire individually (``set`` takes a per-entry TTL) and the store is
bounded by an LRU capacity. Thread-safe, process-local, nothing persisted.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)


@dataclass
class CacheEntry:
    """Cached payload with its absolute expiry time."""

    key: str
    value: Any
    expires_at: float


class SimpleTTLCache:
    """Thread-safe, in-memory TTL cache with LRU eviction.

    Attributes:
        default_ttl_seconds: TTL applied when ``set`` is called without one.
        max_entries: Maximum number of cached items (None for unlimited).
    """

    def __init__(
        self,
        default_ttl_seconds: float = 43200,
        max_entries: int | None = 2048,
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if default_ttl_seconds <= 0:
            raise ValueError("default_ttl_seconds must be > 0")
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be >= 1 or None")

        self.default_ttl_seconds = default_ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.RLock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"SimpleTTLCache(default_ttl_seconds={self.default_ttl_seconds}, "
            f"max_entries={self.max_entries}, size={len(self._store)})"
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def _now(self) -> float:
        return self._clock() if self._clock is not None else time.time()

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if absent or expired.

        An entry read at or after its expiry is treated as absent and dropped.
        """

        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key[:24], "reason": "not_found"})
                return None

            if self._now() >= entry.expires_at:
                self._evict_single(key)
                self._misses += 1
                logger.debug("cache.miss", extra={"cache_key": key[:24], "reason": "expired"})
                return None

            self._hits += 1
            self._store.move_to_end(key)
            logger.debug("cache.hit", extra={"cache_key": key[:24]})
            return entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store ``value`` under ``key``, replacing any existing entry.

        Args:
            key: Cache key.
            value: Payload to store.
            ttl: Seconds until expiry; defaults to ``default_ttl_seconds``.
        """

        ttl_seconds = self.default_ttl_seconds if ttl is None else ttl
        if ttl_seconds <= 0:
            raise ValueError("ttl must be > 0")

        with self._lock:
            now = self._now()
            self._evict_expired_locked(now)
            self._store[key] = CacheEntry(key=key, value=value, expires_at=now + ttl_seconds)
            self._store.move_to_end(key)
            self._evict_if_over_capacity_locked()

            logger.debug(
                "cache.set",
                extra={"cache_key": key[:24], "size": len(self._store), "ttl_s": ttl_seconds},
            )

    def clear(self) -> None:
        """Remove all cached entries and reset counters."""

        with self._lock:
            self._store.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> dict[str, int | float | None]:
        """Return lightweight cache metrics without exposing values."""

        with self._lock:
            return {
                "default_ttl_seconds": self.default_ttl_seconds,
                "max_entries": self.max_entries,
                "entries": len(self._store),
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }

    def _evict_single(self, key: str) -> None:
        if self._store.pop(key, None) is not None:
            self._evictions += 1

    def _evict_expired_locked(self, now: float) -> None:
        expired = [k for k, entry in self._store.items() if entry.expires_at <= now]
        for key in expired:
            self._evict_single(key)

    def _evict_if_over_capacity_locked(self) -> None:
        if self.max_entries is None:
            return
        while len(self._store) > self.max_entries:
            # least recently used sits at the front
            self._store.popitem(last=False)
            self._evictions += 1


def build_cache_key(route: str, **params: Any) -> str:
    """Build a deterministic cache key from a route name and its parameters.

    Every parameter that affects the upstream result must be passed, even when
    absent: ``None`` is encoded distinctly from an empty string so an omitted
    optional parameter never collides with an explicit empty value. Parameter
    order does not matter.

    Args:
        route: Logical route name (e.g. "news", "search").
        **params: Discriminating parameters; values must be JSON-serializable.

    Returns:
        ``"{route}:{sha256 hex}"``.
    """

    if not route:
        raise ValueError("route must be a non-empty string")

    canonical = json.dumps(
        [route, sorted(params.items())],
        ensure_ascii=False,
        separators=(",", ":"),
        default=str,
    )
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{route}:{digest}"
