"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable, Iterable

from news_gateway.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitDecision,
    RateWindowSnapshot,
)


@dataclass
class RateWindow:
    identity: str
    count: int
    window_start: float
    window_end: float


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Fixed-window limiter keyed by upstream identity.

    Each identity owns an independent window ``[start, start + window)``. The
    window opens on the first call for the identity; once ``now`` reaches its
    end the next call starts a fresh window at ``now`` with count 0, whatever
    happened in the previous one. Bursts straddling a boundary are not
    smoothed.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        identities: Iterable[str] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the limiter.

        Args:
            limit: Maximum admitted calls per window, per identity.
            window_seconds: Window length in seconds.
            identities: Optional closed set of known identities; when given,
                unknown identities are rejected.
            clock: Time source returning UNIX time in seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._identities = frozenset(identities) if identities is not None else None
        self._clock = clock
        self._lock = threading.RLock()
        self._windows: dict[str, RateWindow] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    @property
    def identities(self) -> tuple[str, ...]:
        """Known identities: the configured set, else those seen so far."""
        with self._lock:
            if self._identities is not None:
                return tuple(sorted(self._identities))
            return tuple(sorted(self._windows))

    def _check_identity(self, identity: str) -> None:
        if not identity:
            raise ValueError("identity must be a non-empty string")
        if self._identities is not None and identity not in self._identities:
            raise ValueError(f"unknown upstream identity: {identity!r}")

    def _current_window_locked(self, identity: str, now: float) -> RateWindow:
        window = self._windows.get(identity)
        if window is None or now >= window.window_end:
            window = RateWindow(
                identity=identity,
                count=0,
                window_start=now,
                window_end=now + self._window_seconds,
            )
            self._windows[identity] = window
        return window

    def try_acquire(self, identity: str) -> RateLimitDecision:
        """Admit one upstream call for ``identity`` or report throttling.

        Raises:
            ValueError: If identity is empty or not configured.
        """
        self._check_identity(identity)
        now = self._clock()

        with self._lock:
            window = self._current_window_locked(identity, now)

            if window.count < self._limit:
                window.count += 1
                return RateLimitDecision(
                    identity=identity,
                    allowed=True,
                    limit=self._limit,
                    remaining=self._limit - window.count,
                    reset_at=window.window_end,
                    retry_after_seconds=0.0,
                )

            return RateLimitDecision(
                identity=identity,
                allowed=False,
                limit=self._limit,
                remaining=0,
                reset_at=window.window_end,
                retry_after_seconds=max(0.0, window.window_end - now),
            )

    def snapshot(self, identity: str) -> RateWindowSnapshot:
        """Report the window state; an absent or elapsed window reads as fresh."""
        self._check_identity(identity)
        now = self._clock()

        with self._lock:
            window = self._windows.get(identity)
            if window is None or now >= window.window_end:
                count = 0
                reset_in = float(self._window_seconds)
            else:
                count = window.count
                reset_in = max(0.0, window.window_end - now)

        return RateWindowSnapshot(
            identity=identity,
            count=count,
            limit=self._limit,
            remaining=max(0, self._limit - count),
            reset_in_seconds=reset_in,
        )

    def reset(self) -> None:
        """Drop every window (tests and admin use)."""
        with self._lock:
            self._windows.clear()
