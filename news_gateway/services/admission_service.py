"""Admission control: serve from cache, call the upstream, or throttle.

Every route funnels its upstream work through ``AdmissionController.resolve``.
The controller composes the TTL cache, the per-identity rate limiter and an
opaque async fetch function, and answers with one of three result variants
instead of raising:

- ``Served``: payload from the cache or a fresh upstream call
- ``RateLimited``: the identity's window is exhausted
- ``UpstreamFailure``: the fetch raised or timed out

Concurrency: under asyncio the cache lookup and ``try_acquire`` run without
an intervening await, so a single event loop cannot interleave them.
Concurrent misses for the same key are not coalesced; each one is admitted
(and counted) separately and reaches the upstream.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

from news_gateway.adapters.rate_limit.base import AbstractRateLimiter, RateLimitDecision
from news_gateway.utils.simple_cache import SimpleTTLCache

logger = logging.getLogger(__name__)

FetchFn = Callable[[], Awaitable[Any]]


class ResultSource(str, enum.Enum):
    CACHE = "cache"
    UPSTREAM = "upstream"


@dataclass(frozen=True)
class Served:
    source: ResultSource
    value: Any


@dataclass(frozen=True)
class RateLimited:
    identity: str
    retry_after_seconds: float
    decision: RateLimitDecision


@dataclass(frozen=True)
class UpstreamFailure:
    identity: str
    cause: BaseException


AdmissionResult = Union[Served, RateLimited, UpstreamFailure]


class AdmissionController:
    """Decides, per request, between cache, upstream and throttling.

    Attributes:
        cache: Shared payload cache.
        limiter: Per-identity upstream rate limiter.
        fetch_timeout_seconds: Upper bound on one fetch; None disables it.
    """

    def __init__(
        self,
        cache: SimpleTTLCache,
        limiter: AbstractRateLimiter,
        *,
        fetch_timeout_seconds: float | None = None,
    ) -> None:
        if fetch_timeout_seconds is not None and fetch_timeout_seconds <= 0:
            raise ValueError("fetch_timeout_seconds must be > 0 or None")
        self.cache = cache
        self.limiter = limiter
        self.fetch_timeout_seconds = fetch_timeout_seconds

    async def resolve(
        self,
        key: str,
        identity: str,
        ttl: float | None,
        fetch: FetchFn,
    ) -> AdmissionResult:
        """Answer one logical request.

        1. A cache hit is returned as is; the limiter is not consulted.
        2. On a miss, one unit of the identity's quota is acquired. When the
           window is exhausted the request is rejected and the cache is left
           untouched.
        3. Otherwise ``fetch`` runs once. A successful payload is cached under
           ``key`` for ``ttl`` seconds. A failure is reported, never cached,
           and the quota it consumed is not returned.

        Args:
            key: Deterministic cache key for the request.
            identity: Upstream identity whose quota applies.
            ttl: Entry lifetime in seconds; None uses the cache default.
            fetch: Zero-argument coroutine function performing the upstream call.

        Returns:
            One of ``Served``, ``RateLimited`` or ``UpstreamFailure``.
        """

        cached = self.cache.get(key)
        if cached is not None:
            logger.info(
                "admission.cache_hit",
                extra={"cache_key": key[:24], "identity": identity},
            )
            return Served(source=ResultSource.CACHE, value=cached)

        decision = self.limiter.try_acquire(identity)
        if not decision.allowed:
            logger.warning(
                "rate_limit.exceeded",
                extra={
                    "identity": identity,
                    "limit": decision.limit,
                    "retry_after_s": round(decision.retry_after_seconds, 3),
                },
            )
            return RateLimited(
                identity=identity,
                retry_after_seconds=decision.retry_after_seconds,
                decision=decision,
            )

        logger.info(
            "admission.upstream_call",
            extra={
                "cache_key": key[:24],
                "identity": identity,
                "remaining": decision.remaining,
            },
        )

        try:
            if self.fetch_timeout_seconds is None:
                value = await fetch()
            else:
                value = await asyncio.wait_for(fetch(), timeout=self.fetch_timeout_seconds)
        except Exception as exc:
            logger.error(
                "admission.upstream_failure",
                extra={
                    "identity": identity,
                    "error_type": type(exc).__name__,
                    "error_msg": str(exc),
                },
            )
            return UpstreamFailure(identity=identity, cause=exc)

        if value is None:
            # None doubles as the cache's "absent" marker
            logger.error(
                "admission.upstream_failure",
                extra={"identity": identity, "error_type": "EmptyPayload"},
            )
            return UpstreamFailure(identity=identity, cause=ValueError("upstream returned no payload"))

        self.cache.set(key, value, ttl)
        return Served(source=ResultSource.UPSTREAM, value=value)
