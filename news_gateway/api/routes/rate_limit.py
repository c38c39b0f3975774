from __future__ import annotations

from fastapi import APIRouter

from news_gateway.api.dependencies import RateLimiterDep
from news_gateway.schemas.rate_limit import RateLimitWindowInfo

router = APIRouter(tags=["Introspection"])


@router.get("/rate-limit", response_model=dict[str, RateLimitWindowInfo])
def rate_limit_status(limiter: RateLimiterDep) -> dict[str, RateLimitWindowInfo]:
    """Per-identity usage of the current rate-limit window.

    Reading this endpoint never opens, resets or consumes a window.
    """
    status: dict[str, RateLimitWindowInfo] = {}
    for identity in limiter.identities:
        snap = limiter.snapshot(identity)
        status[identity] = RateLimitWindowInfo(
            requests=snap.count,
            remaining=snap.remaining,
            limit=snap.limit,
            reset_in_seconds=round(snap.reset_in_seconds, 3),
        )
    return status
