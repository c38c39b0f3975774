"""Rate limiting adapters.

A small abstraction layer so the gateway can start with an in-memory limiter
and later migrate to a shared store without changing the admission layer.
"""

from news_gateway.adapters.rate_limit.base import (
    AbstractRateLimiter,
    RateLimitDecision,
    RateWindowSnapshot,
)
from news_gateway.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter

__all__ = [
    "AbstractRateLimiter",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitDecision",
    "RateWindowSnapshot",
]
