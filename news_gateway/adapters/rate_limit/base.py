"""Rate limiter interfaces.

The admission layer depends on this abstraction (not the concrete
implementation) so the storage backend can be swapped without touching it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of ``try_acquire`` for one upstream identity.

    Attributes:
        identity: Upstream identity the quota belongs to.
        allowed: Whether an upstream call may be made now.
        limit: Max admitted calls per window.
        remaining: Calls left in the current window after this decision.
        reset_at: UNIX epoch seconds when the current window ends.
        retry_after_seconds: ``max(0, reset_at - now)``; 0.0 when allowed.
    """

    identity: str
    allowed: bool
    limit: int
    remaining: int
    reset_at: float
    retry_after_seconds: float


@dataclass(frozen=True)
class RateWindowSnapshot:
    """Read-only view of an identity's window for introspection."""

    identity: str
    count: int
    limit: int
    remaining: int
    reset_in_seconds: float


class AbstractRateLimiter(ABC):
    """Interface for per-identity upstream rate limiters."""

    @property
    @abstractmethod
    def identities(self) -> tuple[str, ...]:
        """Identities whose windows can be reported by ``snapshot``."""
        raise NotImplementedError

    @abstractmethod
    def try_acquire(self, identity: str) -> RateLimitDecision:
        """Admit one upstream call for ``identity`` if its window has quota.

        An allowed decision consumes quota, so call this only when an upstream
        fetch will actually follow.
        """
        raise NotImplementedError

    @abstractmethod
    def snapshot(self, identity: str) -> RateWindowSnapshot:
        """Describe the identity's current window without mutating it."""
        raise NotImplementedError
