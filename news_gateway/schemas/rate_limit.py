"""Pydantic schemas for rate-limit introspection."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RateLimitWindowInfo(BaseModel):
    """Current window of one upstream identity."""

    requests: int = Field(..., description="Upstream calls admitted in the current window.")
    remaining: int = Field(..., description="Upstream calls still admissible in the window.")
    limit: int = Field(..., description="Admitted calls allowed per window.")
    reset_in_seconds: float = Field(..., description="Seconds until the window resets.")
