"""Turn an ``AdmissionResult`` into an HTTP answer.

Successful results are returned as the response payload with an ``X-Cache``
header; throttling and upstream failures are raised as domain errors and
rendered by the global exception handlers.
"""

from __future__ import annotations

import math
from typing import Any

from fastapi import Response

from news_gateway.core.errors import RateLimitedAppError, UpstreamAppError
from news_gateway.services.admission_service import (
    AdmissionResult,
    RateLimited,
    ResultSource,
    Served,
    UpstreamFailure,
)

CACHE_HEADER = "X-Cache"


def render_result(result: AdmissionResult, response: Response) -> Any:
    """Return the payload of a served result or raise the matching error.

    Raises:
        RateLimitedAppError: The identity's window is exhausted (429).
        UpstreamAppError: The upstream call failed (500, generic message).
    """
    if isinstance(result, Served):
        response.headers[CACHE_HEADER] = "HIT" if result.source is ResultSource.CACHE else "MISS"
        return result.value

    if isinstance(result, RateLimited):
        decision = result.decision
        raise RateLimitedAppError(
            code="rate_limited",
            message="Rate limit reached. Please try again later.",
            details={
                "identity": result.identity,
                "limit": decision.limit,
                "remaining": decision.remaining,
                "reset_at": int(math.ceil(decision.reset_at)),
                "retry_after": int(math.ceil(result.retry_after_seconds)),
            },
        )

    if isinstance(result, UpstreamFailure):
        cause = result.cause
        if isinstance(cause, UpstreamAppError):
            raise cause
        raise UpstreamAppError(
            code="upstream_failure",
            message=f"{result.identity} upstream failed: {type(cause).__name__}",
        ) from cause

    raise TypeError(f"unsupported admission result: {type(result).__name__}")
