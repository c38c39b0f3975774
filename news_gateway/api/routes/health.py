from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Liveness check with a summary of optional features and cache usage."""

    state = request.app.state
    cache = getattr(state, "cache", None)
    return {
        "status": "ok",
        "rewrite_enabled": getattr(state, "rewriter", None) is not None,
        "cache": cache.stats() if cache is not None else None,
    }
