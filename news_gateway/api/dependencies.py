"""FastAPI dependencies resolving gateway components from ``app.state``.

Components are built once by the app factory and live for the lifetime of
the application object; routes never reach for module-level globals.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from news_gateway.adapters.rate_limit.base import AbstractRateLimiter
from news_gateway.adapters.upstream.news_api import NewsApiClient
from news_gateway.core.config import Settings
from news_gateway.core.errors import UnavailableAppError
from news_gateway.services.admission_service import AdmissionController
from news_gateway.services.rewrite_service import RewriteService


def _from_state(request: Request, name: str):
    component = getattr(request.app.state, name, None)
    if component is None:
        raise RuntimeError(f"{name} not initialized. Build the app with create_app().")
    return component


def get_settings(request: Request) -> Settings:
    return _from_state(request, "settings")


def get_admission(request: Request) -> AdmissionController:
    return _from_state(request, "admission")


def get_rate_limiter(request: Request) -> AbstractRateLimiter:
    return _from_state(request, "limiter")


def get_news_api(request: Request) -> NewsApiClient:
    return _from_state(request, "news_api")


def get_rewriter(request: Request) -> RewriteService:
    """Return the rewrite pipeline, or fail with 503 when no LLM is configured."""
    rewriter = getattr(request.app.state, "rewriter", None)
    if rewriter is None:
        raise UnavailableAppError(
            code="rewrite_unavailable",
            message="Article rewriting is not configured on this server.",
        )
    return rewriter


SettingsDep = Annotated[Settings, Depends(get_settings)]
AdmissionDep = Annotated[AdmissionController, Depends(get_admission)]
RateLimiterDep = Annotated[AbstractRateLimiter, Depends(get_rate_limiter)]
NewsApiDep = Annotated[NewsApiClient, Depends(get_news_api)]
RewriterDep = Annotated[RewriteService, Depends(get_rewriter)]
