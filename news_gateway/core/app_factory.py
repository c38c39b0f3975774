"""Application factory for the gateway.

Builds the process-wide components (cache, rate limiter, admission
controller, upstream clients), stores them on ``app.state`` and wires
middleware, handlers and routers.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Callable

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from news_gateway.adapters.llm.base import AbstractLLMClient
from news_gateway.adapters.llm.factory import create_llm_client
from news_gateway.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from news_gateway.adapters.upstream.http import build_http_client
from news_gateway.adapters.upstream.news_api import NewsApiClient
from news_gateway.adapters.upstream.pages import PageFetcher
from news_gateway.api.routes import health_router, news_router, rate_limit_router, rewrite_router
from news_gateway.core.config import Settings, settings as default_settings
from news_gateway.core.exception_handlers import setup_exception_handlers
from news_gateway.core.logging import configure_logging
from news_gateway.core.middleware import request_id_middleware
from news_gateway.core.openapi import apply_openapi_customizations
from news_gateway.core.upstreams import ALL_IDENTITIES
from news_gateway.services.admission_service import AdmissionController
from news_gateway.services.rewrite_service import RewriteService
from news_gateway.utils.simple_cache import SimpleTTLCache

logger = logging.getLogger(__name__)

_UNSET = object()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await app.state.http.aclose()
    logger.info("app.shutdown", extra={"cache": app.state.cache.stats()})


def _parse_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app(
    *,
    cfg: Settings | None = None,
    http_transport: httpx.AsyncBaseTransport | None = None,
    llm_client: AbstractLLMClient | None | object = _UNSET,
    clock: Callable[[], float] | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        cfg: Settings to use; defaults to the global settings.
        http_transport: Transport for the upstream HTTP client (tests pass
            ``httpx.MockTransport``).
        llm_client: LLM client for the rewrite route; built from settings
            when omitted. Pass None to disable rewriting.
        clock: Time source shared by the cache and rate limiter.
        configure_logs: Whether to (re)configure root logging.

    Returns:
        Configured FastAPI app.
    """
    cfg = cfg or default_settings

    if configure_logs:
        configure_logging(cfg.log)

    app = FastAPI(
        title="News Gateway",
        description=(
            "Gateway in front of news APIs and an article scrape-and-rewrite "
            "pipeline. Upstream payloads are cached for 12 hours and upstream "
            "calls are throttled per upstream with a fixed window."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Components
    cache = SimpleTTLCache(
        default_ttl_seconds=cfg.app.cache_ttl_seconds,
        max_entries=cfg.app.cache_max_entries,
        clock=clock,
    )
    limiter_kwargs = {"clock": clock} if clock is not None else {}
    limiter = InMemoryFixedWindowRateLimiter(
        limit=cfg.app.rate_limit_requests,
        window_seconds=cfg.app.rate_limit_window_seconds,
        identities=ALL_IDENTITIES,
        **limiter_kwargs,
    )
    http = build_http_client(cfg.upstream, transport=http_transport)
    llm = create_llm_client(cfg.llm) if llm_client is _UNSET else llm_client

    app.state.settings = cfg
    app.state.cache = cache
    app.state.limiter = limiter
    app.state.admission = AdmissionController(
        cache,
        limiter,
        fetch_timeout_seconds=cfg.upstream.fetch_timeout_seconds,
    )
    app.state.http = http
    app.state.news_api = NewsApiClient(
        http,
        base_url=cfg.upstream.news_base_url,
        country=cfg.upstream.country,
    )
    app.state.rewriter = RewriteService(PageFetcher(http), llm) if llm is not None else None

    # Middleware
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_parse_origins(cfg.app.cors_allow_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["Retry-After", "X-Cache", cfg.log.request_id_header],
    )

    setup_exception_handlers(app)

    # Routers (fixed paths before the /{edition}/news pattern)
    app.include_router(health_router)
    app.include_router(rate_limit_router)
    app.include_router(rewrite_router)
    app.include_router(news_router)

    static_dir = Path(cfg.app.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    apply_openapi_customizations(app)

    logger.info(
        "app.created",
        extra={
            "env": cfg.app_env,
            "rate_limit": cfg.app.rate_limit_requests,
            "window_s": cfg.app.rate_limit_window_seconds,
            "cache_ttl_s": cfg.app.cache_ttl_seconds,
            "rewrite_enabled": app.state.rewriter is not None,
        },
    )
    return app
