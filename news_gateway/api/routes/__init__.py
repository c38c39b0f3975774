from __future__ import annotations

from news_gateway.api.routes.health import router as health_router
from news_gateway.api.routes.news import router as news_router
from news_gateway.api.routes.rate_limit import router as rate_limit_router
from news_gateway.api.routes.rewrite import router as rewrite_router

__all__ = ["health_router", "news_router", "rate_limit_router", "rewrite_router"]
