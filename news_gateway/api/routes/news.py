"""News routes: language editions, filtered search and the top-news feed.

Each route derives a cache key from every parameter that shapes the
upstream answer, picks its upstream identity and hands an opaque fetch
function to the admission controller.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Query, Response

from news_gateway.api.dependencies import AdmissionDep, NewsApiDep, SettingsDep
from news_gateway.api.rendering import render_result
from news_gateway.core.errors import NotFoundAppError, UnavailableAppError, ValidationAppError
from news_gateway.core.upstreams import DEFAULT_SEARCH_LANGUAGE, EDITIONS, UpstreamIdentity
from news_gateway.utils.simple_cache import build_cache_key

router = APIRouter(tags=["News"])


def _require_credential(name: str, api_key) -> None:
    if api_key is None or not api_key.get_secret_value():
        raise UnavailableAppError(
            code="upstream_not_configured",
            message=f"The {name} upstream is not configured on this server.",
        )


@router.get("/{edition}/news")
async def edition_news(
    edition: str,
    response: Response,
    admission: AdmissionDep,
    news_api: NewsApiDep,
    cfg: SettingsDep,
    page: str | None = Query(None, description="Pagination cursor from a previous response."),
) -> Any:
    """Latest news for one language edition (telugu, telugutwo, english)."""
    entry = EDITIONS.get(edition)
    if entry is None:
        raise NotFoundAppError(
            code="unknown_edition",
            message=f"Unknown edition: {edition}",
            details={"field": "edition"},
        )

    api_key = entry.api_key(cfg.upstream)
    _require_credential(entry.name, api_key)

    # editions sharing a language run the same upstream query, so they share entries
    key = build_cache_key("news", language=entry.language, page=page)

    async def fetch() -> dict[str, Any]:
        return await news_api.latest(api_key, language=entry.language, page=page)

    result = await admission.resolve(key, entry.identity.value, cfg.app.cache_ttl_seconds, fetch)
    return render_result(result, response)


@router.get("/search")
async def search_news(
    response: Response,
    admission: AdmissionDep,
    news_api: NewsApiDep,
    cfg: SettingsDep,
    q: str | None = Query(None, description="Free-text query (required)."),
    language: str = Query(DEFAULT_SEARCH_LANGUAGE, description="Two-letter language code."),
    category: str | None = Query(None, description="News category filter."),
    page: str | None = Query(None, description="Pagination cursor from a previous response."),
) -> Any:
    """Search news by query with optional language, category and page."""
    query = (q or "").strip()
    # a blank language falls back to the default, like an omitted one
    language = (language or "").strip() or DEFAULT_SEARCH_LANGUAGE
    if not query:
        raise ValidationAppError(
            code="query_required",
            message="A non-empty search query (q) is required.",
            details={"field": "q"},
        )

    api_key = cfg.upstream.search_api_key
    _require_credential(UpstreamIdentity.SEARCH.value, api_key)

    key = build_cache_key("search", q=query, language=language, category=category, page=page)

    async def fetch() -> dict[str, Any]:
        return await news_api.latest(
            api_key,
            language=language,
            query=query,
            category=category,
            page=page,
        )

    result = await admission.resolve(
        key, UpstreamIdentity.SEARCH.value, cfg.app.cache_ttl_seconds, fetch
    )
    return render_result(result, response)


@router.get("/topnews")
async def top_news(
    response: Response,
    admission: AdmissionDep,
    news_api: NewsApiDep,
    cfg: SettingsDep,
) -> Any:
    """Proxy the configured top-news feed."""
    url = cfg.upstream.top_news_url
    key = build_cache_key("topnews", url=url)

    async def fetch() -> Any:
        return await news_api.top_news(url)

    result = await admission.resolve(
        key, UpstreamIdentity.TOPNEWS.value, cfg.app.topnews_cache_ttl_seconds, fetch
    )
    return render_result(result, response)
