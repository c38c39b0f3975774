from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Response

from news_gateway.adapters.upstream.pages import validate_page_url
from news_gateway.api.dependencies import AdmissionDep, RewriterDep, SettingsDep
from news_gateway.api.rendering import render_result
from news_gateway.core.upstreams import UpstreamIdentity
from news_gateway.schemas.rewrite import RewriteRequest, RewriteResponse
from news_gateway.services.rewrite_service import PROMPT_VERSION
from news_gateway.utils.simple_cache import build_cache_key

router = APIRouter(tags=["Rewrite"])


@router.post("/rewrite", response_model=RewriteResponse)
async def rewrite_article(
    body: RewriteRequest,
    response: Response,
    admission: AdmissionDep,
    rewriter: RewriterDep,
    cfg: SettingsDep,
) -> Any:
    """Scrape an article page and return an LLM rewrite of it.

    Raises:
        ValidationAppError: 400 if the URL is missing or not http(s).
        UnavailableAppError: 503 if no LLM is configured.
    """
    url = validate_page_url(body.url)
    key = build_cache_key("rewrite", url=url, prompt=PROMPT_VERSION)

    async def fetch() -> dict[str, Any]:
        return await rewriter.rewrite(url)

    result = await admission.resolve(
        key, UpstreamIdentity.REWRITE.value, cfg.app.cache_ttl_seconds, fetch
    )
    return render_result(result, response)
