"""Upstream HTTP adapters: news API, page scraping, shared httpx helpers."""

from news_gateway.adapters.upstream.http import build_http_client, get_json, get_response
from news_gateway.adapters.upstream.news_api import NewsApiClient
from news_gateway.adapters.upstream.pages import ExtractedArticle, PageFetcher, extract_article

__all__ = [
    "ExtractedArticle",
    "NewsApiClient",
    "PageFetcher",
    "build_http_client",
    "extract_article",
    "get_json",
    "get_response",
]
