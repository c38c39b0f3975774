"""HTML page download and article extraction."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from urllib.parse import urlsplit

import httpx
from bs4 import BeautifulSoup

from news_gateway.adapters.upstream.http import get_response
from news_gateway.core.errors import UpstreamAppError, ValidationAppError

_WHITESPACE_RE = re.compile(r"\s+")

# Tried in order; the first container holding paragraphs wins
BODY_SELECTORS = (
    "article",
    "[itemprop=articleBody]",
    ".entry-content",
    ".article-content",
    ".post-content",
    "main",
    "body",
)

MIN_PARAGRAPH_CHARS = 20


@dataclass
class ExtractedArticle:
    url: str
    title: str
    paragraphs: list[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n\n".join(self.paragraphs)


def validate_page_url(url: str | None) -> str:
    """Return the stripped URL if it is an absolute http(s) URL.

    Raises:
        ValidationAppError: If the URL is missing, blank or not http(s).
    """
    candidate = (url or "").strip()
    if not candidate:
        raise ValidationAppError(
            code="url_required",
            message="A page URL is required.",
            details={"field": "url"},
        )
    parts = urlsplit(candidate)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValidationAppError(
            code="url_invalid",
            message="The page URL must be an absolute http(s) URL.",
            details={"field": "url"},
        )
    return candidate


def _clean(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_article(html: str, url: str) -> ExtractedArticle:
    """Pull the title and body paragraphs out of an article page.

    Raises:
        UpstreamAppError: If the page holds no readable paragraphs.
    """
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "nav", "header", "footer", "aside", "form"]):
        tag.decompose()

    title = ""
    og_title = soup.find("meta", attrs={"property": "og:title"})
    if og_title and og_title.get("content"):
        title = _clean(og_title["content"])
    if not title and soup.h1:
        title = _clean(soup.h1.get_text(" "))
    if not title and soup.title and soup.title.string:
        title = _clean(soup.title.string)

    paragraphs: list[str] = []
    for selector in BODY_SELECTORS:
        container = soup.select_one(selector)
        if container is None:
            continue
        paragraphs = [
            text
            for text in (_clean(p.get_text(" ")) for p in container.find_all("p"))
            if len(text) >= MIN_PARAGRAPH_CHARS
        ]
        if paragraphs:
            break

    if not paragraphs:
        raise UpstreamAppError(
            code="page_without_content",
            message="No article text found on the page",
            details={"context": {"service": "page"}},
        )

    return ExtractedArticle(url=url, title=title, paragraphs=paragraphs)


class PageFetcher:
    """Downloads article pages and extracts their text."""

    service = "page"

    def __init__(self, http: httpx.AsyncClient, *, max_chars: int = 20000) -> None:
        self.http = http
        self.max_chars = max_chars

    async def fetch_article(self, url: str) -> ExtractedArticle:
        response = await get_response(self.http, url, service=self.service)
        content_type = response.headers.get("content-type", "")
        if "html" not in content_type.lower():
            raise UpstreamAppError(
                code="page_not_html",
                message="The page is not an HTML document",
                details={"context": {"service": self.service, "content_type": content_type}},
            )
        article = extract_article(response.text, url)

        # keep whole paragraphs up to max_chars
        kept: list[str] = []
        total = 0
        for paragraph in article.paragraphs:
            if kept and total + len(paragraph) > self.max_chars:
                break
            kept.append(paragraph)
            total += len(paragraph)
        article.paragraphs = kept
        return article
