"""Scrape-and-rewrite pipeline for a single article URL.

Downloads the page, extracts its text, and asks the LLM to rewrite it as an
original article of similar length. The resulting payload is what the
admission layer caches for the URL.
"""

from __future__ import annotations

import logging
from typing import Any

from news_gateway.adapters.llm.base import AbstractLLMClient
from news_gateway.adapters.upstream.pages import ExtractedArticle, PageFetcher
from news_gateway.core.errors import UpstreamAppError

logger = logging.getLogger(__name__)

# Bump when the prompt changes so cached rewrites are not reused
PROMPT_VERSION = "v1"


def build_prompt(article: ExtractedArticle) -> str:
    """Build the rewrite prompt for an extracted article.

    The model must answer with ``{"title": str, "content": str}`` in the
    article's own language.
    """
    return f"""
Rewrite the news article below in your own words.

RULES:
- Keep every fact, name, number and quote accurate; add nothing new
- Write in the same language as the original article
- Keep a neutral news tone and roughly the same length
- Separate paragraphs with a blank line

Return a JSON object: {{"title": "<rewritten headline>", "content": "<rewritten body>"}}

ORIGINAL TITLE:
{article.title or "(none)"}

ORIGINAL ARTICLE:
{article.text}
""".strip()


class RewriteService:
    """Runs the scrape-and-rewrite pipeline for one URL."""

    def __init__(self, pages: PageFetcher, llm: AbstractLLMClient) -> None:
        self.pages = pages
        self.llm = llm

    async def rewrite(self, url: str) -> dict[str, Any]:
        """Scrape ``url`` and return the rewritten article.

        Raises:
            UpstreamAppError: If the page or the LLM call fails, or the model
                reply lacks the rewritten content.
        """
        article = await self.pages.fetch_article(url)
        logger.info(
            "rewrite.extracted",
            extra={"paragraphs": len(article.paragraphs), "chars": len(article.text)},
        )

        reply = await self.llm.generate_json(build_prompt(article))

        content = reply.get("content")
        if not isinstance(content, str) or not content.strip():
            raise UpstreamAppError(
                code="llm_missing_content",
                message="LLM reply did not include rewritten content",
            )
        title = reply.get("title")

        return {
            "url": url,
            "original_title": article.title,
            "title": title.strip() if isinstance(title, str) and title.strip() else article.title,
            "content": content.strip(),
        }
