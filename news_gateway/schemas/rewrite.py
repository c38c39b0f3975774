"""Pydantic schemas for the scrape-and-rewrite route."""

from __future__ import annotations

from pydantic import BaseModel, Field


class RewriteRequest(BaseModel):
    """Body of ``POST /rewrite``.

    ``url`` is optional at the schema level so a missing value is reported
    as a ``url_required`` validation error rather than a schema error.
    """

    url: str | None = Field(
        default=None,
        description="Absolute http(s) URL of the article page to rewrite.",
        examples=["https://example.com/news/article-1"],
    )


class RewriteResponse(BaseModel):
    url: str = Field(..., description="Page that was scraped.")
    original_title: str = Field("", description="Title found on the page.")
    title: str = Field(..., description="Rewritten headline.")
    content: str = Field(..., description="Rewritten article body.")
