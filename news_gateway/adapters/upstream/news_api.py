"""Client for the news API ``/latest`` endpoint."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import SecretStr

from news_gateway.adapters.upstream.http import get_json
from news_gateway.core.errors import UpstreamAppError


class NewsApiClient:
    """Thin async wrapper over the news API.

    The API key travels as the ``apikey`` query parameter, so URLs built here
    must only ever be logged through ``redact_url``.
    """

    service = "news_api"

    def __init__(self, http: httpx.AsyncClient, *, base_url: str, country: str) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.country = country

    async def latest(
        self,
        api_key: SecretStr | None,
        *,
        language: str,
        query: str | None = None,
        category: str | None = None,
        page: str | None = None,
    ) -> dict[str, Any]:
        """Fetch the latest articles for a language, optionally filtered.

        Args:
            api_key: Credential of the calling identity.
            language: Two-letter language code.
            query: Free-text search.
            category: News category filter.
            page: Opaque pagination cursor from a previous response.

        Returns:
            The decoded JSON payload.

        Raises:
            UpstreamAppError: If no credential is configured or the call fails.
        """
        if api_key is None or not api_key.get_secret_value():
            raise UpstreamAppError(
                code="upstream_credential_missing",
                message="No API key configured for this upstream",
                details={"context": {"service": self.service}},
            )

        payload = await get_json(
            self.http,
            f"{self.base_url}/latest",
            service=self.service,
            params={
                "apikey": api_key.get_secret_value(),
                "language": language,
                "q": query,
                "category": category,
                "page": page,
                "country": self.country,
            },
        )

        if not isinstance(payload, dict):
            raise UpstreamAppError(
                code="upstream_unexpected_payload",
                message="news API returned an unexpected payload",
                details={"context": {"service": self.service}},
            )
        if payload.get("status") == "error":
            raise UpstreamAppError(
                code="upstream_reported_error",
                message="news API reported an error",
                details={"context": {"service": self.service}},
            )
        return payload

    async def top_news(self, url: str) -> Any:
        """Proxy a public top-news JSON feed."""
        return await get_json(self.http, url, service="top_news")
