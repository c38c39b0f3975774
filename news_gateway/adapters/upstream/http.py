"""Shared httpx helpers for upstream calls."""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from news_gateway.core.config import UpstreamSettings
from news_gateway.core.errors import UpstreamAppError
from news_gateway.core.logging import redact_url

logger = logging.getLogger(__name__)


def build_http_client(
    upstream: UpstreamSettings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create the process-wide async HTTP client used for all upstreams.

    Args:
        upstream: Upstream settings (timeout, user agent).
        transport: Optional transport override (tests use ``httpx.MockTransport``).
    """

    return httpx.AsyncClient(
        timeout=httpx.Timeout(upstream.timeout_seconds),
        headers={"User-Agent": upstream.user_agent},
        follow_redirects=True,
        transport=transport,
    )


async def get_response(
    client: httpx.AsyncClient,
    url: str,
    *,
    service: str,
    params: Mapping[str, Any] | None = None,
) -> httpx.Response:
    """GET ``url`` and return the response, translating failures.

    ``None`` values in ``params`` are dropped so optional filters are simply
    not sent.

    Raises:
        UpstreamAppError: On transport errors or a non-2xx status.
    """

    query = {k: v for k, v in (params or {}).items() if v is not None}
    try:
        response = await client.get(url, params=query)
    except httpx.HTTPError as exc:
        logger.warning(
            "upstream.transport_error",
            extra={
                "service": service,
                "url": redact_url(url),
                "error_type": type(exc).__name__,
            },
        )
        raise UpstreamAppError(
            code="upstream_unreachable",
            message=f"{service} request failed",
            details={"context": {"service": service, "error_type": type(exc).__name__}},
        ) from exc

    if response.is_error:
        logger.warning(
            "upstream.bad_status",
            extra={
                "service": service,
                "url": redact_url(str(response.request.url)),
                "status_code": response.status_code,
                "body": response.text[:300],
            },
        )
        raise UpstreamAppError(
            code="upstream_bad_status",
            message=f"{service} answered {response.status_code}",
            details={"http_status": response.status_code, "context": {"service": service}},
        )

    return response


async def get_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    service: str,
    params: Mapping[str, Any] | None = None,
) -> Any:
    """GET ``url`` and decode its JSON body.

    Raises:
        UpstreamAppError: On transport errors, non-2xx status or invalid JSON.
    """

    response = await get_response(client, url, service=service, params=params)
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamAppError(
            code="upstream_invalid_json",
            message=f"{service} returned a non-JSON body",
            details={"context": {"service": service}},
        ) from exc
