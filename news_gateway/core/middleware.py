"""HTTP middleware for request correlation and access logging.

Every request gets a correlation id (taken from the incoming header or a
fresh UUID) stored in contextvars for the lifetime of the request, echoed in
the response headers, and attached to one ``http.request`` access log line.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from news_gateway.core.config import settings
from news_gateway.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


async def request_id_middleware(request: Request, call_next) -> Response:
    """Propagate the request id and time the request.

    Adds the app's request id header (``log.request_id_header``, default
    ``X-Request-ID``) and ``X-Request-Duration-ms`` to the response.
    """

    cfg = getattr(request.app.state, "settings", settings)
    header_name = cfg.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "http.request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
