"""Global exception handlers for consistent error responses.

Design:
- ValidationAppError / request validation -> 400
- RateLimitedAppError -> 429 with Retry-After (and X-RateLimit-* headers)
- UpstreamAppError -> 500 with a generic message; the cause is only logged
- NotFoundAppError / unmatched routes -> 404, other HTTP errors keep their status
- UnavailableAppError -> 503
- Unexpected Exception -> generic 500 (safety net)
- All bodies are ``{"error": {code, message, request_id, details?}}``
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from news_gateway.core.config import settings
from news_gateway.core.errors import (
    AppError,
    NotFoundAppError,
    RateLimitedAppError,
    UnavailableAppError,
    UpstreamAppError,
)
from news_gateway.core.logging import get_request_id

logger = logging.getLogger(__name__)

UPSTREAM_FAILURE_MESSAGE = "Failed to fetch data"


def _error_body(code: str, message: str, details: dict | None = None) -> dict:
    error = {"code": code, "message": message, "request_id": get_request_id()}
    if details:
        error["details"] = details
    return {"error": error}


def _status_for(exc: AppError) -> int:
    if isinstance(exc, RateLimitedAppError):
        return 429
    if isinstance(exc, UpstreamAppError):
        return 500
    if isinstance(exc, NotFoundAppError):
        return 404
    if isinstance(exc, UnavailableAppError):
        return 503
    return 400


def _rate_limit_headers(exc: RateLimitedAppError, include_details: bool) -> dict[str, str]:
    details = exc.details or {}
    headers = {"Retry-After": str(int(details.get("retry_after", 0)))}
    if include_details:
        headers["X-RateLimit-Limit"] = str(details.get("limit", ""))
        headers["X-RateLimit-Remaining"] = str(details.get("remaining", 0))
        headers["X-RateLimit-Reset"] = str(details.get("reset_at", ""))
    return headers


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render domain errors with their HTTP status.

    Upstream failures are logged with their code and message but answered
    with a fixed message so nothing about the upstream leaks to the client.
    """
    status_code = _status_for(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "request_path": request.url.path,
        },
    )

    if isinstance(exc, UpstreamAppError):
        return JSONResponse(
            status_code=status_code,
            content=_error_body("upstream_failure", UPSTREAM_FAILURE_MESSAGE),
        )

    headers = None
    if isinstance(exc, RateLimitedAppError):
        cfg = getattr(request.app.state, "settings", settings)
        headers = _rate_limit_headers(exc, cfg.app.rate_limit_include_headers)
    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.code, exc.message, exc.details),
        headers=headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI input validation failures as 400 validation errors."""
    fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()]
    logger.warning(
        "request_validation_failed",
        extra={"fields": fields, "request_path": request.url.path},
    )
    return JSONResponse(
        status_code=400,
        content=_error_body(
            "validation_error",
            "Request parameters are missing or invalid.",
            {"context": {"fields": fields}},
        ),
    )


_HTTP_ERROR_CODES = {404: "not_found", 405: "method_not_allowed"}


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render routing errors (unknown path, wrong method) in the error envelope."""
    code = _HTTP_ERROR_CODES.get(exc.status_code, "http_error")
    logger.warning(
        "http_error_handled",
        extra={"error_code": code, "status_code": exc.status_code, "request_path": request.url.path},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors; never leaks internals."""
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
        },
    )
    return JSONResponse(
        status_code=500,
        content=_error_body(
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        ),
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(Exception)(general_exception_handler)
