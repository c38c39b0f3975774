"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from news_gateway.core.errors import (
    AppError,
    NotFoundAppError,
    RateLimitedAppError,
    UnavailableAppError,
    UpstreamAppError,
    ValidationAppError,
)
from news_gateway.core.exception_handlers import UPSTREAM_FAILURE_MESSAGE, setup_exception_handlers


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers registered."""
    app = FastAPI()
    setup_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    """Create test client with handlers enabled."""
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    def test_validation_error_returns_400(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify ValidationAppError returns HTTP 400."""
        @app_with_handlers.get("/test-validation")
        async def test_endpoint():
            raise ValidationAppError(code="query_required", message="Search query is required")

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "query_required"
        assert data["error"]["message"] == "Search query is required"
        assert "request_id" in data["error"]

    def test_rate_limited_error_returns_429_with_headers(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify RateLimitedAppError carries Retry-After and X-RateLimit-* headers."""
        @app_with_handlers.get("/test-throttled")
        async def test_endpoint():
            raise RateLimitedAppError(
                code="rate_limited",
                message="Rate limit exceeded",
                details={"identity": "english", "limit": 30, "remaining": 0, "reset_at": 1900, "retry_after": 412},
            )

        response = client.get("/test-throttled")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "412"
        assert response.headers["X-RateLimit-Limit"] == "30"
        assert response.headers["X-RateLimit-Remaining"] == "0"
        assert response.headers["X-RateLimit-Reset"] == "1900"
        assert response.json()["error"]["details"]["identity"] == "english"

    def test_upstream_error_returns_generic_500(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify UpstreamAppError never exposes the upstream cause."""
        @app_with_handlers.get("/test-upstream")
        async def test_endpoint():
            raise UpstreamAppError(
                code="upstream_bad_status",
                message="news_api answered 401",
                details={"http_status": 401, "context": {"service": "news_api"}},
            )

        response = client.get("/test-upstream")

        assert response.status_code == 500
        data = response.json()
        assert data["error"]["message"] == UPSTREAM_FAILURE_MESSAGE
        assert "details" not in data["error"]
        assert "401" not in response.text
        assert "news_api" not in response.text

    def test_unavailable_error_returns_503(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify UnavailableAppError returns HTTP 503."""
        @app_with_handlers.get("/test-unavailable")
        async def test_endpoint():
            raise UnavailableAppError(code="rewrite_unavailable", message="Rewriting is not configured")

        response = client.get("/test-unavailable")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "rewrite_unavailable"

    def test_request_validation_returns_400(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify FastAPI parameter validation is rendered as a 400."""
        @app_with_handlers.get("/test-params")
        async def test_endpoint(page: int):
            return {"page": page}

        response = client.get("/test-params", params={"page": "abc"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"]["code"] == "validation_error"
        assert "page" in data["error"]["details"]["context"]["fields"][0]

    def test_not_found_error_returns_404(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify NotFoundAppError returns HTTP 404 in the error envelope."""
        @app_with_handlers.get("/test-missing")
        async def test_endpoint():
            raise NotFoundAppError(code="unknown_edition", message="Unknown edition: klingon")

        response = client.get("/test-missing")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "unknown_edition"

    def test_unmatched_path_uses_error_envelope(self, client: TestClient):
        """Verify routing 404s are rendered like domain errors."""
        response = client.get("/no-such-route")

        assert response.status_code == 404
        data = response.json()
        assert data["error"]["code"] == "not_found"
        assert "request_id" in data["error"]
        assert "detail" not in data

    def test_wrong_method_keeps_405_and_allow_header(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify 405 responses keep their status and Allow header."""
        @app_with_handlers.get("/test-get-only")
        async def test_endpoint():
            return {}

        response = client.post("/test-get-only")

        assert response.status_code == 405
        assert response.json()["error"]["code"] == "method_not_allowed"
        assert "GET" in response.headers["Allow"]

    def test_error_response_format_is_consistent(self, client: TestClient, app_with_handlers: FastAPI):
        """Verify error responses have consistent JSON structure."""
        @app_with_handlers.get("/test-format")
        async def test_endpoint():
            raise ValidationAppError(code="test", message="test")

        response = client.get("/test-format")
        data = response.json()

        assert "error" in data
        assert "code" in data["error"]
        assert "message" in data["error"]
        assert "request_id" in data["error"]


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_unexpected_exception_handler_registered(self, app_with_handlers: FastAPI):
        """Verify fallback exception handler is registered."""
        assert Exception in app_with_handlers.exception_handlers

    def test_general_exception_handler_logic(self):
        """Verify general_exception_handler returns correct structure."""
        from news_gateway.core.exception_handlers import general_exception_handler

        request = AsyncMock()
        request.url.path = "/test"
        request.method = "GET"

        exc = RuntimeError("Unexpected error: cache backend exploded")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "cache backend" not in data["error"]["message"]
        assert "request_id" in data["error"]

    def test_rate_limit_headers_can_be_disabled(self):
        """Only Retry-After is sent when rate limit details are turned off."""
        from news_gateway.core.exception_handlers import app_error_handler

        request = AsyncMock()
        request.url.path = "/english/news"
        request.app.state.settings = SimpleNamespace(app=SimpleNamespace(rate_limit_include_headers=False))

        exc = RateLimitedAppError(code="rate_limited", message="Rate limit exceeded", details={"retry_after": 9})
        response = asyncio.run(app_error_handler(request, exc))

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "9"
        assert "X-RateLimit-Limit" not in response.headers


class TestErrorHandlerIntegration:
    """Integration tests for exception handler setup."""

    def test_setup_exception_handlers_registers_handlers(self, app_with_handlers: FastAPI):
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers

    def test_multiple_handler_setups_does_not_fail(self):
        app = FastAPI()

        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers
