"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before anything imports the settings module
so the global settings object sees test credentials and no .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("UPSTREAM_TELUGU_API_KEY", "telugu-key")
os.environ.setdefault("UPSTREAM_TELUGUTWO_API_KEY", "telugutwo-key")
os.environ.setdefault("UPSTREAM_ENGLISH_API_KEY", "english-key")
os.environ.setdefault("UPSTREAM_SEARCH_API_KEY", "search-key")
os.environ.setdefault("UPSTREAM_NEWS_BASE_URL", "https://news.test/api/1")
os.environ.setdefault("UPSTREAM_TOP_NEWS_URL", "https://top.test/feed")
os.environ.setdefault("APP_STATIC_DIR", "__no_static_dir__")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.pop("LLM_API_KEY", None)

from typing import Any, Callable  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from news_gateway.core.app_factory import create_app  # noqa: E402
from news_gateway.core.config import AppSettings, Settings  # noqa: E402
from tests.helpers import FakeClock, FakeUpstream  # noqa: E402


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeUpstream:
    fake = FakeUpstream()
    fake.routes["/api/1/latest"] = lambda request: httpx.Response(
        200,
        json={
            "status": "success",
            "results": [{"title": f"{request.url.params.get('language')} headline"}],
            "nextPage": "cursor-2",
        },
    )
    fake.routes["/feed"] = lambda request: httpx.Response(200, json=[{"title": "top story"}])
    return fake


@pytest.fixture
def make_client(upstream: FakeUpstream, clock: FakeClock) -> Callable[..., TestClient]:
    """Build a TestClient over a fresh app; keyword args override AppSettings."""

    def _make(llm_client: Any = None, **app_overrides: Any) -> TestClient:
        cfg = Settings(app=AppSettings(**app_overrides))
        app = create_app(
            cfg=cfg,
            http_transport=upstream.transport,
            llm_client=llm_client,
            clock=clock,
            configure_logs=False,
        )
        return TestClient(app)

    return _make
