"""OpenAPI customization: tag descriptions and shared 429 documentation.

Keeps documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {"name": "News", "description": "Cached, rate-limited news editions, search and top news."},
    {"name": "Rewrite", "description": "Scrape an article page and rewrite it with an LLM."},
    {"name": "Introspection", "description": "Per-upstream rate-limit window usage."},
    {"name": "Health", "description": "Liveness check."},
]

_THROTTLED_TAGS = {"News", "Rewrite"}

_RATE_LIMITED_RESPONSE = {
    "description": "Upstream quota exhausted; retry after the indicated delay.",
    "headers": {
        "Retry-After": {
            "description": "Seconds until the upstream window resets.",
            "schema": {"type": "integer"},
        }
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation with tags and 429 responses."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing = {t.get("name") for t in tags}
        tags.extend(t for t in TAGS_METADATA if t["name"] not in existing)

        for methods in schema.get("paths", {}).values():
            for operation in methods.values():
                if not isinstance(operation, dict):
                    continue
                if _THROTTLED_TAGS.intersection(operation.get("tags", [])):
                    operation.setdefault("responses", {}).setdefault("429", _RATE_LIMITED_RESPONSE)

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
