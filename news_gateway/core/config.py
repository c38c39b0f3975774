"""Application configuration using Pydantic Settings.

Configuration is environment-aware:
- APP_ENV determines which .env file to load
- Supports: development, testing, staging, production
- Each environment has its own .env.{environment} file
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


# Determine which environment to load (default: development)
APP_ENV = os.getenv("APP_ENV", "development")

# Project root (so .env resolution doesn't depend on current working directory)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Map environments to their respective .env files (relative to PROJECT_ROOT)
ENV_FILE_MAP = {
    "development": ".env.development",
    "testing": ".env.testing",
    "staging": ".env.staging",
    "production": ".env.production",
}

_env_filename = ENV_FILE_MAP.get(APP_ENV, ".env.development")
_env_path = PROJECT_ROOT / _env_filename

# Only load from file if it exists (production might inject via env vars only)
_env_file = str(_env_path) if _env_path.is_file() else None


# Nested BaseSettings don't inherit env_file, so populate os.environ first
if _env_file:
    from dotenv import load_dotenv
    load_dotenv(_env_file, override=False)


class UpstreamSettings(BaseSettings):
    """Upstream endpoints, credentials and HTTP timeouts.

    Credentials are held as ``SecretStr`` so they never show up in reprs,
    logs or serialized settings.
    """

    news_base_url: str = Field(
        "https://newsdata.io/api/1",
        description="Base URL of the news API (the /latest endpoint is appended)",
    )
    country: str = Field(
        "in",
        description="Country filter sent with every news API query",
    )
    top_news_url: str = Field(
        "https://tv9telugu.com/wp-json/tv9/v1/top9new",
        description="JSON feed proxied by the /topnews route",
    )
    telugu_api_key: SecretStr | None = Field(None, description="Credential for the telugu edition")
    telugutwo_api_key: SecretStr | None = Field(None, description="Credential for the telugutwo edition")
    english_api_key: SecretStr | None = Field(None, description="Credential for the english edition")
    search_api_key: SecretStr | None = Field(None, description="Credential for the search route")
    timeout_seconds: float = Field(
        10.0,
        description="Timeout applied to each outbound HTTP call",
        gt=0,
    )
    fetch_timeout_seconds: float = Field(
        30.0,
        description="Upper bound on one admitted upstream fetch, in seconds",
        gt=0,
    )
    user_agent: str = Field(
        "news-gateway/0.1",
        description="User-Agent header sent to upstreams",
    )

    model_config = SettingsConfigDict(
        env_prefix="UPSTREAM_",
        case_sensitive=False,
    )


class LLMSettings(BaseSettings):
    """LLM provider configuration used by the rewrite route."""

    provider: str = Field(
        "openai",
        description="LLM provider name (only openai is supported)",
    )
    model: str = Field(
        "gpt-4o-mini",
        description="Model name used for article rewriting",
    )
    api_key: SecretStr | None = Field(
        None,
        description="API key; the rewrite route is unavailable without it",
    )
    base_url: str | None = Field(
        None,
        description="Custom API endpoint for OpenAI-compatible servers",
    )
    timeout_seconds: float = Field(
        45.0,
        description="Request timeout in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="LLM_",
        case_sensitive=False,
    )


class AppSettings(BaseSettings):
    """Application-wide configuration."""

    host: str = Field("0.0.0.0", description="Bind address for the bundled server")
    port: int = Field(3031, description="Bind port for the bundled server")
    cache_ttl_seconds: int = Field(
        43200,
        description="Time-to-live applied to cached news and rewrite payloads",
        ge=1,
    )
    topnews_cache_ttl_seconds: int = Field(
        300,
        description="Time-to-live of the cached top-news feed, which changes through the day",
        ge=1,
    )
    cache_max_entries: int | None = Field(
        2048,
        description="Maximum number of cached payloads (None for unlimited)",
    )
    rate_limit_requests: int = Field(
        30,
        description="Upstream calls admitted per window, per upstream identity",
        ge=1,
    )
    rate_limit_window_seconds: int = Field(
        900,
        description="Rate limit window size in seconds",
        ge=1,
    )
    rate_limit_include_headers: bool = Field(
        True,
        description="Include X-RateLimit-* and Retry-After headers when throttling",
    )
    cors_allow_origins: str = Field(
        "*",
        description="Comma-separated list of allowed CORS origins",
    )
    static_dir: str = Field(
        "public",
        description="Directory served at / when it exists",
    )

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        case_sensitive=False,
    )


class LogSettings(BaseSettings):
    """Logging output configuration."""

    level: str = Field("INFO", description="Root log level")
    format: str = Field("json", description="json or plain")
    output: str = Field("stdout", description="stdout or file")
    file_path: str | None = Field(None, description="Log file path when output=file")
    max_bytes: int | None = Field(
        10 * 1024 * 1024,
        description="Rotate the log file at this size (None disables rotation)",
    )
    backup_count: int = Field(5, description="Rotated files to keep")
    request_id_header: str = Field(
        "X-Request-ID",
        description="Header used to propagate the request correlation id",
    )

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        case_sensitive=False,
    )


class Settings(BaseSettings):
    """Main application settings container.

    Automatically loads from the appropriate .env.{APP_ENV} file.
    Raises validation errors on startup if settings are malformed.
    """

    app_env: str = APP_ENV
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    app: AppSettings = Field(default_factory=AppSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    model_config = SettingsConfigDict(
        case_sensitive=False,
    )


# Global settings instance - composed from domain-specific settings
settings = Settings()
