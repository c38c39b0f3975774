"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    field: str
    identity: str
    limit: int
    remaining: int
    reset_at: int
    retry_after: int
    http_status: int
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when required input is missing or malformed."""


class RateLimitedAppError(AppError):
    """Raised when an upstream identity has exhausted its window quota."""


class UpstreamAppError(AppError):
    """Raised when an upstream call fails (network, status, or parse error)."""


class UnavailableAppError(AppError):
    """Raised when a route's collaborator is not configured."""


class NotFoundAppError(AppError):
    """Raised when a path parameter names a resource that does not exist."""
