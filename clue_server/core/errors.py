"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability.

    Only a subset is ever sent to clients; see exception_handlers.
    """

    code: str
    message: str
    hint: str
    endpoint: str
    field: str
    limit: int
    remaining: int
    reset_at: int
    retry_after: int
    model: str
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message, safe to return to clients.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when input/config validation fails."""


class RateLimitAppError(AppError):
    """Raised when a client exceeds its request budget."""


class LLMAppError(AppError):
    """Raised when a generation cannot be produced."""


class ProviderCallError(LLMAppError):
    """The completion provider call itself failed (transport or API error)."""


class ResponseShapeError(LLMAppError):
    """The provider answered, but not with the JSON shape we asked for."""
