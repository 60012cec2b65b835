"""Rate limiting middleware.

This module wires the rate limiting adapter into the HTTP layer.

Rate limiting strategy:
- Global sliding-window limit per client identifier, across every route.
- Client identifier: first X-Forwarded-For entry, else the peer address,
  else "unknown".
- Runs as HTTP middleware so throttled requests never reach body parsing,
  validation, the cache or the completion provider.

The limiter instance lives on ``app.state.rate_limiter`` (installed by the app
factory) so tests can swap in a limiter with a controlled clock.
"""

from __future__ import annotations

import hashlib
import logging

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from clue_server.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from clue_server.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from clue_server.core.config import AppSettings, settings
from clue_server.core.errors import RateLimitAppError
from clue_server.core.exception_handlers import error_body, status_code_for

logger = logging.getLogger(__name__)

UNKNOWN_CLIENT = "unknown"
RATE_LIMIT_MESSAGE = "Rate limit exceeded"


def build_rate_limiter(app_settings: AppSettings | None = None) -> AbstractRateLimiter:
    """Create the limiter configured by ``APP_RATE_LIMIT_*`` settings."""

    cfg = app_settings or settings.app
    return InMemorySlidingWindowRateLimiter(
        limit=cfg.rate_limit_requests,
        window_ms=cfg.rate_limit_window_ms,
    )


def client_identifier(request: Request, *, trust_forwarded_for: bool = True) -> str:
    """Best-effort origin of the request, used only as a bucket key.

    Args:
        request: Incoming request.
        trust_forwarded_for: Whether to honour X-Forwarded-For (set when the
            service runs behind a proxy that rewrites it).

    Returns:
        str: Client identifier, never empty.
    """

    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def _hash_client(client_id: str) -> str:
    """Hash the client identifier for logging without exposing addresses."""
    return hashlib.sha256(client_id.encode()).hexdigest()[:16]


def _throttle_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        "Retry-After": str(result.retry_after_seconds or 0),
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at),
    }


async def rate_limit_middleware(request: Request, call_next) -> Response:
    """Admit or reject the request before any route logic runs.

    Rejected requests get ``429 {"error": "Rate limit exceeded"}`` and, when
    enabled, ``Retry-After`` and ``X-RateLimit-*`` headers.
    """

    cfg = settings.app
    if not cfg.rate_limit_enabled:
        return await call_next(request)

    limiter: AbstractRateLimiter = request.app.state.rate_limiter
    client_id = client_identifier(request, trust_forwarded_for=cfg.trust_forwarded_for)
    result = limiter.consume(client_id)

    if result.allowed:
        logger.debug(
            "rate_limit.allowed",
            extra={
                "client_hash": _hash_client(client_id),
                "limit": result.limit,
                "remaining": result.remaining,
            },
        )
        return await call_next(request)

    logger.warning(
        "rate_limit.exceeded",
        extra={
            "client_hash": _hash_client(client_id),
            "path": request.url.path,
            "limit": result.limit,
            "window_ms": cfg.rate_limit_window_ms,
            "retry_after_s": result.retry_after_seconds,
        },
    )

    exc = RateLimitAppError(
        code="rate_limit_exceeded",
        message=RATE_LIMIT_MESSAGE,
        details={"limit": result.limit, "retry_after": result.retry_after_seconds or 0},
    )
    headers = _throttle_headers(result) if cfg.rate_limit_include_headers else None
    return JSONResponse(
        status_code=status_code_for(exc),
        content=error_body(exc.code, exc.message),
        headers=headers,
    )
