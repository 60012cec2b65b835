from __future__ import annotations

"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers and the
process-local components) so tests can build isolated instances with stubbed
collaborators.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from clue_server.adapters.llm.base import AbstractLLMClient
from clue_server.adapters.llm.factory import create_llm_client
from clue_server.adapters.rate_limit.base import AbstractRateLimiter
from clue_server.api.routes import generation_router, health_router
from clue_server.core.config import settings
from clue_server.core.exception_handlers import setup_exception_handlers
from clue_server.core.logging import configure_logging
from clue_server.core.middleware import request_id_middleware
from clue_server.core.openapi import apply_openapi_customizations
from clue_server.core.rate_limit import build_rate_limiter, rate_limit_middleware
from clue_server.services.generation_service import GenerationService
from clue_server.utils.simple_cache import SimpleTTLCache

logger = logging.getLogger(__name__)


def parse_origins(value: str | None) -> list[str]:
    """Split a comma-separated origin list; empty input yields ``[]``.

    Examples:
        >>> parse_origins("https://a.example, https://b.example")
        ['https://a.example', 'https://b.example']
        >>> parse_origins(None)
        []
    """
    if not value:
        return []
    return [origin.strip() for origin in value.split(",") if origin.strip()]


def _cors_origins() -> list[str]:
    origins = parse_origins(settings.app.cors_origins)
    if not origins:
        logger.warning(
            "cors.allow_all",
            extra={"hint": "Set CORS_ORIGIN (comma-separated) outside development."},
        )
        return ["*"]
    return origins


def create_app(
    *,
    llm: AbstractLLMClient | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    cache: SimpleTTLCache[list[str]] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        llm: Completion provider; built from ``LLM_*`` settings when omitted.
        rate_limiter: Limiter; built from ``APP_RATE_LIMIT_*`` settings when omitted.
        cache: Clue cache; built from ``APP_CACHE_*`` settings when omitted.

    Returns:
        Configured app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="Clue Server",
        description=(
            "Relay between the wildlife guessing game and the completion provider. "
            "Generates name-free clues (cached) and facts about an animal, and offers "
            "a generic chat passthrough. Requests are rate limited per client."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )

    if cache is None:
        cache = SimpleTTLCache(
            ttl_ms=settings.app.cache_ttl_ms,
            max_entries=settings.app.cache_max_entries or None,
        )

    if rate_limiter is None:
        rate_limiter = build_rate_limiter(settings.app)

    app.state.rate_limiter = rate_limiter
    app.state.generation_service = GenerationService(
        llm=llm if llm is not None else create_llm_client(settings.llm),
        cache=cache,
        cache_ttl_ms=settings.app.cache_ttl_ms,
        leak_check=settings.app.clue_leak_check,
    )

    # Middleware: the last one added runs first. Order on the way in is
    # CORS -> request id -> rate limit -> routes.
    app.middleware("http")(rate_limit_middleware)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", settings.log.request_id_header],
        expose_headers=[settings.log.request_id_header, "Retry-After"],
    )

    setup_exception_handlers(app)

    app.include_router(generation_router)
    app.include_router(health_router)

    apply_openapi_customizations(app)

    logger.info(
        "app.created",
        extra={
            "model": settings.llm.model,
            "rate_limit_enabled": settings.app.rate_limit_enabled,
            "rate_limit_requests": settings.app.rate_limit_requests,
            "rate_limit_window_ms": settings.app.rate_limit_window_ms,
            "cache_ttl_ms": settings.app.cache_ttl_ms,
        },
    )
    return app
