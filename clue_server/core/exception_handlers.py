"""Global exception handlers for consistent error responses.

This module provides FastAPI exception handlers that intercept all errors
(domain and unexpected) and return consistent JSON responses with proper
HTTP status codes and traceability.

Design:
- AppError subclasses → appropriate HTTP status (400, 429, 500)
- Malformed request bodies → 400 invalid_json
- Unexpected Exception → generic 500 (safety net)
- All responses include request_id for distributed tracing

Response body shape::

    {"error": "<short message>", "code": "<machine code>", "request_id": "..."}
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from clue_server.core.errors import (
    AppError,
    LLMAppError,
    RateLimitAppError,
    ValidationAppError,
)
from clue_server.core.logging import get_request_id

logger = logging.getLogger(__name__)


def status_code_for(exc: AppError) -> int:
    """Map a domain error to its HTTP status code."""
    if isinstance(exc, RateLimitAppError):
        return 429
    if isinstance(exc, LLMAppError):
        return 500
    return 400


def error_body(code: str, message: str) -> dict:
    """Build the JSON error payload shared by handlers and middleware."""
    return {
        "error": message,
        "code": code,
        "request_id": get_request_id(),
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Handle domain application errors with consistent JSON format.

    Only validation errors echo their ``details`` back to the caller. Server
    side failures keep provider detail in the logs and return the generic
    message carried by the error.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    status_code = status_code_for(exc)

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "request_path": request.url.path,
            "has_details": bool(exc.details),
            "request_id": get_request_id(),
        },
    )

    content = error_body(exc.code, exc.message)
    if isinstance(exc, ValidationAppError) and exc.details:
        content["details"] = exc.details

    return JSONResponse(status_code=status_code, content=content)


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Map FastAPI body parsing failures (e.g. malformed JSON) to 400."""
    logger.warning(
        "request_body_invalid",
        extra={
            "request_path": request.url.path,
            "error_count": len(exc.errors()),
            "request_id": get_request_id(),
        },
    )
    return JSONResponse(
        status_code=400,
        content=error_body("invalid_json", "Request body must be valid JSON"),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors (safety net).

    Logs detailed information for debugging while returning a generic message.
    No stack traces or exception text reach the client.

    Args:
        request: FastAPI request object.
        exc: Exception instance (unexpected).

    Returns:
        JSONResponse with generic error (no implementation details leaked).
    """
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content=error_body(
            "internal_server_error",
            "An unexpected error occurred. Please try again later.",
        ),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
