"""HTTP middleware for request correlation and access logging.

Every request gets a correlation id (taken from the incoming header or a new
UUID) stored in a context variable for the logging filters, echoed back in
the response headers together with the handling duration.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from clue_server.core.config import settings
from clue_server.core.exception_handlers import general_exception_handler
from clue_server.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)


async def request_id_middleware(request: Request, call_next) -> Response:
    """Attach ``X-Request-ID`` and ``X-Request-Duration-ms`` to every response.

    The header name is configurable through ``LOG_REQUEST_ID_HEADER``. The id
    is cleared from the context once the response has been produced so it
    cannot leak into unrelated log lines.
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        try:
            response: Response = await call_next(request)
        except Exception as exc:
            # Rendered here so the 500 still carries the request id and CORS headers
            response = await general_exception_handler(request, exc)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "request.completed",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
