from __future__ import annotations

from clue_server.api.routes.generation import router as generation_router
from clue_server.api.routes.health import router as health_router

__all__ = ["generation_router", "health_router"]
