from __future__ import annotations

from fastapi import APIRouter

from clue_server.schemas.generation import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Liveness check used by load balancers and the game client.

    Returns:
        HealthResponse: ``{"status": "OK"}``.
    """

    return HealthResponse(status="OK")
