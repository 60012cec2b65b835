"""Generation endpoints: chat passthrough, clues and facts.

Bodies are taken as raw JSON; shape checks live in request_validation so the
error codes stay the ones the game client handles.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from clue_server.core.request_validation import (
    validate_chat_payload,
    validate_generation_payload,
)
from clue_server.schemas.generation import ChatResponse, CluesResponse, FactsResponse
from clue_server.services.generation_service import GenerationService

router = APIRouter(tags=["Generation"])


def get_generation_service(request: Request) -> GenerationService:
    """Return the service installed on the application by the app factory."""
    return request.app.state.generation_service


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: Any = Body(default=None),
    service: GenerationService = Depends(get_generation_service),
) -> ChatResponse:
    """Generic chat passthrough.

    Forwards ``messages`` to the completion provider unchanged and returns the
    reply text. Not cached.
    """
    chat_request = validate_chat_payload(payload)
    text = await service.chat(chat_request)
    return ChatResponse(text=text)


@router.post("/clues", response_model=CluesResponse)
async def clues(
    payload: Any = Body(default=None),
    service: GenerationService = Depends(get_generation_service),
) -> CluesResponse:
    """Generate five clues, hardest first, that never name the animal.

    Identical requests (same animal, scientific name and language) within the
    cache TTL are answered from the cache without calling the provider.
    """
    generation_request = validate_generation_payload(payload)
    return CluesResponse(clues=await service.clues(generation_request))


@router.post("/facts", response_model=FactsResponse)
async def facts(
    payload: Any = Body(default=None),
    service: GenerationService = Depends(get_generation_service),
) -> FactsResponse:
    """Generate three to five facts about the animal. Always fresh."""
    generation_request = validate_generation_payload(payload)
    return FactsResponse(facts=await service.facts(generation_request))
