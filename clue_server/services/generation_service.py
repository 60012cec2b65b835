"""Generation service orchestrating cache lookups, prompts and LLM calls.

Three operations share one shape: build messages, call the completion
provider, parse and check the reply, return it.

- chat: messages forwarded verbatim, raw reply text returned, never cached
- clues: cached per (animal name, scientific name, language)
- facts: generated fresh on every call

Provider failures and malformed replies surface as ``LLMAppError`` subclasses
carrying a generic client-facing message; the underlying cause is logged here.
Nothing is retried and nothing is cached unless fully validated.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from clue_server.adapters.llm.base import AbstractLLMClient
from clue_server.core.errors import LLMAppError, ResponseShapeError
from clue_server.core.logging import preview
from clue_server.schemas.generation import (
    ChatRequest,
    CluesPayload,
    FactsPayload,
    GenerationRequest,
)
from clue_server.services.prompts import (
    PROMPT_VERSION,
    build_clue_messages,
    build_fact_messages,
)
from clue_server.utils.simple_cache import DEFAULT_TTL_MS, SimpleTTLCache, build_cache_key
from clue_server.utils.text_normalizer import find_name_leaks

logger = logging.getLogger(__name__)

CHAT_TEMPERATURE = 0.7
CLUES_TEMPERATURE = 0.5
CLUES_MAX_TOKENS = 400
FACTS_TEMPERATURE = 0.6
FACTS_MAX_TOKENS = 300

CHAT_FAILED = "Completion provider call failed"
CLUES_FAILED = "Failed to generate clues"
FACTS_FAILED = "Failed to generate facts"


def parse_json_payload(content: str, model: type[BaseModel]) -> BaseModel:
    """Parse provider text into ``model``.

    Args:
        content: Raw reply text, expected to be a JSON object.
        model: Pydantic model describing the expected shape.

    Returns:
        Validated model instance.

    Raises:
        ResponseShapeError: If the text is not JSON or does not match the model.
    """
    try:
        data: Any = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ResponseShapeError(
            code="provider_invalid_json",
            message="Completion provider returned invalid JSON",
            details={"hint": str(exc)},
        ) from exc

    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ResponseShapeError(
            code="unexpected_shape",
            message="Completion provider returned an unexpected JSON shape",
            details={"hint": f"{exc.error_count()} validation error(s) for {model.__name__}"},
        ) from exc


class GenerationService:
    """Orchestrates chat, clue and fact generation.

    Attributes:
        llm: Completion provider client.
        cache: TTL cache for clue sets.
        cache_ttl_ms: TTL applied to cached clue sets.
        leak_check: Reject clue sets that mention the animal name.
    """

    def __init__(
        self,
        llm: AbstractLLMClient,
        cache: SimpleTTLCache[list[str]],
        *,
        cache_ttl_ms: int = DEFAULT_TTL_MS,
        leak_check: bool = True,
    ) -> None:
        self.llm = llm
        self.cache = cache
        self.cache_ttl_ms = cache_ttl_ms
        self.leak_check = leak_check

    def _log_failure(self, endpoint: str, exc: LLMAppError, subject: str) -> None:
        logger.error(
            "generation.failed",
            extra={
                "endpoint": endpoint,
                "subject": preview(subject),
                "error_code": exc.code,
                "error_message": exc.message,
                "cause": (exc.details or {}).get("hint"),
            },
        )

    def _generic(self, exc: LLMAppError, message: str) -> LLMAppError:
        """Copy of ``exc`` with provider detail stripped and a generic message."""
        return type(exc)(code=exc.code, message=message)

    async def chat(self, request: ChatRequest) -> str:
        """Forward messages verbatim and return the reply text."""
        try:
            return await self.llm.complete(request.messages, temperature=CHAT_TEMPERATURE)
        except LLMAppError as exc:
            self._log_failure("chat", exc, f"{len(request.messages)} message(s)")
            raise self._generic(exc, CHAT_FAILED) from exc

    def clue_cache_key(self, request: GenerationRequest) -> str:
        return build_cache_key(
            request.animal_name,
            request.scientific_name,
            request.language.value,
            namespace="clues",
            version=PROMPT_VERSION,
        )

    def _check_leaks(self, request: GenerationRequest, clues: list[str]) -> None:
        leaks = find_name_leaks(clues, [request.animal_name, request.scientific_name])
        if leaks:
            raise ResponseShapeError(
                code="clue_name_leak",
                message="Generated clues reveal the animal name",
                details={"hint": f"clue indexes {leaks}"},
            )

    async def clues(self, request: GenerationRequest) -> list[str]:
        """Return five clues, from the cache when possible.

        Raises:
            ProviderCallError: If the completion call fails.
            ResponseShapeError: If the reply is not ``{"clues": [5 strings]}``
                or a clue mentions the animal.
        """
        cache_key = self.clue_cache_key(request)
        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("generation.cache_hit", extra={"endpoint": "clues"})
            return list(cached)

        try:
            content = await self.llm.complete(
                build_clue_messages(request),
                temperature=CLUES_TEMPERATURE,
                json_mode=True,
                max_tokens=CLUES_MAX_TOKENS,
            )
            clues = list(parse_json_payload(content, CluesPayload).clues)
            if self.leak_check:
                self._check_leaks(request, clues)
        except LLMAppError as exc:
            self._log_failure("clues", exc, request.animal_name)
            raise self._generic(exc, CLUES_FAILED) from exc

        self.cache.set(cache_key, clues, ttl_ms=self.cache_ttl_ms)
        logger.info(
            "generation.completed",
            extra={"endpoint": "clues", "count": len(clues), "cached": True},
        )
        return list(clues)

    async def facts(self, request: GenerationRequest) -> list[str]:
        """Return 3-5 facts; never cached.

        Raises:
            ProviderCallError: If the completion call fails.
            ResponseShapeError: If the reply is not ``{"facts": [3-5 strings]}``.
        """
        try:
            content = await self.llm.complete(
                build_fact_messages(request),
                temperature=FACTS_TEMPERATURE,
                json_mode=True,
                max_tokens=FACTS_MAX_TOKENS,
            )
            facts = list(parse_json_payload(content, FactsPayload).facts)
        except LLMAppError as exc:
            self._log_failure("facts", exc, request.animal_name)
            raise self._generic(exc, FACTS_FAILED) from exc

        logger.info(
            "generation.completed",
            extra={"endpoint": "facts", "count": len(facts), "cached": False},
        )
        return facts
