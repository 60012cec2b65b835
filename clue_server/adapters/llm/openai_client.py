"""OpenAI completion provider adapter."""

from collections.abc import Sequence
from typing import Any, Mapping

from openai import AsyncOpenAI, OpenAIError

from clue_server.adapters.llm.base import AbstractLLMClient
from clue_server.core.errors import ProviderCallError


class OpenAIClient(AbstractLLMClient):
    """Client for OpenAI chat completions.

    Uses the official OpenAI Python SDK with async support, so a slow
    completion never blocks other requests on the event loop.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        """Initialize OpenAI async client.

        Args:
            api_key: OpenAI API key for authentication.
            model: Model name (e.g., "gpt-4o-mini").
            base_url: Optional custom base URL for OpenAI API.
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = model

    async def complete(
        self,
        messages: Sequence[Mapping[str, Any]],
        *,
        temperature: float,
        json_mode: bool = False,
        max_tokens: int | None = None,
    ) -> str:
        """Call ``chat.completions.create`` and return the first choice's text.

        Raises:
            ProviderCallError: On any SDK/transport error or an empty choice list.
        """
        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": [dict(m) for m in messages],
            "temperature": temperature,
        }
        if json_mode:
            request_params["response_format"] = {"type": "json_object"}
        if max_tokens is not None:
            request_params["max_tokens"] = max_tokens

        try:
            response = await self.client.chat.completions.create(**request_params)
        except OpenAIError as exc:
            raise ProviderCallError(
                code="provider_call_failed",
                message="Completion provider call failed",
                details={"model": self.model, "hint": f"{type(exc).__name__}: {exc}"},
            ) from exc

        if not response.choices:
            raise ProviderCallError(
                code="provider_empty_response",
                message="Completion provider returned no choices",
                details={"model": self.model},
            )

        return response.choices[0].message.content or ""
