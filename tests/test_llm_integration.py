"""Integration tests for LLM adapter layer."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from openai import APIConnectionError

from clue_server.adapters.llm import OpenAIClient, create_llm_client
from clue_server.core.config import LLMSettings
from clue_server.core.errors import ProviderCallError, ValidationAppError

MESSAGES = [{"role": "user", "content": "Hej"}]


def _response(content: str | None) -> MagicMock:
    mock_response = MagicMock()
    mock_response.choices = [MagicMock(message=MagicMock(content=content))]
    return mock_response


class TestOpenAIClientIntegration:
    """Test OpenAI client integration with mocked API calls."""

    @pytest.mark.asyncio
    async def test_complete_returns_first_choice_text(self) -> None:
        client = OpenAIClient(api_key="test-key-123", model="gpt-4o-mini")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_response("Hello!"),
        ) as mock_create:
            result = await client.complete(MESSAGES, temperature=0.7)

        assert result == "Hello!"
        call_kwargs = mock_create.call_args.kwargs
        assert call_kwargs["model"] == "gpt-4o-mini"
        assert call_kwargs["messages"] == MESSAGES
        assert call_kwargs["temperature"] == 0.7
        assert "response_format" not in call_kwargs
        assert "max_tokens" not in call_kwargs

    @pytest.mark.asyncio
    async def test_json_mode_and_max_tokens(self) -> None:
        """JSON mode sets response_format; max_tokens is forwarded."""
        client = OpenAIClient(api_key="test-key", model="gpt-4o-mini")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_response('{"clues": []}'),
        ) as mock_create:
            await client.complete(MESSAGES, temperature=0.5, json_mode=True, max_tokens=400)

            call_kwargs = mock_create.call_args.kwargs
            assert call_kwargs["response_format"] == {"type": "json_object"}
            assert call_kwargs["max_tokens"] == 400

    @pytest.mark.asyncio
    async def test_null_content_becomes_empty_string(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-4o-mini")

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=_response(None),
        ):
            assert await client.complete(MESSAGES, temperature=0.7) == ""

    @pytest.mark.asyncio
    async def test_sdk_error_is_wrapped(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-4o-mini")
        error = APIConnectionError(
            request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions")
        )

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            side_effect=error,
        ):
            with pytest.raises(ProviderCallError) as exc_info:
                await client.complete(MESSAGES, temperature=0.7)

        assert exc_info.value.code == "provider_call_failed"
        assert exc_info.value.details["model"] == "gpt-4o-mini"
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_empty_choices_raise(self) -> None:
        client = OpenAIClient(api_key="test-key", model="gpt-4o-mini")
        mock_response = MagicMock()
        mock_response.choices = []

        with patch.object(
            client.client.chat.completions,
            "create",
            new_callable=AsyncMock,
            return_value=mock_response,
        ):
            with pytest.raises(ProviderCallError) as exc_info:
                await client.complete(MESSAGES, temperature=0.7)

        assert exc_info.value.code == "provider_empty_response"


class TestLLMFactory:
    """Test LLM client factory pattern."""

    def test_create_llm_client_with_settings(self) -> None:
        client = create_llm_client(
            LLMSettings(
                provider="openai",
                api_key="test-key",
                model="gpt-4o-mini",
                base_url=None,
                timeout_seconds=30.0,
            )
        )

        assert isinstance(client, OpenAIClient)
        assert client.model == "gpt-4o-mini"

    def test_create_llm_client_from_global_settings(self) -> None:
        client = create_llm_client()

        assert isinstance(client, OpenAIClient)

    def test_provider_name_is_case_insensitive(self) -> None:
        client = create_llm_client(LLMSettings(provider="OpenAI", api_key="test-key"))

        assert isinstance(client, OpenAIClient)

    def test_create_llm_client_missing_api_key_raises_error(self) -> None:
        cfg = LLMSettings(provider="openai", api_key="test-key")
        cfg.api_key = None

        with pytest.raises(ValidationAppError, match="requires LLM_API_KEY") as exc:
            create_llm_client(cfg)
        assert exc.value.code == "llm_missing_api_key"

    def test_create_llm_client_unknown_provider_raises_error(self) -> None:
        with pytest.raises(ValidationAppError, match="Unknown LLM provider") as exc:
            create_llm_client(LLMSettings(provider="unknown-provider", api_key="test-key"))
        assert exc.value.code == "llm_unknown_provider"
