"""Completion provider adapters."""

from clue_server.adapters.llm.base import AbstractLLMClient
from clue_server.adapters.llm.factory import create_llm_client
from clue_server.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "OpenAIClient",
    "create_llm_client",
]
