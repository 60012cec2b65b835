"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import that might build settings.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-4o-mini")
os.environ.setdefault("LLM_API_KEY", "test-key-123")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from clue_server.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from clue_server.core.app_factory import create_app
from clue_server.utils.simple_cache import SimpleTTLCache

from tests.doubles import FakeClock, StubLLM


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def stub_llm() -> StubLLM:
    return StubLLM()


@pytest.fixture
def limiter(clock: FakeClock) -> InMemorySlidingWindowRateLimiter:
    return InMemorySlidingWindowRateLimiter(limit=10, window_ms=60_000, clock=clock)


@pytest.fixture
def cache(clock: FakeClock) -> SimpleTTLCache[list[str]]:
    return SimpleTTLCache(ttl_ms=3_600_000, clock=clock)


@pytest.fixture
def app(stub_llm: StubLLM, limiter, cache) -> FastAPI:
    return create_app(llm=stub_llm, rate_limiter=limiter, cache=cache)


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
