"""Tests for sensitive data filtering in logs."""

from __future__ import annotations

import json
import logging
from io import StringIO

import pytest

from clue_server.core.logging import (
    JsonFormatter,
    RequestIdFilter,
    SensitiveDataFilter,
    clear_request_id,
    preview,
    redact,
    set_request_id,
)


@pytest.fixture
def capture():
    """Logger wired like production (filters + JSON formatter) into a buffer."""

    logger = logging.getLogger("test_redaction")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()
    logger.propagate = False

    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.addFilter(RequestIdFilter())
    handler.addFilter(SensitiveDataFilter())
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)

    yield logger, stream

    logger.handlers.clear()
    clear_request_id()


def test_sensitive_filter_redacts_api_keys(capture):
    logger, stream = capture

    logger.info(
        "test_event",
        extra={
            "api_key": "sk-secret-123",
            "x-api-key": "another-secret",
            "safe_field": "visible",
        },
    )

    output = stream.getvalue()
    assert "sk-secret-123" not in output
    assert "another-secret" not in output
    assert "[REDACTED]" in output
    assert "visible" in output


def test_sensitive_filter_redacts_prompts_and_messages(capture):
    """Chat messages and prompt text never reach the logs."""
    logger, stream = capture

    logger.info(
        "chat_event",
        extra={
            "messages": [{"role": "user", "content": "My secret question"}],
            "prompt": "Describe the iller",
            "description": "Small predator with a dark mask",
            "message_count": 1,
        },
    )

    output = stream.getvalue()
    assert "secret question" not in output
    assert "Describe the iller" not in output
    assert "dark mask" not in output
    assert "message_count" in output


def test_sensitive_filter_allows_safe_fields(capture):
    logger, stream = capture

    logger.info(
        "safe_event",
        extra={
            "request_id": "req-123",
            "path": "/clues",
            "status_code": 200,
            "duration_ms": 150.5,
        },
    )

    data = json.loads(stream.getvalue())
    assert data["request_id"] == "req-123"
    assert data["path"] == "/clues"
    assert data["status_code"] == 200
    assert "[REDACTED]" not in stream.getvalue()


def test_sensitive_filter_redacts_nested_dicts(capture):
    logger, stream = capture

    logger.info(
        "nested_event",
        extra={
            "headers": {
                "authorization": "Bearer secret-key",
                "user-agent": "pytest",
            },
        },
    )

    output = stream.getvalue()
    assert "secret-key" not in output
    assert "[REDACTED]" in output
    assert "pytest" in output


def test_request_id_from_context(capture):
    logger, stream = capture
    set_request_id("ctx-42")

    logger.info("ctx_event")

    assert json.loads(stream.getvalue())["request_id"] == "ctx-42"


def test_exception_info_is_formatted(capture):
    logger, stream = capture

    try:
        raise RuntimeError("kaboom")
    except RuntimeError:
        logger.exception("failure_event")

    data = json.loads(stream.getvalue())
    assert data["level"] == "error"
    assert "RuntimeError" in data["exc_info"]


def test_redact_handles_lists():
    value = [{"token": "t"}, {"ok": 1}]

    assert redact(value) == [{"token": "[REDACTED]"}, {"ok": 1}]


def test_preview():
    assert preview("iller") == "iller"
    assert preview("x" * 50, limit=10) == "x" * 10 + "..."
