"""Shape checks for inbound generation payloads.

Routes receive the raw JSON body and pass it through these functions before
any cache or provider work. Failures raise ``ValidationAppError`` which the
global handler turns into a 400 response with a stable ``code``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from clue_server.core.errors import ValidationAppError
from clue_server.schemas.generation import ChatRequest, GenerationRequest


def _messages_required() -> ValidationAppError:
    return ValidationAppError(code="messages_required", message="messages required")


def _animal_name_required() -> ValidationAppError:
    return ValidationAppError(code="animal_name_required", message="animalName required")


def validate_chat_payload(payload: Any) -> ChatRequest:
    """Validate a ``/chat`` body.

    Raises:
        ValidationAppError: ``messages_required`` unless ``messages`` is a list
            of JSON objects.
    """
    if not isinstance(payload, Mapping):
        raise _messages_required()

    messages = payload.get("messages")
    if not isinstance(messages, list) or not all(isinstance(m, Mapping) for m in messages):
        raise _messages_required()

    return ChatRequest(messages=[dict(m) for m in messages])


def validate_generation_payload(payload: Any) -> GenerationRequest:
    """Validate a ``/clues`` or ``/facts`` body.

    The animal name must be a string with at least one non-blank character.
    Optional fields must be of the right type when present.

    Raises:
        ValidationAppError: ``animal_name_required`` for a missing/blank name,
            ``invalid_payload`` for wrongly typed optional fields.
    """
    if not isinstance(payload, Mapping):
        raise _animal_name_required()

    animal_name = payload.get("animalName")
    if not isinstance(animal_name, str) or not animal_name.strip():
        raise _animal_name_required()

    try:
        return GenerationRequest.model_validate(dict(payload))
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise ValidationAppError(
            code="invalid_payload",
            message="Invalid request body",
            details={"field": ", ".join(fields)},
        ) from exc
