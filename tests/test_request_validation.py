"""Unit tests for request payload validation."""

import pytest

from clue_server.core.errors import ValidationAppError
from clue_server.core.request_validation import (
    validate_chat_payload,
    validate_generation_payload,
)
from clue_server.schemas.generation import Language


class TestChatPayload:
    def test_accepts_list_of_messages(self) -> None:
        messages = [{"role": "user", "content": "Hej"}]

        result = validate_chat_payload({"messages": messages})

        assert result.messages == messages

    def test_accepts_empty_list(self) -> None:
        assert validate_chat_payload({"messages": []}).messages == []

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            "messages",
            {},
            {"messages": None},
            {"messages": "hello"},
            {"messages": {"role": "user"}},
            {"messages": ["hello"]},
        ],
    )
    def test_rejects_anything_else(self, payload) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            validate_chat_payload(payload)

        assert exc_info.value.code == "messages_required"
        assert exc_info.value.message == "messages required"


class TestGenerationPayload:
    def test_minimal_payload_uses_defaults(self) -> None:
        result = validate_generation_payload({"animalName": "lo"})

        assert result.animal_name == "lo"
        assert result.scientific_name is None
        assert result.description is None
        assert result.language is Language.SWEDISH

    def test_full_payload(self) -> None:
        result = validate_generation_payload(
            {
                "animalName": "iller",
                "scientificName": "Mustela putorius",
                "description": "A small predator",
                "isEnglish": True,
            }
        )

        assert result.scientific_name == "Mustela putorius"
        assert result.description == "A small predator"
        assert result.language is Language.ENGLISH

    def test_null_optionals_are_defaults(self) -> None:
        result = validate_generation_payload(
            {"animalName": "lo", "scientificName": None, "isEnglish": None}
        )

        assert result.language is Language.SWEDISH

    def test_unknown_fields_are_ignored(self) -> None:
        result = validate_generation_payload({"animalName": "lo", "extra": 1})

        assert result.animal_name == "lo"

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            {},
            {"animalName": ""},
            {"animalName": "   "},
            {"animalName": None},
            {"animalName": 42},
            {"animalName": ["lo"]},
            {"scientificName": "Lynx lynx"},
        ],
    )
    def test_missing_or_empty_name(self, payload) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            validate_generation_payload(payload)

        assert exc_info.value.code == "animal_name_required"
        assert exc_info.value.message == "animalName required"

    def test_wrongly_typed_optional_field(self) -> None:
        with pytest.raises(ValidationAppError) as exc_info:
            validate_generation_payload({"animalName": "lo", "scientificName": 7})

        assert exc_info.value.code == "invalid_payload"
        assert "scientificName" in exc_info.value.details["field"]
