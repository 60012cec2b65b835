"""Tests for clue and fact prompt construction."""

from clue_server.schemas.generation import GenerationRequest
from clue_server.services.prompts import build_clue_messages, build_fact_messages


def _request(**data) -> GenerationRequest:
    return GenerationRequest.model_validate({"animalName": "lo", **data})


def test_clue_messages_default_to_swedish() -> None:
    system, user = build_clue_messages(_request())

    assert system["role"] == "system"
    assert user["role"] == "user"
    assert "Language: Swedish" in system["content"]
    assert '"clues"' in system["content"]
    assert "NEVER reveal the animal name" in system["content"]


def test_clue_messages_fill_unknowns() -> None:
    _, user = build_clue_messages(_request())

    assert "- Swedish Name: lo" in user["content"]
    assert "- Scientific Name: Unknown" in user["content"]
    assert "- Description: No description" in user["content"]


def test_fact_messages_allow_naming_the_animal() -> None:
    system, user = build_fact_messages(
        _request(scientificName="Lynx lynx", description="Nordic wild cat", isEnglish=True)
    )

    assert "Language: English" in system["content"]
    assert "You CAN and SHOULD mention the animal's name." in system["content"]
    assert '"facts"' in system["content"]
    assert "- Name: lo" in user["content"]
    assert "Lynx lynx" in user["content"]
    assert "Nordic wild cat" in user["content"]


def test_messages_are_deterministic() -> None:
    request = _request(scientificName="Lynx lynx")

    assert build_clue_messages(request) == build_clue_messages(request)
    assert build_fact_messages(request) == build_fact_messages(request)
