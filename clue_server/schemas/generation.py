"""Pydantic schemas for the generation endpoints.

Request models use the camelCase field names of the game client
(``animalName``, ``isEnglish``) as aliases.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr

CLUE_COUNT = 5
MIN_FACTS = 3
MAX_FACTS = 5


class Language(str, Enum):
    """Output language of clues and facts. Swedish is the game's default."""

    SWEDISH = "Swedish"
    ENGLISH = "English"

    @classmethod
    def from_flag(cls, is_english: bool | None) -> "Language":
        return cls.ENGLISH if is_english else cls.SWEDISH


class ChatRequest(BaseModel):
    """Payload of ``POST /chat``; messages are forwarded to the provider as-is."""

    messages: list[dict[str, Any]] = Field(
        ...,
        description="Ordered chat messages, e.g. {'role': 'user', 'content': '...'}",
    )


class GenerationRequest(BaseModel):
    """Validated input of ``POST /clues`` and ``POST /facts``."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    animal_name: StrictStr = Field(
        ...,
        alias="animalName",
        min_length=1,
        description="Common (Swedish) name of the animal",
    )
    scientific_name: StrictStr | None = Field(
        None,
        alias="scientificName",
        description="Latin name, used for disambiguation and in the cache key",
    )
    description: StrictStr | None = Field(
        None,
        description="Free-text description passed to the model as context",
    )
    is_english: bool | None = Field(
        None,
        alias="isEnglish",
        description="True for English output, otherwise Swedish",
    )

    @property
    def language(self) -> Language:
        return Language.from_flag(self.is_english)


class ChatResponse(BaseModel):
    text: str


class CluesResponse(BaseModel):
    clues: list[str] = Field(
        ...,
        description="Exactly five clues ordered from hardest to easiest; never names the animal.",
    )


class FactsResponse(BaseModel):
    facts: list[str] = Field(
        ...,
        description="Three to five facts about the animal.",
    )


class HealthResponse(BaseModel):
    status: str = "OK"


class CluesPayload(BaseModel):
    """Shape the model is instructed to return for clues."""

    clues: list[StrictStr] = Field(..., min_length=CLUE_COUNT, max_length=CLUE_COUNT)


class FactsPayload(BaseModel):
    """Shape the model is instructed to return for facts."""

    facts: list[StrictStr] = Field(..., min_length=MIN_FACTS, max_length=MAX_FACTS)
