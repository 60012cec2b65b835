"""Prompt construction for clue and fact generation.

Both builders return the full message list (system + user) for the chat
completion call. Prompts are deterministic for a given request so cached
clues always correspond to the current prompt version.
"""

from clue_server.schemas.generation import (
    CLUE_COUNT,
    MAX_FACTS,
    MIN_FACTS,
    GenerationRequest,
)

# Bump when prompt wording changes; part of the clue cache key.
PROMPT_VERSION = "v1"

UNKNOWN_SCIENTIFIC_NAME = "Unknown"
NO_DESCRIPTION = "No description"


def _subject_lines(request: GenerationRequest, name_label: str) -> str:
    return "\n".join(
        [
            f"- {name_label}: {request.animal_name.strip()}",
            f"- Scientific Name: {request.scientific_name or UNKNOWN_SCIENTIFIC_NAME}",
            f"- Description: {request.description or NO_DESCRIPTION}",
        ]
    )


def build_clue_messages(request: GenerationRequest) -> list[dict[str, str]]:
    """Messages asking for five name-free clues, hardest first."""

    language = request.language.value
    system = "\n".join(
        [
            f"You write {CLUE_COUNT} clues for a Swedish wildlife guessing game.",
            "Rules:",
            '- Output STRICT JSON matching this schema: {"clues": ["string", "string", "string", "string", "string"]}',
            f"- Clues 1→{CLUE_COUNT} go from hardest to easiest",
            f"- Language: {language}",
            "- NEVER reveal the animal name directly in any clue",
            '- NEVER say "it is called", "its name is", "in Swedish it is", etc.',
            "- NEVER mention the Swedish name, common name, or scientific name",
            "- Focus on physical characteristics, habitat, behavior, diet, size, etc.",
            f"- Clue {CLUE_COUNT} can be more specific but still avoid the exact name",
            "- Make clues educational and interesting about the animal",
        ]
    )

    user = f"""
Create {CLUE_COUNT} clues for this animal (do NOT mention its name):
{_subject_lines(request, "Swedish Name")}

Write clues about its appearance, habitat, behavior, diet, size, etc.
Make them educational and progressively easier.

Good examples:
- "This animal has a thick winter coat"
- "It lives in forests and hunts at night"
- "It has sharp claws and excellent hearing"

Bad examples (NEVER do this):
- "In Swedish it's called iller"
- "Its name is..."
- "It is known as..."

Return ONLY a JSON object with a "clues" array of {CLUE_COUNT} strings.
""".strip()

    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]


def build_fact_messages(request: GenerationRequest) -> list[dict[str, str]]:
    """Messages asking for 3-5 verifiable facts; naming the animal is fine."""

    language = request.language.value
    system = "\n".join(
        [
            f"You generate {MIN_FACTS}-{MAX_FACTS} interesting and verifiable facts about a specific animal "
            "for a wildlife guessing game result screen.",
            "Rules:",
            '- Output STRICT JSON matching this schema: {"facts": ["string", "string", "string", ...]}',
            f"- Language: {language}",
            "- Facts should be interesting, concise, and educational.",
            "- You CAN and SHOULD mention the animal's name.",
            "- Focus on unique characteristics, behavior, habitat, conservation status, or surprising details.",
            "- Avoid generic statements.",
        ]
    )

    user = f"""
Generate {MIN_FACTS}-{MAX_FACTS} interesting facts about this animal:
{_subject_lines(request, "Name")}

Return ONLY a JSON object with a "facts" array of {MIN_FACTS}-{MAX_FACTS} strings.
""".strip()

    return [
        {"role": "system", "content": system},
        {"role": "user", "content": user},
    ]
