import re
from collections.abc import Iterable

# Phrases that give the name away even when the name itself is avoided
NAMING_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\bit(?: i|['’])s called\b",
        r"\bits name is\b",
        r"\bin swedish it(?: i|['’])s\b",
        r"\bis known as\b",
        r"\b(?:det|den) kallas\b",
        r"\bdess namn är\b",
        r"\bpå svenska heter\b",
    )
]

# Names shorter than this only count as whole words ("lo" must not match "long")
MIN_SUBSTRING_NAME_LENGTH = 4


def normalize_name(value: str | None) -> str:
    """Collapse whitespace and casefold a name.

    Args:
        value: Raw name as sent by the client, or None.

    Returns:
        str: Normalized name; empty string for missing values.
    """
    if not value:
        return ""
    return " ".join(value.split()).casefold()


def _name_terms(names: Iterable[str | None]) -> list[str]:
    terms: list[str] = []
    for name in names:
        normalized = normalize_name(name)
        if not normalized:
            continue
        terms.append(normalized)
        # Genus of a binomial name ("mustela putorius" -> "mustela")
        first, _, rest = normalized.partition(" ")
        if rest and len(first) >= MIN_SUBSTRING_NAME_LENGTH:
            terms.append(first)
    return list(dict.fromkeys(terms))


def _mentions(text: str, term: str) -> bool:
    if len(term) >= MIN_SUBSTRING_NAME_LENGTH:
        return term in text
    return re.search(rf"(?<!\w){re.escape(term)}(?!\w)", text) is not None


def find_name_leaks(texts: Iterable[str], names: Iterable[str | None]) -> list[int]:
    """Return indexes of texts that mention a name or use a naming phrase.

    Args:
        texts: Generated clues.
        names: Animal name, scientific name, and any other forms to hide.

    Returns:
        list[int]: Indexes of offending texts, in order.
    """
    terms = _name_terms(names)
    leaks: list[int] = []
    for index, text in enumerate(texts):
        folded = normalize_name(text)
        if any(_mentions(folded, term) for term in terms) or any(
            p.search(text) for p in NAMING_PATTERNS
        ):
            leaks.append(index)
    return leaks
