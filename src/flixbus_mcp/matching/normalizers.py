import re
import unicodedata
from functools import lru_cache

# German station-name abbreviations (lowercase, matched on word boundaries)
ABBREVIATIONS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\bhbf\b\.?"), "hauptbahnhof"),
    (re.compile(r"\bbhf\b\.?"), "bahnhof"),
    (re.compile(r"\bzob\b"), "zentraler omnibusbahnhof"),
    (re.compile(r"str\.(?=\s|$)"), "strasse"),
    (re.compile(r"\bst\.\s*"), "sankt "),
    (re.compile(r"\bflugh\.?(?=\s|$)"), "flughafen"),
]

# Tokens too common to tell stations apart
GENERIC_TOKENS = frozenset({
    "hauptbahnhof", "bahnhof", "zentraler", "omnibusbahnhof", "busbahnhof",
    "station", "bus", "stop", "haltestelle", "central", "centre", "center",
})

TOKEN_SPLIT = re.compile(r"[\s,/()\-]+")


@lru_cache(maxsize=4096)
def remove_accents(text: str) -> str:
    """Remove accents from text.

    Example: "München" -> "Munchen", "Straße" -> "Strasse"
    """
    text = text.replace("ß", "ss").replace("ẞ", "SS")
    normalized = unicodedata.normalize("NFD", text)
    return "".join(c for c in normalized if unicodedata.category(c) != "Mn")


@lru_cache(maxsize=4096)
def normalize_text(text: str) -> str:
    """Normalize a station name or query for fuzzy matching.

    - Converts to lowercase
    - Removes accents
    - Expands abbreviations
    - Normalizes whitespace

    Example: "München Hbf" -> "munchen hauptbahnhof"
    Example: "Köln ZOB" -> "koln zentraler omnibusbahnhof"
    """
    result = remove_accents(text.lower().strip())

    for pattern, expanded in ABBREVIATIONS:
        result = pattern.sub(expanded, result)

    return " ".join(result.split())


def get_meaningful_tokens(text: str) -> set[str]:
    """Split normalized text into tokens, dropping generic station words.

    Example: "berlin zentraler omnibusbahnhof" -> {"berlin"}
    """
    return {t for t in TOKEN_SPLIT.split(text) if t and t not in GENERIC_TOKENS}


def split_aliases(aliases: str) -> tuple[str, ...]:
    """Split the upstream comma-separated alias string into normalized aliases."""
    return tuple(normalize_text(a) for a in aliases.split(",") if a.strip())
