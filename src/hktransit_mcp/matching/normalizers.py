import re
import unicodedata
from functools import lru_cache

# Generic tokens that say nothing about which stop is meant
GENERIC_TOKENS = frozenset({
    "station", "mtr", "stop", "bus", "terminus", "exit",
})

# Common Hong Kong street-name abbreviations (lowercase -> expanded)
ABBREVIATIONS: dict[str, str] = {
    "rd": "road",
    "st": "street",
    "ave": "avenue",
    "bldg": "building",
    "ctr": "centre",
    "center": "centre",
    "stn": "station",
    "hk": "hong kong",
}

# Whole-word abbreviations with an optional trailing period
ABBREVIATION_PATTERN = re.compile(
    r"\b(" + "|".join(re.escape(abbrev) for abbrev in ABBREVIATIONS) + r")\b\.?"
)

TOKEN_SEPARATORS = re.compile(r"[\s/\-,()]+")


@lru_cache(maxsize=4096)
def remove_accents(text: str) -> str:
    """Remove accents from text.

    Example: "Café" -> "Cafe"
    """
    # Normalize to NFD (decomposes accented characters)
    normalized = unicodedata.normalize("NFD", text)
    # Remove combining diacritical marks
    return "".join(c for c in normalized if unicodedata.category(c) != "Mn")


@lru_cache(maxsize=4096)
def normalize_text(text: str) -> str:
    """Normalize text for fuzzy matching.

    - Converts to lowercase
    - Removes accents
    - Expands abbreviations
    - Normalizes whitespace

    Chinese names pass through apart from whitespace normalization.

    Example: "Nathan Rd. / Jordan Rd" -> "nathan road / jordan road"
    """
    result = remove_accents(text.lower().strip())
    result = ABBREVIATION_PATTERN.sub(lambda m: ABBREVIATIONS[m.group(1)], result)
    return " ".join(result.split())


def get_meaningful_tokens(text: str) -> set[str]:
    """Extract tokens from normalized text, excluding generic/noise words.

    Example: "Admiralty Station Exit A" -> {"admiralty", "a"}
    """
    normalized = normalize_text(text)
    return {
        token
        for token in TOKEN_SEPARATORS.split(normalized)
        if token and token not in GENERIC_TOKENS
    }
