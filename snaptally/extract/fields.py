"""Product name and brand extraction from cleaned price tag text."""

from __future__ import annotations

import logging
import re

from ..models import DEFAULT_BRAND, DEFAULT_NAME

logger = logging.getLogger(__name__)

# Label-prefixed numeric codes such as "barcode: 12345" or "sku 998"
_NOISE_CODE = re.compile(r"\b(barcode|sku|item|product|code)\s*:?\s*\d+", re.IGNORECASE | re.ASCII)
_SEGMENT_SEPARATORS = re.compile(r"[,;|]", re.ASCII)
_PRICE_ONLY = re.compile(r"\$?\d+\.?\d*", re.ASCII)
_DIGITS_ONLY = re.compile(r"\d+", re.ASCII)
_WEIGHT_UNIT = re.compile(r"\d+\s*(oz|lb|lbs|g|kg|ml|l)\b", re.IGNORECASE | re.ASCII)

# Tried in order; only the first match of each pattern is considered.
BRAND_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"brand\s*:?\s*([a-z\s&'-]+)", re.IGNORECASE | re.ASCII),
    re.compile(r"by\s+([a-z\s&'-]+)", re.IGNORECASE | re.ASCII),
    re.compile(r"\b([A-Z][a-z]+(?:\s+[A-Z][a-z]+)*)\b", re.ASCII),
)

BRAND_KEYWORDS: tuple[str, ...] = (
    "organic",
    "fresh",
    "natural",
    "premium",
    "select",
    "choice",
)

COMMON_WORDS: frozenset[str] = frozenset({
    "the", "and", "for", "with", "from", "this", "that", "these", "those",
    "item", "product", "price", "total", "cost", "name", "brand", "weight",
    "size", "quantity", "pack", "package", "each", "per", "sale", "new",
})


def is_common_word(word: str) -> bool:
    """Return True if *word* is a filler word that cannot be a brand."""
    return word.lower() in COMMON_WORDS


def _is_name_candidate(segment: str) -> bool:
    if len(segment) < 3:
        return False
    if _PRICE_ONLY.fullmatch(segment) or _DIGITS_ONLY.fullmatch(segment):
        return False
    if _WEIGHT_UNIT.search(segment):
        return False
    return True


def extract_name(text: str) -> str:
    """Pick the first segment that looks like a product name.

    Segments are separated by ``,``, ``;`` or ``|``. Price-only,
    digit-only and weight-bearing segments are skipped so they never
    become the name. When nothing qualifies, the first three words longer
    than two characters are used, then ``"Unknown Product"``.
    """
    stripped = _NOISE_CODE.sub("", text)

    for segment in _SEGMENT_SEPARATORS.split(stripped):
        trimmed = segment.strip()
        if _is_name_candidate(trimmed):
            return trimmed

    words = [w for w in text.split(" ") if len(w) > 2]
    fallback = " ".join(words[:3])
    if not fallback:
        logger.debug("No name candidate in %r", text)
        return DEFAULT_NAME
    return fallback


def extract_brand(text: str) -> str:
    """Pick a brand using labeled, "by ..." and capitalized-word patterns.

    Falls back to well-known marketing keywords, then ``"Generic"``.
    """
    for pattern in BRAND_PATTERNS:
        match = pattern.search(text)
        if match is None:
            continue
        candidate = match.group(1).strip()
        if len(candidate) > 2 and not is_common_word(candidate):
            return candidate

    lowered = text.lower()
    for keyword in BRAND_KEYWORDS:
        if keyword in lowered:
            return keyword.capitalize()

    return DEFAULT_BRAND
