"""Single-item and multi-item extraction pipelines."""

from __future__ import annotations

import logging
import re

from ..models import ExtractedItem
from .amounts import extract_price, extract_weight
from .confidence import score
from .fields import extract_brand, extract_name
from .text import clean_text

logger = logging.getLogger(__name__)

# Blank lines or literal ||, -- and ___ separate items in one text block
_ITEM_DELIMITERS = re.compile(r"\n{2,}|\|\||--|___", re.ASCII)


def transform_to_item(ocr_text: str) -> ExtractedItem:
    """Run the cleaner and the four field extractors over one item text."""
    cleaned = clean_text(ocr_text)
    return ExtractedItem(
        name=extract_name(cleaned),
        brand=extract_brand(cleaned),
        price=extract_price(cleaned),
        weight=extract_weight(cleaned),
    )


def extract_item_with_confidence(ocr_text: str) -> tuple[ExtractedItem, float]:
    """Extract one item and score it."""
    item = transform_to_item(ocr_text)
    return item, score(item)


def split_segments(ocr_text: str) -> list[str]:
    """Split raw text into per-item segments, dropping empty ones."""
    return [
        segment
        for segment in _ITEM_DELIMITERS.split(ocr_text or "")
        if segment.strip()
    ]


def split_items(ocr_text: str) -> list[ExtractedItem]:
    """Extract every item of a multi-item text block, in order of appearance."""
    segments = split_segments(ocr_text)
    logger.debug("Split OCR text into %d item segment(s)", len(segments))
    return [transform_to_item(segment) for segment in segments]


def split_items_with_confidence(
    ocr_text: str,
) -> list[tuple[ExtractedItem, float]]:
    """Like ``split_items`` but pairs each item with its score."""
    return [(item, score(item)) for item in split_items(ocr_text)]
