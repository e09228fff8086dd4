"""Heuristic confidence scoring of an extracted item."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from ..models import DEFAULT_BRAND, DEFAULT_NAME, ExtractedItem

MAX_SCORE = 4.0
PRICE_CEILING = 1000.0
WEIGHT_CEILING = 10000.0

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.5


def _field(item: ExtractedItem | Mapping[str, Any] | None, key: str) -> Any:
    if item is None:
        return None
    if isinstance(item, Mapping):
        return item.get(key)
    return getattr(item, key, None)


def _text_points(value: Any, sentinel: str, min_length: int) -> float:
    if not isinstance(value, str) or not value or value == sentinel:
        return 0.0
    return 1.0 if len(value) > min_length else 0.5


def _amount_points(value: Any, ceiling: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    if math.isnan(value) or value <= 0:
        return 0.0
    return 1.0 if value < ceiling else 0.5


def score(item: ExtractedItem | Mapping[str, Any] | None) -> float:
    """Score how trustworthy an extraction looks, from 0.0 to 1.0.

    Name, brand, price and weight each contribute up to one point. A
    default sentinel value, an empty field or a zero amount contributes
    nothing; a short text or an implausibly large amount contributes half.
    Accepts an ``ExtractedItem`` or a mapping holding any subset of its
    fields.
    """
    total = (
        _text_points(_field(item, "name"), DEFAULT_NAME, 5)
        + _text_points(_field(item, "brand"), DEFAULT_BRAND, 2)
        + _amount_points(_field(item, "price"), PRICE_CEILING)
        + _amount_points(_field(item, "weight"), WEIGHT_CEILING)
    )
    return total / MAX_SCORE


def confidence_band(
    value: float,
    high: float = HIGH_CONFIDENCE,
    medium: float = MEDIUM_CONFIDENCE,
) -> str:
    """Bucket a score into "high", "medium" or "low"."""
    if value >= high:
        return "high"
    if value >= medium:
        return "medium"
    return "low"
