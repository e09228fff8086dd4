"""Rule-based extraction of structured items from price tag OCR text."""

from .amounts import (
    PRICE_RULES,
    WEIGHT_RULES,
    PriceRule,
    WeightRule,
    extract_price,
    extract_weight,
    find_all_prices,
)
from .confidence import confidence_band, score
from .fields import extract_brand, extract_name
from .pipeline import (
    extract_item_with_confidence,
    split_items,
    split_items_with_confidence,
    split_segments,
    transform_to_item,
)
from .text import clean_text

__all__ = [
    "clean_text",
    "extract_name",
    "extract_brand",
    "extract_price",
    "extract_weight",
    "find_all_prices",
    "PriceRule",
    "WeightRule",
    "PRICE_RULES",
    "WEIGHT_RULES",
    "score",
    "confidence_band",
    "transform_to_item",
    "extract_item_with_confidence",
    "split_items",
    "split_items_with_confidence",
    "split_segments",
]
