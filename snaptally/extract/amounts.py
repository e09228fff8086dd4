"""Price and weight extraction as ordered, individually testable rule tiers.

Both extractors walk their rule tuple in priority order and stop at the
first rule that yields an acceptable value.

Weights are normalized per unit family but returned without a unit:
pounds become ounce-equivalents (x16), kilograms become grams (x1000) and
liters become milliliters (x1000). A 500 g tag and a 16 oz tag therefore
both come back as plain numbers that are not comparable.

All patterns are compiled with ``re.ASCII``: fullwidth digits are not
amounts, and an accented letter does not join the word before a number.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MAX_PRICE = 10000.0


@dataclass(frozen=True)
class PriceRule:
    """One price tier: every occurrence is collected, the last one wins."""

    name: str
    pattern: re.Pattern[str]

    def parse(self, text: str) -> list[float]:
        """Return the numeric value of every match, in text order."""
        values: list[float] = []
        for match in self.pattern.finditer(text):
            try:
                values.append(float(match.group(1)))
            except ValueError:
                values.append(math.nan)
        return values

    @staticmethod
    def validate(value: float) -> bool:
        return math.isfinite(value) and 0 < value < MAX_PRICE


PRICE_RULES: tuple[PriceRule, ...] = (
    PriceRule("labeled", re.compile(r"(?:price|total|cost)\s*:?\s*\$?(\d+\.?\d{0,2})", re.IGNORECASE | re.ASCII)),
    PriceRule("dollars_cents", re.compile(r"\$\s*(\d+\.\d{2})", re.ASCII)),
    PriceRule("dollars", re.compile(r"\$\s*(\d+)", re.ASCII)),
    PriceRule("suffixed", re.compile(r"(\d+\.\d{2})\s*(?:dollars?|usd|each|ea)", re.IGNORECASE | re.ASCII)),
    PriceRule("bare_decimal", re.compile(r"\b(\d+\.\d{2})\b", re.ASCII)),
)


@dataclass(frozen=True)
class WeightRule:
    """One unit pattern; only its first occurrence in the text is used."""

    unit: str
    pattern: re.Pattern[str]
    factor: float = 1.0

    def parse(self, text: str) -> float | None:
        """Return the raw number of the first match, or None if no match."""
        match = self.pattern.search(text)
        if match is None:
            return None
        try:
            return float(match.group(1))
        except ValueError:
            return math.nan

    @staticmethod
    def validate(value: float) -> bool:
        return math.isfinite(value) and value > 0


WEIGHT_RULES: tuple[WeightRule, ...] = (
    WeightRule("oz", re.compile(r"(\d+\.?\d*)\s*(oz|ounces?)", re.IGNORECASE | re.ASCII)),
    WeightRule("lb", re.compile(r"(\d+\.?\d*)\s*(lb|lbs|pounds?)", re.IGNORECASE | re.ASCII), 16.0),
    WeightRule("g", re.compile(r"(\d+\.?\d*)\s*(g|grams?)", re.IGNORECASE | re.ASCII)),
    WeightRule("kg", re.compile(r"(\d+\.?\d*)\s*(kg|kilograms?)", re.IGNORECASE | re.ASCII), 1000.0),
    WeightRule("ml", re.compile(r"(\d+\.?\d*)\s*(ml|milliliters?)", re.IGNORECASE | re.ASCII)),
    WeightRule("l", re.compile(r"(\d+\.?\d*)\s*(l|liters?)", re.IGNORECASE | re.ASCII), 1000.0),
)


def _select_price_tier(text: str) -> tuple[PriceRule | None, list[float]]:
    for rule in PRICE_RULES:
        values = rule.parse(text)
        if values and rule.validate(values[-1]):
            return rule, values
    return None, []


def extract_price(text: str) -> float:
    """Return the most plausible price in *text*, or 0 if none qualifies.

    For the first tier with matches, the last match is taken (tags tend to
    put the final price last). An out-of-range value sends the search on
    to the next tier.
    """
    rule, values = _select_price_tier(text)
    if rule is None:
        return 0.0
    logger.debug("Price %.2f matched by rule %r", values[-1], rule.name)
    return values[-1]


def find_all_prices(text: str) -> list[float]:
    """Return every acceptable amount of the tier that decided the price."""
    rule, values = _select_price_tier(text)
    if rule is None:
        return []
    return [v for v in values if rule.validate(v)]


def extract_weight(text: str) -> float:
    """Return the first recognized quantity normalized within its unit family.

    Units are tried in order oz, lb, g, kg, ml, l. Returns 0 when no unit
    pattern yields a positive number.
    """
    for rule in WEIGHT_RULES:
        value = rule.parse(text)
        if value is None or not rule.validate(value):
            continue
        logger.debug("Weight %s %s matched", value, rule.unit)
        return value * rule.factor
    return 0.0
