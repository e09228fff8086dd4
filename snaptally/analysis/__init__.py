"""Remote price tag analysis backend base class, response parsing and factory."""

from __future__ import annotations

import json
import math
import re
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from ..models import ScanResult

if TYPE_CHECKING:
    from ..config import SnapTallyConfig

REMOTE_DEFAULT_NAME = "Unknown Item"

_LEADING_NUMBER = re.compile(r"\s*([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)")


class PriceTagAnalyzer(ABC):
    """Abstract base for services that extract an item from a price tag."""

    @abstractmethod
    async def analyze_image(self, image_path: str) -> ScanResult:
        """Analyze a price tag image and return the extracted item."""
        ...

    @abstractmethod
    async def analyze_text(self, ocr_text: str) -> ScanResult:
        """Analyze OCR text that was already recognized on the device."""
        ...


def _to_number(value: Any) -> float:
    """Read a number, or the number a string starts with ("3.99 USD" -> 3.99)."""
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match is None:
            return 0.0
        number = float(match.group(1))
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _to_str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(v) for v in value]


def parse_analysis(data: dict[str, Any]) -> ScanResult:
    """Normalize an analysis JSON object into a ``ScanResult``.

    The item name may arrive as ``item`` or ``name``. Missing or
    unparseable numbers become 0.
    """
    ocr_text = data.get("ocrText")
    return ScanResult(
        name=data.get("item") or data.get("name") or REMOTE_DEFAULT_NAME,
        brand=data.get("brand") or "",
        price=_to_number(data.get("price")),
        weight=_to_number(data.get("weight")),
        source="api",
        ocr_text=ocr_text if isinstance(ocr_text, str) else None,
        all_prices=_to_str_list(data.get("allPrices")),
        all_items=_to_str_list(data.get("allItems")),
    )


def parse_json_text(text: str) -> dict[str, Any]:
    """Parse a JSON object from model output, tolerating markdown fences."""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        lines = cleaned.split("\n")
        lines = [l for l in lines[1:] if not l.strip().startswith("```")]
        cleaned = "\n".join(lines)
    data = json.loads(cleaned)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def create_analyzer(config: SnapTallyConfig) -> PriceTagAnalyzer:
    """Create a remote analyzer based on configuration."""
    backend_name = config.analyzer.backend

    match backend_name:
        case "api":
            from .api import ApiPriceTagAnalyzer

            return ApiPriceTagAnalyzer(
                base_url=config.analyzer.api.base_url,
                api_key=config.analyzer.api.api_key,
                timeout=config.analyzer.api.timeout,
            )
        case "claude":
            from .claude import ClaudePriceTagAnalyzer

            return ClaudePriceTagAnalyzer(
                api_key=config.analyzer.claude.api_key,
                model=config.analyzer.claude.model,
            )
        case _:
            raise ValueError(
                f"Unknown analyzer backend: {backend_name!r} "
                f"(choose from: api / claude)"
            )
