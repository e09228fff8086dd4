"""Value objects produced by the extraction engine and the OCR service."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Sequence

DEFAULT_NAME = "Unknown Product"
DEFAULT_BRAND = "Generic"

# Raw recognizer output: one string or ordered fragments
RawOCRText = str | Sequence[str]


def join_fragments(raw: RawOCRText | None) -> str:
    """Join recognizer output into a single string.

    A list of fragments is joined with single spaces; the result is stripped.
    """
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw.strip()
    return " ".join(str(part) for part in raw).strip()


@dataclass(frozen=True)
class ExtractedItem:
    """A structured item extracted from one price tag text."""

    name: str = DEFAULT_NAME
    brand: str = DEFAULT_BRAND
    price: float = 0.0
    weight: float = 0.0  # oz-, g- or ml-equivalent, see extract.amounts

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class ScanResult:
    """Result of analyzing a single image, locally or remotely."""

    name: str
    brand: str
    price: float
    weight: float
    source: str  # "local" or "api"
    ocr_text: str | None = None
    confidence: float | None = None
    all_prices: list[str] = field(default_factory=list)
    all_items: list[str] = field(default_factory=list)

    @classmethod
    def from_item(
        cls,
        item: ExtractedItem,
        *,
        source: str,
        ocr_text: str | None = None,
        confidence: float | None = None,
        all_prices: list[str] | None = None,
    ) -> ScanResult:
        return cls(
            name=item.name,
            brand=item.brand,
            price=item.price,
            weight=item.weight,
            source=source,
            ocr_text=ocr_text,
            confidence=confidence,
            all_prices=list(all_prices or []),
        )

    def to_dict(self) -> dict:
        return asdict(self)
