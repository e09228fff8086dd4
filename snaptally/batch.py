"""Batch processing of price tag images with summary statistics and export."""

from __future__ import annotations

import csv
import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path

from .analysis import PriceTagAnalyzer
from .extract import confidence_band, extract_item_with_confidence
from .extract.confidence import HIGH_CONFIDENCE, MEDIUM_CONFIDENCE
from .models import join_fragments
from .recognition import TextRecognizer

logger = logging.getLogger(__name__)

_CSV_HEADERS = [
    "Filename",
    "OCR Text",
    "Extracted Name",
    "Extracted Brand",
    "Extracted Price",
    "Extracted Weight",
    "Confidence",
    "Processing Time (ms)",
    "Error",
]


@dataclass
class BatchImageResult:
    """Outcome of processing one image; ``error`` is set on failure."""

    filename: str
    ocr_text: str = ""
    extracted_name: str = ""
    extracted_brand: str = ""
    extracted_price: float = 0.0
    extracted_weight: float = 0.0
    confidence: float | None = None
    processing_time_ms: int = 0
    error: str | None = None


@dataclass
class BatchStats:
    total: int
    successful: int
    failed: int
    average_confidence: float
    average_processing_time_ms: float
    high_confidence: int
    medium_confidence: int
    low_confidence: int


class BatchProcessor:
    """Recognize and extract items from many images, one at a time.

    With an ``analyzer``, the locally recognized text is parsed by the
    remote service instead of the local engine.
    """

    def __init__(
        self,
        recognizer: TextRecognizer,
        analyzer: PriceTagAnalyzer | None = None,
    ) -> None:
        self._recognizer = recognizer
        self._analyzer = analyzer

    async def process(self, image_paths: list[str]) -> list[BatchImageResult]:
        results: list[BatchImageResult] = []
        started = time.monotonic()

        for index, image_path in enumerate(image_paths, start=1):
            filename = Path(image_path).name or f"image_{index}.jpg"
            image_started = time.monotonic()
            try:
                result = await self._process_one(image_path, filename)
            except Exception as e:
                # One bad image must not abort the batch
                logger.error("Error processing image %d (%s): %s", index, filename, e)
                results.append(BatchImageResult(filename=filename, error=str(e) or type(e).__name__))
                continue
            result.processing_time_ms = int((time.monotonic() - image_started) * 1000)
            results.append(result)

        total = time.monotonic() - started
        logger.info(
            "Processed %d image(s) in %.1fs", len(image_paths), total
        )
        return results

    async def _process_one(self, image_path: str, filename: str) -> BatchImageResult:
        ocr_text = join_fragments(await self._recognizer.recognize(image_path))

        if self._analyzer is not None:
            remote = await self._analyzer.analyze_text(ocr_text)
            return BatchImageResult(
                filename=filename,
                ocr_text=ocr_text,
                extracted_name=remote.name,
                extracted_brand=remote.brand,
                extracted_price=remote.price,
                extracted_weight=remote.weight,
            )

        item, confidence = extract_item_with_confidence(ocr_text)
        return BatchImageResult(
            filename=filename,
            ocr_text=ocr_text,
            extracted_name=item.name,
            extracted_brand=item.brand,
            extracted_price=item.price,
            extracted_weight=item.weight,
            confidence=confidence,
        )


def summarize(
    results: list[BatchImageResult],
    high: float = HIGH_CONFIDENCE,
    medium: float = MEDIUM_CONFIDENCE,
) -> BatchStats:
    """Aggregate success counts, averages and confidence bands."""
    successful = [r for r in results if not r.error]
    confidences = [r.confidence or 0.0 for r in successful]
    bands = [confidence_band(c, high=high, medium=medium) for c in confidences]

    return BatchStats(
        total=len(results),
        successful=len(successful),
        failed=len(results) - len(successful),
        average_confidence=sum(confidences) / len(confidences) if confidences else 0.0,
        average_processing_time_ms=(
            sum(r.processing_time_ms for r in results) / len(results) if results else 0.0
        ),
        high_confidence=bands.count("high"),
        medium_confidence=bands.count("medium"),
        low_confidence=bands.count("low"),
    )


def export_csv(results: list[BatchImageResult], path: str | Path) -> Path:
    """Write one CSV row per image."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(_CSV_HEADERS)
        for r in results:
            writer.writerow([
                r.filename,
                r.ocr_text,
                r.extracted_name,
                r.extracted_brand,
                r.extracted_price,
                r.extracted_weight,
                f"{(r.confidence or 0.0) * 100:.1f}",
                r.processing_time_ms,
                r.error or "",
            ])
    return path


def export_json(results: list[BatchImageResult], path: str | Path) -> Path:
    """Write results with an export summary header as JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    stats = summarize(results)
    payload = {
        "exportDate": datetime.now().isoformat(),
        "totalImages": stats.total,
        "successCount": stats.successful,
        "errorCount": stats.failed,
        "averageConfidence": (
            sum(r.confidence or 0.0 for r in results) / len(results) if results else 0.0
        ),
        "results": [asdict(r) for r in results],
    }
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    return path
