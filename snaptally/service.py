"""Image analysis service that honors the persisted OCR mode."""

from __future__ import annotations

import logging
from typing import Callable

from .analysis import PriceTagAnalyzer
from .errors import (
    LocalOCRFailure,
    LocalOCRUnavailable,
    OCRError,
    RemoteAnalysisFailure,
)
from .extract import find_all_prices, score, transform_to_item
from .extract.text import clean_text
from .models import ScanResult, join_fragments
from .ocr_settings import OCRSettings
from .recognition import TextRecognizer

logger = logging.getLogger(__name__)


class OCRService:
    """Analyze a price tag image locally or through the remote API.

    The mode is read once at the start of each call and is authoritative
    for that call: a failure in the selected mode is raised, never retried
    in the other mode.

    ``recognizer_factory`` is called only when local OCR is selected, so a
    missing local OCR stack does not affect remote analysis. It may raise
    ``LocalOCRUnavailable``; a ``ValueError`` from it (unknown backend) is
    reported as ``LocalOCRUnavailable`` too.
    """

    def __init__(
        self,
        settings: OCRSettings,
        recognizer_factory: Callable[[], TextRecognizer],
        analyzer: PriceTagAnalyzer,
    ) -> None:
        self._settings = settings
        self._recognizer_factory = recognizer_factory
        self._analyzer = analyzer

    async def analyze_image(self, image_path: str) -> ScanResult:
        use_local = await self._settings.get_use_local_ocr()
        if use_local:
            return await self.analyze_with_local_ocr(image_path)
        return await self.analyze_with_api(image_path)

    async def analyze_with_local_ocr(self, image_path: str) -> ScanResult:
        try:
            recognizer = self._recognizer_factory()
        except ValueError as e:
            raise LocalOCRUnavailable(f"Local OCR is not configured: {e}") from e

        try:
            raw = await recognizer.recognize(image_path)
        except OCRError:
            raise
        except Exception as e:
            logger.error("Local OCR error for %s: %s", image_path, e)
            raise LocalOCRFailure(f"Failed to analyze image with local OCR: {e}") from e

        ocr_text = join_fragments(raw)
        item = transform_to_item(ocr_text)
        confidence = score(item)
        logger.info(
            "Local OCR extracted %r (price=%s, confidence=%.2f)",
            item.name,
            item.price,
            confidence,
        )
        return ScanResult.from_item(
            item,
            source="local",
            ocr_text=ocr_text,
            confidence=confidence,
            all_prices=[f"{p:.2f}" for p in find_all_prices(clean_text(ocr_text))],
        )

    async def analyze_with_api(self, image_path: str) -> ScanResult:
        try:
            return await self._analyzer.analyze_image(image_path)
        except OCRError:
            raise
        except Exception as e:
            logger.error("API OCR error for %s: %s", image_path, e)
            raise RemoteAnalysisFailure(f"Failed to analyze image with API: {e}") from e

    async def is_local_ocr_enabled(self) -> bool:
        return await self._settings.get_use_local_ocr()

    async def toggle_ocr_mode(self) -> bool:
        """Switch between local OCR and the API; returns True if now local."""
        return await self._settings.toggle_use_local_ocr()
