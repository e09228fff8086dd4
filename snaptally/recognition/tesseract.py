"""Tesseract based local text recognition."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from ..errors import LocalOCRFailure, LocalOCRUnavailable
from . import TextRecognizer

logger = logging.getLogger(__name__)


class TesseractRecognizer(TextRecognizer):
    """Recognize price tag text with Tesseract on the local machine.

    Images are converted to grayscale and Otsu-thresholded with OpenCV
    before recognition, which helps with glossy shelf labels. Works
    offline; accuracy is lower than the remote analysis API.
    """

    def __init__(
        self,
        lang: str = "eng",
        psm: int = 6,
        tesseract_cmd: str = "",
        preprocess: bool = True,
    ) -> None:
        self._lang = lang
        self._psm = psm
        self._tesseract_cmd = tesseract_cmd
        self._preprocess = preprocess

    async def recognize(self, image_path: str) -> list[str]:
        try:
            import cv2
            import pytesseract
        except ImportError:
            raise LocalOCRUnavailable(
                "pytesseract and opencv-python are required for local OCR: "
                "pip install 'snaptally[local]'"
            ) from None

        if self._tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd

        return await asyncio.to_thread(
            self._recognize_sync, cv2, pytesseract, image_path
        )

    def _recognize_sync(self, cv2, pytesseract, image_path: str) -> list[str]:
        if not Path(image_path).exists():
            raise LocalOCRFailure(f"Image not found: {image_path}")

        img = cv2.imread(image_path)
        if img is None:
            raise LocalOCRFailure(f"Could not decode image: {image_path}")

        if self._preprocess:
            gray = cv2.cvtColor(img, cv2.COLOR_BGR2GRAY)
            _, img = cv2.threshold(
                gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU
            )

        try:
            text = pytesseract.image_to_string(
                img, lang=self._lang, config=f"--psm {self._psm}"
            )
        except pytesseract.TesseractNotFoundError as e:
            raise LocalOCRUnavailable(
                "tesseract binary not found; install it or set "
                "recognizer.tesseract.tesseract_cmd"
            ) from e

        fragments = [line.strip() for line in text.splitlines() if line.strip()]
        logger.info("Recognized %d text fragment(s) in %s", len(fragments), image_path)
        return fragments
