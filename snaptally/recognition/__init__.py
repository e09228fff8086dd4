"""Local text recognition backend base class and factory."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..models import RawOCRText

if TYPE_CHECKING:
    from ..config import SnapTallyConfig


class TextRecognizer(ABC):
    """Abstract base for on-device text recognition from an image."""

    @abstractmethod
    async def recognize(self, image_path: str) -> RawOCRText:
        """Recognize the text of a single image.

        Returns either one string or an ordered list of text fragments.
        """
        ...


def create_recognizer(config: SnapTallyConfig) -> TextRecognizer:
    """Create a local recognizer based on configuration."""
    backend_name = config.recognizer.backend

    match backend_name:
        case "tesseract":
            from .tesseract import TesseractRecognizer

            tess = config.recognizer.tesseract
            return TesseractRecognizer(
                lang=tess.lang,
                psm=tess.psm,
                tesseract_cmd=tess.tesseract_cmd,
                preprocess=tess.preprocess,
            )
        case _:
            raise ValueError(
                f"Unknown recognizer backend: {backend_name!r} "
                f"(choose from: tesseract)"
            )
