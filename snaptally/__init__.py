"""Price tag OCR to structured shopping item extraction."""

from .analysis import PriceTagAnalyzer, create_analyzer
from .config import (
    AnalyzerConfig,
    BatchConfig,
    RecognizerConfig,
    SettingsConfig,
    SnapTallyConfig,
    load_config,
)
from .errors import (
    LocalOCRFailure,
    LocalOCRUnavailable,
    OCRError,
    RemoteAnalysisFailure,
)
from .extract import (
    clean_text,
    extract_brand,
    extract_item_with_confidence,
    extract_name,
    extract_price,
    extract_weight,
    score,
    split_items,
    transform_to_item,
)
from .models import ExtractedItem, ScanResult, join_fragments
from .ocr_settings import OCRSettings
from .recognition import TextRecognizer, create_recognizer
from .service import OCRService

__all__ = [
    "clean_text",
    "extract_name",
    "extract_brand",
    "extract_price",
    "extract_weight",
    "score",
    "transform_to_item",
    "extract_item_with_confidence",
    "split_items",
    "ExtractedItem",
    "ScanResult",
    "join_fragments",
    "TextRecognizer",
    "create_recognizer",
    "PriceTagAnalyzer",
    "create_analyzer",
    "OCRService",
    "OCRSettings",
    "OCRError",
    "LocalOCRUnavailable",
    "LocalOCRFailure",
    "RemoteAnalysisFailure",
    "SnapTallyConfig",
    "RecognizerConfig",
    "AnalyzerConfig",
    "SettingsConfig",
    "BatchConfig",
    "load_config",
]
