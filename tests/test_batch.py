"""Tests for batch processing, statistics and export."""

import csv
import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from snaptally.batch import (
    BatchImageResult,
    BatchProcessor,
    export_csv,
    export_json,
    summarize,
)
from snaptally.models import ScanResult
from snaptally.recognition import TextRecognizer

TEXTS = {
    "yogurt.jpg": ["Greek Yogurt,", "Brand: Olympus", "16 oz", "$4.29"],
    "blank.jpg": [],
}


class FakeRecognizer(TextRecognizer):
    async def recognize(self, image_path):
        name = image_path.rsplit("/", 1)[-1]
        if name not in TEXTS:
            raise FileNotFoundError(f"Image not found: {image_path}")
        return TEXTS[name]


class TestBatchProcessor:
    @pytest.mark.asyncio
    async def test_process_continues_after_failure(self):
        results = await BatchProcessor(FakeRecognizer()).process(
            ["/in/yogurt.jpg", "/in/missing.jpg", "/in/blank.jpg"]
        )

        assert [r.filename for r in results] == ["yogurt.jpg", "missing.jpg", "blank.jpg"]

        yogurt, missing, blank = results
        assert yogurt.error is None
        assert yogurt.extracted_name == "Greek Yogurt"
        assert yogurt.extracted_brand == "Olympus"
        assert yogurt.extracted_price == 4.29
        assert yogurt.extracted_weight == 16
        assert yogurt.confidence == 1.0
        assert yogurt.processing_time_ms >= 0

        assert "Image not found" in missing.error
        assert missing.confidence is None

        assert blank.error is None
        assert blank.extracted_name == "Unknown Product"
        assert blank.confidence == 0

    @pytest.mark.asyncio
    async def test_remote_parse(self):
        analyzer = MagicMock()
        analyzer.analyze_text = AsyncMock(
            return_value=ScanResult(name="Yogurt", brand="Olympus", price=4.29, weight=16, source="api")
        )

        results = await BatchProcessor(FakeRecognizer(), analyzer=analyzer).process(
            ["/in/yogurt.jpg"]
        )

        analyzer.analyze_text.assert_awaited_once_with("Greek Yogurt, Brand: Olympus 16 oz $4.29")
        assert results[0].extracted_name == "Yogurt"
        assert results[0].confidence is None


class TestSummarize:
    def test_bands_and_averages(self):
        results = [
            BatchImageResult(filename="a.jpg", confidence=1.0, processing_time_ms=100),
            BatchImageResult(filename="b.jpg", confidence=0.5, processing_time_ms=200),
            BatchImageResult(filename="c.jpg", confidence=0.25, processing_time_ms=300),
            BatchImageResult(filename="d.jpg", error="boom", processing_time_ms=0),
        ]
        stats = summarize(results)

        assert stats.total == 4
        assert stats.successful == 3
        assert stats.failed == 1
        assert stats.average_confidence == pytest.approx((1.0 + 0.5 + 0.25) / 3)
        assert stats.average_processing_time_ms == 150
        assert (stats.high_confidence, stats.medium_confidence, stats.low_confidence) == (1, 1, 1)

    def test_custom_thresholds(self):
        results = [BatchImageResult(filename="a.jpg", confidence=0.75)]
        assert summarize(results, high=0.7, medium=0.4).high_confidence == 1

    def test_empty(self):
        stats = summarize([])
        assert stats.total == 0
        assert stats.average_confidence == 0
        assert stats.average_processing_time_ms == 0


class TestExport:
    @pytest.fixture
    def results(self):
        return [
            BatchImageResult(
                filename="yogurt.jpg",
                ocr_text="Greek Yogurt, Brand: Olympus 16 oz $4.29",
                extracted_name="Greek Yogurt",
                extracted_brand="Olympus",
                extracted_price=4.29,
                extracted_weight=16,
                confidence=1.0,
                processing_time_ms=42,
            ),
            BatchImageResult(filename="broken.jpg", error="Could not decode image"),
        ]

    def test_export_csv(self, tmp_path, results):
        path = export_csv(results, tmp_path / "out" / "results.csv")

        with open(path, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))

        assert rows[0][0] == "Filename"
        assert len(rows) == 3
        assert rows[1][0] == "yogurt.jpg"
        assert rows[1][1] == "Greek Yogurt, Brand: Olympus 16 oz $4.29"
        assert rows[1][6] == "100.0"
        assert rows[2][8] == "Could not decode image"

    def test_export_json(self, tmp_path, results):
        path = export_json(results, tmp_path / "results.json")
        data = json.loads(path.read_text(encoding="utf-8"))

        assert data["totalImages"] == 2
        assert data["successCount"] == 1
        assert data["errorCount"] == 1
        assert data["averageConfidence"] == 0.5
        assert "exportDate" in data
        assert data["results"][0]["extracted_name"] == "Greek Yogurt"
        assert data["results"][1]["error"] == "Could not decode image"
