"""Tests for the mode-aware image analysis service."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from snaptally.config import load_config
from snaptally.db.settings import SettingsDB
from snaptally.errors import LocalOCRFailure, LocalOCRUnavailable, RemoteAnalysisFailure
from snaptally.models import ScanResult
from snaptally.ocr_settings import OCRSettings
from snaptally.recognition import TextRecognizer, create_recognizer
from snaptally.service import OCRService

YOGURT_FRAGMENTS = ["Greek Yogurt,", "Brand: Olympus", "16 oz", "$4.29"]


class FakeRecognizer(TextRecognizer):
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else YOGURT_FRAGMENTS
        self.error = error
        self.calls = []

    async def recognize(self, image_path):
        self.calls.append(image_path)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def db(tmp_path):
    db = SettingsDB(tmp_path / "settings.db")
    yield db
    db.close()


@pytest.fixture
def settings(db):
    return OCRSettings(db)


@pytest.fixture
def analyzer():
    mock = MagicMock()
    mock.analyze_image = AsyncMock(
        return_value=ScanResult(name="Milk", brand="Acme", price=2.5, weight=64, source="api")
    )
    return mock


class TestLocalMode:
    @pytest.mark.asyncio
    async def test_local_extraction(self, settings, analyzer):
        await settings.set_use_local_ocr(True)
        recognizer = FakeRecognizer()
        service = OCRService(settings, lambda: recognizer, analyzer)

        result = await service.analyze_image("/tmp/tag.jpg")

        assert result.source == "local"
        assert result.name == "Greek Yogurt"
        assert result.brand == "Olympus"
        assert result.price == 4.29
        assert result.weight == 16
        assert result.confidence == 1.0
        assert result.ocr_text == "Greek Yogurt, Brand: Olympus 16 oz $4.29"
        assert result.all_prices == ["4.29"]
        assert recognizer.calls == ["/tmp/tag.jpg"]
        analyzer.analyze_image.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_recognition(self, settings, analyzer):
        await settings.set_use_local_ocr(True)
        service = OCRService(settings, lambda: FakeRecognizer(result=[]), analyzer)

        result = await service.analyze_image("/tmp/tag.jpg")

        assert result.name == "Unknown Product"
        assert result.brand == "Generic"
        assert result.confidence == 0
        assert result.all_prices == []

    @pytest.mark.asyncio
    async def test_recognizer_error_is_wrapped(self, settings, analyzer):
        await settings.set_use_local_ocr(True)
        boom = RuntimeError("engine crashed")
        service = OCRService(settings, lambda: FakeRecognizer(error=boom), analyzer)

        with pytest.raises(LocalOCRFailure, match="engine crashed") as exc_info:
            await service.analyze_image("/tmp/tag.jpg")

        assert exc_info.value.__cause__ is boom
        analyzer.analyze_image.assert_not_called()

    @pytest.mark.asyncio
    async def test_unavailable_propagates_without_fallback(self, settings, analyzer):
        await settings.set_use_local_ocr(True)

        def factory():
            raise LocalOCRUnavailable("no tesseract")

        service = OCRService(settings, factory, analyzer)
        with pytest.raises(LocalOCRUnavailable):
            await service.analyze_image("/tmp/tag.jpg")
        analyzer.analyze_image.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_backend_is_unavailable(self, settings, analyzer):
        await settings.set_use_local_ocr(True)
        config = load_config()
        config.recognizer.backend = "unknown"
        service = OCRService(settings, lambda: create_recognizer(config), analyzer)

        with pytest.raises(LocalOCRUnavailable, match="not configured") as exc_info:
            await service.analyze_image("/tmp/tag.jpg")
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestApiMode:
    @pytest.mark.asyncio
    async def test_default_mode_uses_api(self, settings, analyzer):
        factory = MagicMock()
        service = OCRService(settings, factory, analyzer)

        result = await service.analyze_image("/tmp/tag.jpg")

        assert result.source == "api"
        assert result.name == "Milk"
        analyzer.analyze_image.assert_awaited_once_with("/tmp/tag.jpg")
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_remote_failure_propagates(self, settings, analyzer):
        analyzer.analyze_image.side_effect = RemoteAnalysisFailure("503", status_code=503)
        factory = MagicMock()
        service = OCRService(settings, factory, analyzer)

        with pytest.raises(RemoteAnalysisFailure) as exc_info:
            await service.analyze_image("/tmp/tag.jpg")
        assert exc_info.value.status_code == 503
        factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self, settings, analyzer):
        analyzer.analyze_image.side_effect = ValueError("bad payload")
        service = OCRService(settings, MagicMock(), analyzer)

        with pytest.raises(RemoteAnalysisFailure, match="bad payload"):
            await service.analyze_image("/tmp/tag.jpg")


class TestModeSwitching:
    @pytest.mark.asyncio
    async def test_toggle(self, settings, analyzer):
        service = OCRService(settings, FakeRecognizer, analyzer)

        assert await service.is_local_ocr_enabled() is False
        assert await service.toggle_ocr_mode() is True
        assert await service.is_local_ocr_enabled() is True

        result = await service.analyze_image("/tmp/tag.jpg")
        assert result.source == "local"

        assert await service.toggle_ocr_mode() is False
        result = await service.analyze_image("/tmp/tag.jpg")
        assert result.source == "api"
