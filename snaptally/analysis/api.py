"""SnapTally price tag analysis HTTP API backend."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import httpx

from ..errors import RemoteAnalysisFailure
from ..models import ScanResult
from . import PriceTagAnalyzer, parse_analysis

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.snaptally.app/api"


class ApiPriceTagAnalyzer(PriceTagAnalyzer):
    """Send price tag images or OCR text to the remote analysis API."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: str = "",
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self._api_key:
            raise RemoteAnalysisFailure(
                "Analysis API key is not set. "
                "Check the config file or the SNAPTALLY_API_KEY environment variable."
            )
        return {"X-API-Key": self._api_key}

    async def analyze_image(self, image_path: str) -> ScanResult:
        headers = self._headers()
        try:
            image_bytes = Path(image_path).read_bytes()
        except OSError as e:
            raise RemoteAnalysisFailure(f"Could not read image {image_path}: {e}") from e

        # Content-Type is left to httpx so the multipart boundary is set
        return await self._post(
            "/PriceTag/analyze",
            headers=headers,
            files={"image": ("price-tag.jpg", image_bytes, "image/jpeg")},
        )

    async def analyze_text(self, ocr_text: str) -> ScanResult:
        return await self._post(
            "/PriceTag/analyze-text",
            headers=self._headers(),
            json={"ocrText": ocr_text},
        )

    async def _post(self, path: str, **kwargs: Any) -> ScanResult:
        url = f"{self._base_url}{path}"
        logger.info("Sending price tag to analysis API at %s", url)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.post(url, **kwargs)
        except httpx.RequestError as e:
            logger.error("Failed to connect to analysis API: %s", e)
            raise RemoteAnalysisFailure(f"Failed to connect to analysis API: {e}") from e

        if not response.is_success:
            logger.error("Analysis API error: %s", response.status_code)
            raise RemoteAnalysisFailure(
                f"Failed to analyze price tag: {response.status_code} "
                f"{response.reason_phrase} - {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteAnalysisFailure(f"Analysis API returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise RemoteAnalysisFailure("Analysis API returned a non-object JSON body")

        return parse_analysis(data)
