"""Claude API backend for price tag analysis."""

from __future__ import annotations

import base64
import json
import mimetypes
from pathlib import Path

from ..errors import RemoteAnalysisFailure
from ..models import ScanResult
from . import PriceTagAnalyzer, parse_analysis, parse_json_text

_FIELDS = """\
Return only a JSON object of this form (no other text):
{"item": "product name", "brand": "brand or empty string",
 "price": 0.0, "weight": 0.0, "ocrText": "all text you can read",
 "allPrices": ["every price you can see"], "allItems": ["every product name"]}

price is the final price in dollars. weight is the package quantity as a
number: ounces for oz and lb (1 lb = 16 oz), grams for g and kg,
milliliters for ml and l. Use 0 when a value is not visible.
"""

_IMAGE_PROMPT = "This image shows a retail price tag or product label.\n" + _FIELDS

_TEXT_PROMPT_HEAD = "The following text was read by OCR from a retail price tag.\n"


class ClaudePriceTagAnalyzer(PriceTagAnalyzer):
    """Extract price tag items using Claude's vision capability."""

    def __init__(self, api_key: str = "", model: str = "claude-sonnet-4-5-20250929") -> None:
        self._api_key = api_key
        self._model = model

    def _client(self):
        if not self._api_key:
            raise RemoteAnalysisFailure(
                "Anthropic API key is not set. "
                "Check the config file or the ANTHROPIC_API_KEY environment variable."
            )

        try:
            import anthropic
        except ImportError:
            raise ImportError(
                "anthropic SDK is required: pip install 'snaptally[claude]'"
            ) from None

        return anthropic.AsyncAnthropic(api_key=self._api_key)

    async def analyze_image(self, image_path: str) -> ScanResult:
        client = self._client()
        try:
            data = Path(image_path).read_bytes()
        except OSError as e:
            raise RemoteAnalysisFailure(f"Could not read image {image_path}: {e}") from e
        media_type = mimetypes.guess_type(image_path)[0] or "image/jpeg"

        content = [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": media_type,
                    "data": base64.standard_b64encode(data).decode(),
                },
            },
            {"type": "text", "text": _IMAGE_PROMPT},
        ]
        return await self._ask(client, content)

    async def analyze_text(self, ocr_text: str) -> ScanResult:
        client = self._client()
        prompt = f"{_TEXT_PROMPT_HEAD}---\n{ocr_text}\n---\n{_FIELDS}"
        content = [{"type": "text", "text": prompt}]
        return await self._ask(client, content)

    async def _ask(self, client, content: list[dict]) -> ScanResult:
        try:
            response = await client.messages.create(
                model=self._model,
                max_tokens=1024,
                messages=[{"role": "user", "content": content}],
            )
        except Exception as e:
            raise RemoteAnalysisFailure(f"Claude request failed: {e}") from e

        text = response.content[0].text
        try:
            return parse_analysis(parse_json_text(text))
        except (json.JSONDecodeError, ValueError) as e:
            raise RemoteAnalysisFailure(f"Could not parse Claude response: {e}") from e
