"""Persisted choice between local OCR and the remote analysis API."""

from __future__ import annotations

import asyncio
import logging

from .db.settings import SettingsDB

logger = logging.getLogger(__name__)

LOCAL_OCR_KEY = "useLocalOCR"


class OCRSettings:
    """Reads and writes the ``useLocalOCR`` flag.

    Values are stored as the literal strings ``"true"`` and ``"false"``.
    A missing or unreadable value means the remote API is used.
    """

    def __init__(self, db: SettingsDB) -> None:
        self._db = db

    async def get_use_local_ocr(self) -> bool:
        try:
            value = await asyncio.to_thread(self._db.get, LOCAL_OCR_KEY)
        except Exception as e:
            logger.warning("Error reading local OCR setting, using API: %s", e)
            return False
        return value == "true"

    async def set_use_local_ocr(self, enabled: bool) -> None:
        try:
            await asyncio.to_thread(
                self._db.set, LOCAL_OCR_KEY, "true" if enabled else "false"
            )
        except Exception:
            logger.exception("Error saving local OCR setting")
            raise

    async def toggle_use_local_ocr(self) -> bool:
        """Flip the flag and return the new value."""
        new_value = not await self.get_use_local_ocr()
        await self.set_use_local_ocr(new_value)
        return new_value
