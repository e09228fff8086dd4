"""Whitespace normalization applied before every field extractor."""

from __future__ import annotations

import re

# Unicode whitespace, NBSP included
_WHITESPACE_RUN = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """Collapse whitespace runs (newlines included) to one space and trim.

    Case and punctuation are preserved; the brand extractor relies on the
    original capitalization.
    """
    return _WHITESPACE_RUN.sub(" ", text or "").strip()
