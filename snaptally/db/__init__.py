"""SQLite persistence for user preferences."""

from .schema import ensure_schema
from .settings import SettingsDB

__all__ = [
    "SettingsDB",
    "ensure_schema",
]
