"""String key/value settings persisted in SQLite."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .schema import ensure_schema


class SettingsDB:
    """Manages the settings table."""

    def __init__(self, db_path: str | Path = "~/.config/snaptally/settings.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get(self, key: str) -> str | None:
        """Return the stored value for *key*, or None if it was never set."""
        row = self._get_conn().execute(
            "SELECT value FROM settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._get_conn()
        conn.execute(
            """INSERT INTO settings (key, value) VALUES (?, ?)
               ON CONFLICT(key) DO UPDATE SET
                   value = excluded.value,
                   updated_at = datetime('now', 'localtime')""",
            (key, value),
        )
        conn.commit()

    def delete(self, key: str) -> bool:
        """Remove *key*. Returns True if a row was deleted."""
        conn = self._get_conn()
        cur = conn.execute("DELETE FROM settings WHERE key = ?", (key,))
        conn.commit()
        return cur.rowcount > 0
