"""Local storage persisted in a SQLite file."""

from __future__ import annotations

import sqlite3
from pathlib import Path


class SQLiteStorage:
    """Local storage that survives between command-line sessions.

    Holds the bearer token and the location preference as plain strings,
    one row per key.

    Example:
        api = create_api(storage=SQLiteStorage("~/.estate/session.db"))
    """

    def __init__(self, path: str = "session.db") -> None:
        self._path = Path(path).expanduser()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._conn: sqlite3.Connection | None = None
        self._connection().execute(
            "CREATE TABLE IF NOT EXISTS local_storage (key TEXT PRIMARY KEY, value TEXT NOT NULL)"
        )

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(str(self._path), check_same_thread=False, isolation_level=None)
        return self._conn

    async def get(self, key: str) -> str | None:
        row = self._connection().execute(
            "SELECT value FROM local_storage WHERE key = ?", (key,)
        ).fetchone()
        return row[0] if row else None

    async def set(self, key: str, value: str) -> None:
        self._connection().execute(
            "INSERT INTO local_storage (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, str(value)),
        )

    async def delete(self, key: str) -> None:
        self._connection().execute("DELETE FROM local_storage WHERE key = ?", (key,))

    async def clear(self) -> None:
        """Remove every item, as on logout."""
        self._connection().execute("DELETE FROM local_storage")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
