"""SQLite local storage backend.

Provides persistent key/value storage in a single SQLite file.
Uses aiosqlite for async access.
"""

from datetime import datetime, timezone
from pathlib import Path

import aiosqlite

from .base import LocalStorage


class SQLiteStorage(LocalStorage):
    """SQLite-backed key/value storage.

    Stores every key in one ``kv`` table. Supports persistent storage
    across sessions.
    """

    def __init__(self, path: str | Path = "./playground.db"):
        self._db_path = Path(path)
        self._connection: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database file and create the schema."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection = await aiosqlite.connect(self._db_path)
        await self._create_schema()

    async def _create_schema(self) -> None:
        await self._conn.execute("""
            CREATE TABLE IF NOT EXISTS kv (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        await self._conn.commit()

    async def disconnect(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    @property
    def _conn(self) -> aiosqlite.Connection:
        if self._connection is None:
            raise RuntimeError("SQLite storage is not connected. Call connect() first.")
        return self._connection

    async def get_item(self, key: str) -> str | None:
        async with self._conn.execute(
            "SELECT value FROM kv WHERE key = ?",
            (key,)
        ) as cursor:
            row = await cursor.fetchone()
        return row[0] if row else None

    async def set_item(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).isoformat()
        await self._conn.execute("""
            INSERT INTO kv (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
        """, (key, value, now))
        await self._conn.commit()

    async def remove_item(self, key: str) -> None:
        await self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        await self._conn.commit()

    @property
    def backend_type(self) -> str:
        return "sqlite"

    @property
    def db_path(self) -> Path:
        return self._db_path
