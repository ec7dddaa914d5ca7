import json
from pathlib import Path
from typing import Any

import aiosqlite

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);
"""

SQL_UPSERT = """
INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
"""


class SqlitePersistence:
    """Key-value table in a local SQLite file, values stored as JSON text."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = await aiosqlite.connect(self.db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA journal_mode=WAL;")
        await self._conn.execute("PRAGMA synchronous=NORMAL;")
        await self._conn.execute("PRAGMA busy_timeout=30000;")
        await self._conn.executescript(SCHEMA)
        await self._conn.commit()

    async def close(self) -> None:
        if self._conn:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Database not connected")
        return self._conn

    async def load(self, key: str) -> Any | None:
        rows = await self.conn.execute_fetchall("SELECT value FROM kv_store WHERE key = ?", (key,))
        if not rows:
            return None
        return json.loads(rows[0]["value"])

    async def save(self, key: str, value: Any) -> None:
        await self.conn.execute(SQL_UPSERT, (key, json.dumps(value, default=str)))
        await self.conn.commit()

    async def delete(self, key: str) -> bool:
        cursor = await self.conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
        await self.conn.commit()
        return cursor.rowcount > 0
