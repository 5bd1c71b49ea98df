"""SQLite database layer via aiosqlite."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import aiosqlite

SCHEMA = """
CREATE TABLE IF NOT EXISTS user_data (
    user_id TEXT PRIMARY KEY,
    payload TEXT NOT NULL DEFAULT '{}',
    last_updated TEXT NOT NULL
);
"""


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class Database:
    """Async SQLite database holding one saved form payload per user."""

    def __init__(self, path: str = "ghgforms.db") -> None:
        self.path = path
        self._db: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        self._db = await aiosqlite.connect(self.path)
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA)

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("Database not connected — call connect() first")
        return self._db

    # -- User data --

    async def get_user_data(self, user_id: str) -> dict | None:
        cursor = await self.db.execute("SELECT payload FROM user_data WHERE user_id = ?", (user_id,))
        row = await cursor.fetchone()
        return json.loads(row["payload"]) if row else None

    async def save_user_data(self, user_id: str, payload: dict) -> dict:
        """Store ``payload`` verbatim plus a ``lastUpdated`` stamp; last writer wins."""
        stamp = utc_timestamp()
        stored = {**payload, "lastUpdated": stamp}
        await self.db.execute(
            "INSERT INTO user_data (user_id, payload, last_updated) VALUES (?, ?, ?) "
            "ON CONFLICT(user_id) DO UPDATE SET payload = excluded.payload, "
            "last_updated = excluded.last_updated",
            (user_id, json.dumps(stored, ensure_ascii=False), stamp),
        )
        await self.db.commit()
        return stored

