import asyncio
import json

import aiosqlite
import structlog

from stockdash.config import settings

logger = structlog.get_logger()

_db: aiosqlite.Connection | None = None
_key_locks: dict[str, asyncio.Lock] = {}

DDL_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS kv_store (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT (datetime('now'))
    )
    """,
]


async def init_database(path: str | None = None) -> None:
    global _db
    _key_locks.clear()
    db_path = path or settings.db_path
    _db = await aiosqlite.connect(db_path)
    _db.row_factory = aiosqlite.Row
    await _db.execute("PRAGMA journal_mode=WAL")

    for ddl in DDL_STATEMENTS:
        await _db.execute(ddl)
    await _db.commit()

    logger.info("database_initialized", path=db_path)


async def close_database() -> None:
    global _db
    _key_locks.clear()
    if _db is not None:
        await _db.close()
        _db = None
        logger.info("database_closed")


def get_db() -> aiosqlite.Connection:
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_database() first.")
    return _db


async def check_health() -> None:
    db = get_db()
    cursor = await db.execute("SELECT 1")
    await cursor.close()


class KeyValueStore:
    """Independently keyed JSON lists, each rewritten whole on every change."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    def lock(self, key: str) -> asyncio.Lock:
        """Lock guarding a read-modify-write of `key` on the open connection."""
        return _key_locks.setdefault(key, asyncio.Lock())

    async def get_list(self, key: str) -> list:
        cursor = await self._db.execute("SELECT value FROM kv_store WHERE key = ?", (key,))
        row = await cursor.fetchone()
        await cursor.close()
        if row is None:
            return []
        try:
            data = json.loads(row["value"])
        except json.JSONDecodeError as exc:
            logger.warning("kv_store_corrupt_value", key=key, error=str(exc))
            return []
        return data if isinstance(data, list) else []

    async def put_list(self, key: str, items: list) -> None:
        await self._db.execute(
            """
            INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, datetime('now'))
            ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
            """,
            (key, json.dumps(items)),
        )
        await self._db.commit()
