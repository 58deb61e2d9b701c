"""Async SQLite database manager for user preferences.

Uses aiosqlite so preference writes never block the event loop. The schema
is a single key/value table mirroring the browser keys the dashboard used
("favorites", "darkMode").
"""

import os
from typing import Self

import aiosqlite

from coinwatch.logging import get_logger

logger = get_logger(__name__)

SCHEMA_VERSION = 1

_CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY
);

CREATE TABLE IF NOT EXISTS preferences (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


class PreferencesDatabase:
    """Async SQLite connection manager for the preference store.

    Usage:
        async with PreferencesDatabase("data/preferences.db") as database:
            await database.set_value("darkMode", "true")

    Pass ":memory:" as db_path for a throwaway database (tests).
    """

    def __init__(self, db_path: str = "data/preferences.db") -> None:
        self._db_path = db_path
        self._connection: aiosqlite.Connection | None = None

    @property
    def db(self) -> aiosqlite.Connection:
        """Access the raw aiosqlite connection.

        Raises RuntimeError if not connected.
        """
        if self._connection is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._connection

    async def connect(self) -> None:
        """Open the connection and create the schema.

        Creates the parent directory if it does not exist.
        """
        if self._db_path != ":memory:":
            db_dir = os.path.dirname(self._db_path)
            if db_dir:
                os.makedirs(db_dir, exist_ok=True)

        self._connection = await aiosqlite.connect(self._db_path)
        await self._connection.executescript(_CREATE_TABLES_SQL)
        await self._connection.commit()
        await self._ensure_schema_version()

        logger.info("preferences_db_connected", db_path=self._db_path)

    async def close(self) -> None:
        """Close the database connection if open."""
        if self._connection is not None:
            await self._connection.close()
            self._connection = None
            logger.info("preferences_db_closed", db_path=self._db_path)

    async def _ensure_schema_version(self) -> None:
        cursor = await self.db.execute("SELECT version FROM schema_version LIMIT 1")
        row = await cursor.fetchone()
        if row is None:
            await self.db.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (SCHEMA_VERSION,),
            )
            await self.db.commit()
            logger.info("schema_version_set", version=SCHEMA_VERSION)

    async def get_value(self, key: str) -> str | None:
        """Return the stored value for `key`, or None if unset."""
        cursor = await self.db.execute(
            "SELECT value FROM preferences WHERE key = ?", (key,)
        )
        row = await cursor.fetchone()
        return row[0] if row is not None else None

    async def get_values(self, *keys: str) -> dict[str, str]:
        """Return the stored values for `keys` in one query; unset keys are omitted."""
        if not keys:
            return {}
        placeholders = ", ".join("?" for _ in keys)
        cursor = await self.db.execute(
            f"SELECT key, value FROM preferences WHERE key IN ({placeholders})", keys
        )
        return {key: value for key, value in await cursor.fetchall()}

    async def set_value(self, key: str, value: str) -> None:
        """Upsert `key` and commit immediately."""
        await self.db.execute(
            "INSERT INTO preferences (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value),
        )
        await self.db.commit()

    async def __aenter__(self) -> Self:
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore[no-untyped-def]
        await self.close()
