import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from aiosqlite import Connection, Error as SqliteError, connect as sqlite_connect
from opentelemetry.instrumentation.sqlite3 import SQLite3Instrumentor

from romindr.helpers.config_models.store import SqliteModel
from romindr.helpers.logging import logger
from romindr.models.readiness import ReadinessEnum
from romindr.persistence.istore import IStore

# Instrument sqlite
SQLite3Instrumentor().instrument()


class SqliteStore(IStore):
    _config: SqliteModel
    _db_path: str
    _init_done: bool

    def __init__(self, config: SqliteModel):
        logger.info(
            "Using SQLite database at %s with table %s", config.path, config.table
        )
        self._config = config
        self._db_path = self._config.full_path()
        self._init_done = False

        # Create folder if does not exist
        db_folder = os.path.dirname(self._db_path)
        if db_folder:
            os.makedirs(name=db_folder, exist_ok=True)

    async def readiness(self) -> ReadinessEnum:
        """
        Check the readiness of the SQLite database.

        This checks if the database is reachable and can be queried.
        """
        try:
            async with self._use_db() as db:
                await db.execute("SELECT 1")
            return ReadinessEnum.OK
        except SqliteError:
            logger.exception("Error requesting SQLite")
        except Exception:
            logger.exception("Unknown error while checking SQLite readiness")
        return ReadinessEnum.FAIL

    async def get(self, key: str) -> bytes | None:
        """
        Get a slot value.

        If the slot does not exist or the database cannot be read, return `None`.
        """
        logger.debug("Loading slot %s", key)
        try:
            async with self._use_db() as db:
                cursor = await db.execute(
                    f"SELECT value FROM {self._config.table} WHERE key = ?",
                    (key,),
                )
                row = await cursor.fetchone()
        except SqliteError:
            logger.exception("Error getting slot %s", key)
            return None
        return bytes(row[0]) if row else None

    async def set(self, key: str, value: str | bytes) -> bool:
        """
        Overwrite a slot value.
        """
        data = value.encode() if isinstance(value, str) else value
        logger.debug("Saving slot %s (%i bytes)", key, len(data))
        try:
            async with self._use_db() as db:
                await db.execute(
                    f"INSERT OR REPLACE INTO {self._config.table} VALUES (?, ?)",
                    (
                        key,  # key
                        data,  # value
                    ),
                )
                await db.commit()
        except SqliteError:
            logger.exception("Error setting slot %s", key)
            return False
        return True

    async def delete(self, key: str) -> bool:
        """
        Delete a slot, no-op if it does not exist.
        """
        try:
            async with self._use_db() as db:
                await db.execute(
                    f"DELETE FROM {self._config.table} WHERE key = ?",
                    (key,),
                )
                await db.commit()
        except SqliteError:
            logger.exception("Error deleting slot %s", key)
            return False
        return True

    async def _init_db(self, db: Connection):
        """
        Initialize the database.

        See: https://sqlite.org/cgi/src/doc/wal2/doc/wal2.md
        """
        logger.info("First use, init database")
        # Optimize performance for concurrent reads
        await db.execute("PRAGMA journal_mode=WAL")
        # Create table
        await db.execute(
            f"CREATE TABLE IF NOT EXISTS {self._config.table} (key TEXT PRIMARY KEY, value BLOB)"
        )
        # Write changes to disk
        await db.commit()

    @asynccontextmanager
    async def _use_db(self) -> AsyncGenerator[Connection]:
        """
        Generate the SQLite client and close it after use.
        """
        async with sqlite_connect(
            database=self._db_path,
        ) as client:
            if not self._init_done:
                await self._init_db(client)
                self._init_done = True
            yield client
