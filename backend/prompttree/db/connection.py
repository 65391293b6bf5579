"""Async SQLite connection wrapper with WAL mode, schema initialization and transactions."""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite

from prompttree.db.schema import SCHEMA_SQL
from prompttree.errors import PersistError


class Transaction:
    """Statements issued inside ``Database.transaction()``. Nothing is committed here."""

    def __init__(self, connection: aiosqlite.Connection) -> None:
        self._conn = connection

    async def execute(self, sql: str, params: tuple | None = None) -> aiosqlite.Cursor:
        try:
            return await self._conn.execute(sql, params or ())
        except aiosqlite.Error as e:
            raise PersistError(f"exec failed: {e}") from e

    async def fetchone(self, sql: str, params: tuple | None = None) -> aiosqlite.Row | None:
        try:
            cursor = await self._conn.execute(sql, params or ())
            return await cursor.fetchone()
        except aiosqlite.Error as e:
            raise PersistError(f"query failed: {e}") from e

    async def fetchall(self, sql: str, params: tuple | None = None) -> list[aiosqlite.Row]:
        try:
            cursor = await self._conn.execute(sql, params or ())
            return list(await cursor.fetchall())
        except aiosqlite.Error as e:
            raise PersistError(f"query failed: {e}") from e


class Database:
    """Thin async wrapper around aiosqlite with WAL mode and auto-schema.

    There is one underlying connection. Every primitive and every
    transaction checks it out exclusively through ``_lock``, so the
    statements of a transaction never interleave with other work.
    """

    def __init__(self, connection: aiosqlite.Connection) -> None:
        self._conn = connection
        self._lock = asyncio.Lock()

    @classmethod
    async def connect(cls, path: str = "prompttree.db") -> "Database":
        """Create a connection with WAL mode, foreign keys, and schema init."""
        try:
            conn = await aiosqlite.connect(path)
            conn.row_factory = aiosqlite.Row
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")
            await conn.execute("PRAGMA busy_timeout=5000")
        except aiosqlite.Error as e:
            raise PersistError(f"failed to open database: {e}") from e
        db = cls(conn)
        await db._ensure_schema()
        return db

    async def _ensure_schema(self) -> None:
        """Create tables if they don't exist. Idempotent."""
        async with self._lock:
            try:
                await self._conn.executescript(SCHEMA_SQL)
                await self._conn.commit()
            except aiosqlite.Error as e:
                raise PersistError(f"schema init failed: {e}") from e

    async def execute(self, sql: str, params: tuple | None = None) -> aiosqlite.Cursor:
        """Execute a single SQL statement and commit."""
        async with self._lock:
            try:
                cursor = await self._conn.execute(sql, params or ())
                await self._conn.commit()
            except aiosqlite.Error as e:
                await self._conn.rollback()
                raise PersistError(f"exec failed: {e}") from e
            return cursor

    async def fetchone(self, sql: str, params: tuple | None = None) -> aiosqlite.Row | None:
        """Execute and return a single row."""
        async with self._lock:
            try:
                cursor = await self._conn.execute(sql, params or ())
                return await cursor.fetchone()
            except aiosqlite.Error as e:
                raise PersistError(f"query failed: {e}") from e

    async def fetchall(self, sql: str, params: tuple | None = None) -> list[aiosqlite.Row]:
        """Execute and return all rows."""
        async with self._lock:
            try:
                cursor = await self._conn.execute(sql, params or ())
                return list(await cursor.fetchall())
            except aiosqlite.Error as e:
                raise PersistError(f"query failed: {e}") from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Transaction]:
        """Run a block of statements atomically.

        Commits when the block exits normally, rolls back on any exception
        and re-raises it.
        """
        async with self._lock:
            try:
                await self._conn.execute("BEGIN")
            except aiosqlite.Error as e:
                raise PersistError(f"begin transaction failed: {e}") from e
            try:
                yield Transaction(self._conn)
            except BaseException:
                await self._conn.rollback()
                raise
            try:
                await self._conn.commit()
            except aiosqlite.Error as e:
                await self._conn.rollback()
                raise PersistError(f"commit failed: {e}") from e

    async def close(self) -> None:
        """Close the database connection."""
        await self._conn.close()
