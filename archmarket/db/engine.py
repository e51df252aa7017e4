"""
Database Engine - async SQLite access over aiosqlite.

Provides:
- Database: connection manager with retry and transactions
- Store faults instead of raw driver exceptions

A single connection is shared by the whole process. Statements outside a
transaction take the engine lock for their duration; a transaction holds
the lock from ``BEGIN`` to ``COMMIT`` so no other coroutine can interleave
statements into it.
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence

import aiosqlite

from ..faults import StoreFault

logger = logging.getLogger("archmarket.db")

_in_transaction: contextvars.ContextVar[Optional["Database"]] = contextvars.ContextVar(
    "archmarket_db_transaction", default=None
)


def parse_sqlite_url(url: str) -> str:
    """Extract file path from sqlite URL."""
    for prefix in ("sqlite:///", "sqlite://"):
        if url.startswith(prefix):
            return url[len(prefix):] or ":memory:"
    if url.startswith("sqlite:"):
        return url[len("sqlite:"):].lstrip("/") or ":memory:"
    raise StoreFault("connect", f"Unsupported database URL scheme: {url}")


class Database:
    """
    Async database engine.

    Usage:
        db = Database("sqlite:///archmarket.db")
        await db.connect()
        rows = await db.fetch_all("SELECT * FROM documents WHERE collection = ?", ["orders"])
        await db.disconnect()

    Options:
        connect_retries (int): Number of connection attempts (default 3).
        connect_retry_delay (float): Seconds between attempts (default 0.5).
    """

    def __init__(self, url: str = "sqlite:///archmarket.db", **options: Any):
        self._url = url
        self._path = parse_sqlite_url(url)
        self._connection: Optional[aiosqlite.Connection] = None
        self._connected = False
        self._lock = asyncio.Lock()
        self._connect_retries = int(options.pop("connect_retries", 3))
        self._connect_retry_delay = float(options.pop("connect_retry_delay", 0.5))

    # ── Connection management ────────────────────────────────────────

    async def connect(self) -> None:
        """Open database connection with retry logic."""
        if self._connected:
            return

        async with self._lock:
            if self._connected:
                return

            last_exc: Optional[Exception] = None
            for attempt in range(1, self._connect_retries + 1):
                try:
                    self._connection = await aiosqlite.connect(self._path, isolation_level=None)
                    self._connection.row_factory = aiosqlite.Row
                    await self._connection.execute("PRAGMA journal_mode=WAL")
                    await self._connection.execute("PRAGMA busy_timeout=5000")
                    self._connected = True
                    logger.info(f"Database connected ({self._path}), attempt {attempt}")
                    return
                except (aiosqlite.Error, OSError) as exc:
                    last_exc = exc
                    if attempt < self._connect_retries:
                        logger.warning(
                            f"Connection attempt {attempt} failed: {exc}, "
                            f"retrying in {self._connect_retry_delay}s..."
                        )
                        await asyncio.sleep(self._connect_retry_delay)

            raise StoreFault(
                "connect",
                f"Failed after {self._connect_retries} attempts: {last_exc}",
                url=self._url,
            )

    async def disconnect(self) -> None:
        """Close database connection."""
        if not self._connected:
            return
        async with self._lock:
            if self._connection is not None:
                await self._connection.close()
                self._connection = None
            self._connected = False
            logger.info("Database disconnected")

    async def ensure_connected(self) -> None:
        if not self._connected:
            await self.connect()

    @property
    def in_transaction(self) -> bool:
        return _in_transaction.get() is self

    # ── Transactions ─────────────────────────────────────────────────

    @asynccontextmanager
    async def transaction(self, *, immediate: bool = False) -> AsyncIterator["Database"]:
        """
        Async context manager for transactions.

        ``immediate=True`` takes the SQLite write lock at ``BEGIN`` so a
        read-modify-write inside the block cannot race another writer.

        Usage:
            async with db.transaction(immediate=True):
                body = await db.fetch_val("SELECT body ...")
                await db.execute("UPDATE ...")
        """
        if self.in_transaction:
            raise StoreFault("transaction", "Nested transactions are not supported")
        await self.ensure_connected()

        async with self._lock:
            token = _in_transaction.set(self)
            try:
                await self._raw_execute("BEGIN IMMEDIATE" if immediate else "BEGIN", (), "begin")
                try:
                    yield self
                except BaseException:
                    await self._raw_execute("ROLLBACK", (), "rollback")
                    raise
                else:
                    await self._raw_execute("COMMIT", (), "commit")
            finally:
                _in_transaction.reset(token)

    # ── Query execution ──────────────────────────────────────────────

    async def _raw_execute(self, sql: str, params: Sequence[Any], operation: str) -> aiosqlite.Cursor:
        try:
            return await self._connection.execute(sql, params)
        except aiosqlite.Error as exc:
            raise StoreFault(operation, str(exc), sql=sql[:200]) from exc

    async def _run(self, sql: str, params: Optional[Sequence[Any]], operation: str, fetch: str) -> Any:
        await self.ensure_connected()
        params = params or []

        if self.in_transaction:
            cursor = await self._raw_execute(sql, params, operation)
            return await self._collect(cursor, fetch)

        async with self._lock:
            cursor = await self._raw_execute(sql, params, operation)
            return await self._collect(cursor, fetch)

    @staticmethod
    async def _collect(cursor: aiosqlite.Cursor, fetch: str) -> Any:
        if fetch == "all":
            return [dict(row) for row in await cursor.fetchall()]
        if fetch == "val":
            row = await cursor.fetchone()
            return row[0] if row is not None else None
        return cursor

    async def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> Any:
        """
        Execute a SQL statement.

        Returns:
            Cursor (exposes lastrowid, rowcount)

        Raises:
            StoreFault: When query execution fails
        """
        return await self._run(sql, params, "execute", "cursor")

    async def execute_script(self, script: str) -> None:
        """Run several statements at once (schema setup)."""
        await self.ensure_connected()
        async with self._lock:
            try:
                await self._connection.executescript(script)
            except aiosqlite.Error as exc:
                raise StoreFault("execute_script", str(exc)) from exc

    async def fetch_all(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        """Execute query and return all rows as dicts."""
        return await self._run(sql, params, "fetch_all", "all")

    async def fetch_val(self, sql: str, params: Optional[Sequence[Any]] = None) -> Any:
        """Execute query and return the first column of the first row."""
        return await self._run(sql, params, "fetch_val", "val")

