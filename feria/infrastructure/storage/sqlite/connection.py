"""
aiosqlite connection pool for the fair store.

SQLite errors never leave this module raw: a locked, missing or exhausted
database surfaces as ``StoreUnavailableError`` (the ledger queues the sale and
lifecycle steps fail retryably), anything else as ``DatabaseError``.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from feria.config import get_logger, get_settings
from feria.core.exceptions import DatabaseError, StoreUnavailableError

logger = get_logger(__name__)

_UNAVAILABLE_MARKERS = ("database is locked", "unable to open", "disk i/o error")

PRAGMAS = (
    # WAL keeps terminal reads going while an archive deletes sales
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
    "PRAGMA foreign_keys=ON",
)


def translate_error(operation: str, exc: aiosqlite.Error) -> Exception:
    """Map an SQLite error to the domain storage error."""
    message = str(exc)
    if isinstance(exc, aiosqlite.OperationalError) and any(
        marker in message.lower() for marker in _UNAVAILABLE_MARKERS
    ):
        return StoreUnavailableError(operation, message)
    return DatabaseError(operation, message)


class ConnectionPool:
    """
    Fixed-size pool, opened lazily on first acquire.

    ``acquire`` waits at most ``acquire_timeout`` seconds for a free
    connection; a pool that stays exhausted is reported as an unavailable
    store rather than blocking a sale indefinitely.
    """

    def __init__(
        self,
        db_path: Path,
        pool_size: int = 5,
        busy_timeout: int = 30000,
        acquire_timeout: float = 10.0,
    ):
        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self.busy_timeout = busy_timeout
        self.acquire_timeout = acquire_timeout

        self._idle: asyncio.Queue[aiosqlite.Connection] = asyncio.Queue()
        self._opened: list[aiosqlite.Connection] = []
        self._open_lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return bool(self._opened)

    def stats(self) -> dict[str, int]:
        idle = self._idle.qsize()
        return {"size": len(self._opened), "idle": idle, "in_use": len(self._opened) - idle}

    async def initialize(self) -> None:
        async with self._open_lock:
            if self._opened:
                return
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            try:
                for _ in range(self.pool_size):
                    conn = await self._connect()
                    self._opened.append(conn)
                    self._idle.put_nowait(conn)
            except aiosqlite.Error as e:
                await self._close_all()
                raise translate_error("connect", e) from e

        logger.info("connection_pool_opened", db_path=str(self.db_path), size=self.pool_size)

    async def _connect(self) -> aiosqlite.Connection:
        conn = await aiosqlite.connect(self.db_path)
        for pragma in PRAGMAS:
            await conn.execute(pragma)
        await conn.execute(f"PRAGMA busy_timeout={int(self.busy_timeout)}")
        conn.row_factory = aiosqlite.Row
        return conn

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[aiosqlite.Connection]:
        """Borrow a connection; SQLite errors raised inside are translated."""
        if not self._opened:
            await self.initialize()

        try:
            conn = await asyncio.wait_for(self._idle.get(), timeout=self.acquire_timeout)
        except TimeoutError as e:
            logger.warning("connection_pool_exhausted", **self.stats())
            raise StoreUnavailableError("acquire", "no free database connection") from e

        try:
            yield conn
        except aiosqlite.Error as e:
            raise translate_error("query", e) from e
        finally:
            if conn.in_transaction:
                await conn.rollback()
            self._idle.put_nowait(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Borrow a connection inside a write transaction.

        ``BEGIN IMMEDIATE`` takes the write lock up front, so two writers
        queue on ``busy_timeout`` instead of failing on lock upgrade.
        """
        async with self.acquire() as conn:
            await conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except Exception:
                await conn.rollback()
                raise
            await conn.commit()

    async def close(self) -> None:
        async with self._open_lock:
            await self._close_all()
        logger.info("connection_pool_closed")

    async def _close_all(self) -> None:
        for conn in self._opened:
            await conn.close()
        self._opened.clear()
        self._idle = asyncio.Queue()


_pool: ConnectionPool | None = None


async def get_pool() -> ConnectionPool:
    """Get or create the process-wide pool from settings."""
    global _pool
    if _pool is None:
        storage = get_settings().storage
        _pool = ConnectionPool(
            db_path=storage.db_path,
            pool_size=storage.pool_size,
            busy_timeout=storage.busy_timeout,
            acquire_timeout=storage.acquire_timeout,
        )
        await _pool.initialize()
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None


@asynccontextmanager
async def get_connection() -> AsyncIterator[aiosqlite.Connection]:
    """Read connection from the global pool."""
    pool = await get_pool()
    async with pool.acquire() as conn:
        yield conn


@asynccontextmanager
async def get_transaction() -> AsyncIterator[aiosqlite.Connection]:
    """Write transaction on the global pool."""
    pool = await get_pool()
    async with pool.transaction() as conn:
        yield conn
