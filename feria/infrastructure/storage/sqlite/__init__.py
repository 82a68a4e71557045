"""SQLite storage implementations."""

from feria.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)
from feria.infrastructure.storage.sqlite.feria_store import SQLiteFeriaStore

# Singleton instances
_feria_store: SQLiteFeriaStore | None = None


async def get_feria_store() -> SQLiteFeriaStore:
    """Get singleton fair store instance."""
    global _feria_store
    if _feria_store is None:
        _feria_store = SQLiteFeriaStore()
    return _feria_store


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
    # Store classes
    "SQLiteFeriaStore",
    # Factory functions
    "get_feria_store",
]
