"""Storage infrastructure implementations."""

from feria.infrastructure.storage.sqlite import (
    SQLiteFeriaStore,
    close_pool,
    get_connection,
    get_feria_store,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteFeriaStore",
    "get_feria_store",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
