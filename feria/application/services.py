"""
Service factory functions for dependency injection.

This module provides factory functions that wire infrastructure
implementations to core services. Use cases should import from here.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from typing import TYPE_CHECKING

from feria.config import get_settings
from feria.core.services import FeriaLifecycleManager, ReportEngine, SaleLedger

if TYPE_CHECKING:
    from feria.core.interfaces import IFeriaStore, IPendingSaleQueue


# Singleton service instances
_report_engine: ReportEngine | None = None
_sale_ledger: SaleLedger | None = None
_lifecycle_manager: FeriaLifecycleManager | None = None


def get_report_engine() -> ReportEngine:
    """Get or create the report engine (stateless)."""
    global _report_engine

    if _report_engine is None:
        _report_engine = ReportEngine()
    return _report_engine


async def get_sale_ledger(
    store: "IFeriaStore | None" = None,
    queue: "IPendingSaleQueue | None" = None,
) -> SaleLedger:
    """
    Get or create the terminal's SaleLedger.

    On first creation the persisted pending queue is loaded, so sales left
    over from a previous run are pending again before anything new is
    recorded.

    Args:
        store: Optional fair store override
        queue: Optional pending queue override

    Returns:
        Configured SaleLedger
    """
    global _sale_ledger

    if _sale_ledger is not None and store is None and queue is None:
        return _sale_ledger

    # Lazy import infrastructure to avoid circular imports
    from feria.infrastructure.queue import JsonFilePendingQueue
    from feria.infrastructure.storage.sqlite import get_feria_store

    settings = get_settings()
    ledger = SaleLedger(
        store=store or await get_feria_store(),
        queue=queue or JsonFilePendingQueue(settings.storage.queue_path),
        online=settings.ledger.start_online,
        temp_id_prefix=settings.ledger.temp_id_prefix,
    )
    ledger.load()

    if store is None and queue is None:
        _sale_ledger = ledger

    return ledger


async def get_lifecycle_manager(
    store: "IFeriaStore | None" = None,
) -> FeriaLifecycleManager:
    """
    Get or create the FeriaLifecycleManager.

    Args:
        store: Optional fair store override

    Returns:
        Configured FeriaLifecycleManager
    """
    global _lifecycle_manager

    if _lifecycle_manager is not None and store is None:
        return _lifecycle_manager

    from feria.infrastructure.storage.sqlite import get_feria_store

    manager = FeriaLifecycleManager(
        store=store or await get_feria_store(),
        report_engine=get_report_engine(),
        batch_size=get_settings().lifecycle.batch_size,
    )

    if store is None:
        _lifecycle_manager = manager

    return manager


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _report_engine
    global _sale_ledger
    global _lifecycle_manager

    _report_engine = None
    _sale_ledger = None
    _lifecycle_manager = None


__all__ = [
    # Factory functions
    "get_report_engine",
    "get_sale_ledger",
    "get_lifecycle_manager",
    # Reset
    "reset_services",
]
