"""
Dependency injection container for FastAPI.

Provides service instances to route handlers. Tests override these through
``app.dependency_overrides``.
"""

from fastapi import Depends, Header

from feria.application.services import get_lifecycle_manager, get_sale_ledger
from feria.application.use_cases import (
    ActivateFeriaUseCase,
    ArchiveFeriaUseCase,
    DeleteHistoricalFeriaUseCase,
    GetHistoricalFeriaUseCase,
    GetLiveReportUseCase,
    RecordSaleUseCase,
    SaveFeriaConfigUseCase,
)
from feria.config import Settings, get_settings
from feria.core.interfaces import IFeriaStore
from feria.core.services import FeriaLifecycleManager, SaleLedger
from feria.infrastructure.storage.sqlite import get_feria_store


def get_app_settings() -> Settings:
    """Get application settings."""
    return get_settings()


# Stores


async def get_store() -> IFeriaStore:
    """Get the fair document store."""
    return await get_feria_store()


# Core services


async def get_ledger() -> SaleLedger:
    """Get the terminal's sale ledger."""
    return await get_sale_ledger()


async def get_lifecycle() -> FeriaLifecycleManager:
    """Get the fair lifecycle manager."""
    return await get_lifecycle_manager()


def get_operator_id(x_operator_id: str | None = Header(default=None)) -> str | None:
    """Operator identity as sent by the terminal, if any."""
    return x_operator_id


# Use cases


def get_record_sale_use_case(
    ledger: SaleLedger = Depends(get_ledger),
    lifecycle: FeriaLifecycleManager = Depends(get_lifecycle),
) -> RecordSaleUseCase:
    return RecordSaleUseCase(ledger=ledger, lifecycle=lifecycle)


def get_save_feria_config_use_case(
    lifecycle: FeriaLifecycleManager = Depends(get_lifecycle),
) -> SaveFeriaConfigUseCase:
    return SaveFeriaConfigUseCase(lifecycle=lifecycle)


def get_live_report_use_case(
    store: IFeriaStore = Depends(get_store),
    lifecycle: FeriaLifecycleManager = Depends(get_lifecycle),
) -> GetLiveReportUseCase:
    return GetLiveReportUseCase(store=store, lifecycle=lifecycle)


def get_archive_feria_use_case(
    lifecycle: FeriaLifecycleManager = Depends(get_lifecycle),
) -> ArchiveFeriaUseCase:
    return ArchiveFeriaUseCase(lifecycle=lifecycle)


def get_activate_feria_use_case(
    store: IFeriaStore = Depends(get_store),
    lifecycle: FeriaLifecycleManager = Depends(get_lifecycle),
) -> ActivateFeriaUseCase:
    return ActivateFeriaUseCase(store=store, lifecycle=lifecycle)


def get_delete_historical_feria_use_case(
    lifecycle: FeriaLifecycleManager = Depends(get_lifecycle),
) -> DeleteHistoricalFeriaUseCase:
    return DeleteHistoricalFeriaUseCase(lifecycle=lifecycle)


def get_historical_feria_use_case(
    store: IFeriaStore = Depends(get_store),
) -> GetHistoricalFeriaUseCase:
    return GetHistoricalFeriaUseCase(store=store)
