"""Application use cases."""

from feria.application.use_cases.activate_feria import ActivateFeriaUseCase
from feria.application.use_cases.archive_feria import ArchiveFeriaUseCase
from feria.application.use_cases.delete_historical_feria import DeleteHistoricalFeriaUseCase
from feria.application.use_cases.get_historical_feria import GetHistoricalFeriaUseCase
from feria.application.use_cases.get_live_report import GetLiveReportUseCase, LiveReportResult
from feria.application.use_cases.record_sale import (
    RecordSaleResult,
    RecordSaleUseCase,
    aggregate_cart,
)
from feria.application.use_cases.save_feria_config import SaveFeriaConfigUseCase

__all__ = [
    "RecordSaleUseCase",
    "RecordSaleResult",
    "aggregate_cart",
    "SaveFeriaConfigUseCase",
    "GetLiveReportUseCase",
    "LiveReportResult",
    "ArchiveFeriaUseCase",
    "ActivateFeriaUseCase",
    "DeleteHistoricalFeriaUseCase",
    "GetHistoricalFeriaUseCase",
]
