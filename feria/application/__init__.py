"""
Application layer - Use cases, DTOs, and service factories.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services
3. Providing factory functions for dependency injection

Use cases are the only entry point for API handlers.
"""

from feria.application.dto.requests import (
    CartLineRequest,
    ConnectivityRequest,
    FeriaConfigRequest,
    RecordSaleRequest,
)
from feria.application.dto.responses import (
    ErrorResponse,
    FeriaStateResponse,
    HealthResponse,
    HistoricalFeriaListResponse,
    HistoricalFeriaResponse,
    LiveReportResponse,
    RecordSaleResponse,
    ReportSummaryResponse,
    SaleResponse,
    TerminalStatusResponse,
)
from feria.application.services import (
    get_lifecycle_manager,
    get_report_engine,
    get_sale_ledger,
    reset_services,
)
from feria.application.use_cases import (
    ActivateFeriaUseCase,
    ArchiveFeriaUseCase,
    DeleteHistoricalFeriaUseCase,
    GetHistoricalFeriaUseCase,
    GetLiveReportUseCase,
    RecordSaleUseCase,
    SaveFeriaConfigUseCase,
)

__all__ = [
    # Request DTOs
    "FeriaConfigRequest",
    "CartLineRequest",
    "RecordSaleRequest",
    "ConnectivityRequest",
    # Response DTOs
    "FeriaStateResponse",
    "SaleResponse",
    "RecordSaleResponse",
    "ReportSummaryResponse",
    "LiveReportResponse",
    "HistoricalFeriaResponse",
    "HistoricalFeriaListResponse",
    "TerminalStatusResponse",
    "HealthResponse",
    "ErrorResponse",
    # Services
    "get_report_engine",
    "get_sale_ledger",
    "get_lifecycle_manager",
    "reset_services",
    # Use cases
    "RecordSaleUseCase",
    "SaveFeriaConfigUseCase",
    "GetLiveReportUseCase",
    "ArchiveFeriaUseCase",
    "ActivateFeriaUseCase",
    "DeleteHistoricalFeriaUseCase",
    "GetHistoricalFeriaUseCase",
]
