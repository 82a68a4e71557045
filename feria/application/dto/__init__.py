"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from feria.application.dto.requests import (
    CartLineRequest,
    ConnectivityRequest,
    FeriaConfigRequest,
    RecordSaleRequest,
)
from feria.application.dto.responses import (
    ErrorResponse,
    FeriaConfigResponse,
    FeriaStateResponse,
    HealthResponse,
    HistoricalFeriaListResponse,
    HistoricalFeriaResponse,
    HistoricalFeriaSummaryResponse,
    LiveReportResponse,
    ProviderHealthResponse,
    RecordSaleResponse,
    ReportSummaryResponse,
    SaleItemResponse,
    SaleListResponse,
    SaleResponse,
    StockSummaryResponse,
    TerminalStatusResponse,
)

__all__ = [
    # Requests
    "FeriaConfigRequest",
    "CartLineRequest",
    "RecordSaleRequest",
    "ConnectivityRequest",
    # Responses
    "FeriaConfigResponse",
    "FeriaStateResponse",
    "SaleItemResponse",
    "SaleResponse",
    "RecordSaleResponse",
    "SaleListResponse",
    "StockSummaryResponse",
    "ReportSummaryResponse",
    "LiveReportResponse",
    "HistoricalFeriaSummaryResponse",
    "HistoricalFeriaResponse",
    "HistoricalFeriaListResponse",
    "TerminalStatusResponse",
    "HealthResponse",
    "ProviderHealthResponse",
    "ErrorResponse",
]
