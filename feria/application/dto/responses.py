"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
These are the ONLY contracts between use cases and API layer.
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

from feria.core.entities.feria import FeriaActive, FeriaConfig, HistoricalFeria, NoActiveFeria
from feria.core.entities.report import ReportSummary
from feria.core.entities.sale import Sale


class FeriaConfigResponse(BaseModel):
    """Fair configuration."""

    name: str
    price_per_pinta: float
    price_per_litro: float
    date_start: date | None = None
    date_end: date | None = None
    initial_stock: dict[str, float] = Field(default_factory=dict)
    waste_per_pinta_ml: float = 0.0

    @classmethod
    def from_entity(cls, config: FeriaConfig) -> "FeriaConfigResponse":
        return cls(**config.model_dump())


class FeriaStateResponse(BaseModel):
    """Lifecycle state of the active slot."""

    status: Literal["no_active_feria", "feria_active"]
    config: FeriaConfigResponse | None = None

    @classmethod
    def from_state(cls, state: NoActiveFeria | FeriaActive) -> "FeriaStateResponse":
        if isinstance(state, FeriaActive):
            return cls(status=state.status, config=FeriaConfigResponse.from_entity(state.config))
        return cls(status=state.status)


class SaleItemResponse(BaseModel):
    """Sale line."""

    style: str
    unit: str
    quantity: float


class SaleResponse(BaseModel):
    """Recorded sale."""

    id: str | None = Field(default=None, description="Store id, or temporary id while queued")
    client_ref: str
    schema_version: int
    timestamp: datetime
    items: list[SaleItemResponse] = Field(default_factory=list)
    unit: str | None = None
    quantity: float | None = None
    style: str | None = None
    total_amount: float
    payment_method: str
    operator_id: str

    @classmethod
    def from_entity(cls, sale: Sale) -> "SaleResponse":
        return cls.model_validate(sale.model_dump(mode="json"))


class RecordSaleResponse(BaseModel):
    """Outcome of recording a sale; the terminal never blocks on it."""

    sale: SaleResponse
    queued: bool = Field(..., description="True when the sale is waiting offline")
    pending_count: int


class SaleListResponse(BaseModel):
    """Live sales."""

    sales: list[SaleResponse]
    total: int


class StockSummaryResponse(BaseModel):
    """Stock of one style."""

    style: str
    initial: float
    consumed_liters: float
    wastage_liters: float
    remaining: float
    percentage: int


class ReportSummaryResponse(BaseModel):
    """Financial and volume report."""

    total_pintas: int
    total_litros: int
    total_amount: int
    digital_amount: int
    cash_amount: int
    stock_summary: list[StockSummaryResponse] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, report: ReportSummary) -> "ReportSummaryResponse":
        return cls.model_validate(report.model_dump())


class LiveReportResponse(BaseModel):
    """Report of the running fair."""

    feria: FeriaConfigResponse
    sale_count: int
    report: ReportSummaryResponse


class HistoricalFeriaSummaryResponse(BaseModel):
    """History list entry (without the sale list)."""

    id: str
    name: str
    archived_at: datetime
    sale_count: int
    report: ReportSummaryResponse


class HistoricalFeriaResponse(BaseModel):
    """Full historical fair."""

    id: str
    config: FeriaConfigResponse
    sales: list[SaleResponse] = Field(default_factory=list)
    report: ReportSummaryResponse
    archived_at: datetime

    @classmethod
    def from_entity(cls, feria: HistoricalFeria) -> "HistoricalFeriaResponse":
        return cls(
            id=feria.id or "",
            config=FeriaConfigResponse.from_entity(feria.config),
            sales=[SaleResponse.from_entity(s) for s in feria.sales],
            report=ReportSummaryResponse.from_entity(feria.report_summary),
            archived_at=feria.archived_at,
        )


class HistoricalFeriaListResponse(BaseModel):
    """Archived fairs, most recent first."""

    ferias: list[HistoricalFeriaSummaryResponse]
    total: int


class TerminalStatusResponse(BaseModel):
    """Online/offline indicator for the terminal."""

    connectivity: Literal["online", "offline"]
    pending_count: int
    drained: int | None = Field(default=None, description="Sales replayed by this call")


class ProviderHealthResponse(BaseModel):
    """Provider health status."""

    name: str
    available: bool
    latency_ms: float | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
    terminal: TerminalStatusResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. NO_ACTIVE_FERIA)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    retryable: bool = Field(default=False, description="Re-sending the same request can succeed")
    path: str | None = Field(default=None, description="Request path")
