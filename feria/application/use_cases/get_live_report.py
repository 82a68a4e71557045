"""Get Live Report Use Case: recompute the running fair's report."""

from dataclasses import dataclass

from feria.application.dto.responses import (
    FeriaConfigResponse,
    LiveReportResponse,
    ReportSummaryResponse,
)
from feria.config import get_logger
from feria.core.entities.feria import FeriaConfig
from feria.core.entities.report import ReportSummary
from feria.core.interfaces.feria_store import IFeriaStore
from feria.core.services import FeriaLifecycleManager, ReportEngine

logger = get_logger(__name__)


@dataclass
class LiveReportResult:
    """Result of a live report."""

    config: FeriaConfig
    sale_count: int
    report: ReportSummary


class GetLiveReportUseCase:
    """Summarize the active fair's live sale stream."""

    def __init__(
        self,
        store: IFeriaStore | None = None,
        lifecycle: FeriaLifecycleManager | None = None,
        report_engine: ReportEngine | None = None,
    ):
        self._store = store
        self._lifecycle = lifecycle
        self._engine = report_engine or ReportEngine()

    async def _get_store(self) -> IFeriaStore:
        if self._store is None:
            from feria.infrastructure.storage.sqlite import get_feria_store

            self._store = await get_feria_store()
        return self._store

    async def _get_lifecycle(self) -> FeriaLifecycleManager:
        if self._lifecycle is None:
            from feria.application.services import get_lifecycle_manager

            self._lifecycle = await get_lifecycle_manager()
        return self._lifecycle

    async def execute(self) -> LiveReportResult:
        """Execute live report use case."""
        lifecycle = await self._get_lifecycle()
        config = await lifecycle.require_active("live_report")

        store = await self._get_store()
        sales = await store.list_sales()
        report = self._engine.summarize(config, sales)

        logger.info(
            "live_report_complete",
            feria=config.name,
            sales=len(sales),
            total=report.total_amount,
        )
        return LiveReportResult(config=config, sale_count=len(sales), report=report)

    def to_response(self, result: LiveReportResult) -> LiveReportResponse:
        """Convert result to API response."""
        return LiveReportResponse(
            feria=FeriaConfigResponse.from_entity(result.config),
            sale_count=result.sale_count,
            report=ReportSummaryResponse.from_entity(result.report),
        )
