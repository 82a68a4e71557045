"""Historical fair queries: list, fetch, recomputed report."""

from feria.application.dto.responses import (
    HistoricalFeriaListResponse,
    HistoricalFeriaSummaryResponse,
    ReportSummaryResponse,
)
from feria.config import get_logger
from feria.core.entities.feria import HistoricalFeria
from feria.core.entities.report import ReportSummary
from feria.core.exceptions import HistoricalFeriaNotFoundError
from feria.core.interfaces.feria_store import IFeriaStore
from feria.core.services import ReportEngine

logger = get_logger(__name__)


class GetHistoricalFeriaUseCase:
    """Read-only access to the fair history."""

    def __init__(
        self,
        store: IFeriaStore | None = None,
        report_engine: ReportEngine | None = None,
    ):
        self._store = store
        self._engine = report_engine or ReportEngine()

    async def _get_store(self) -> IFeriaStore:
        if self._store is None:
            from feria.infrastructure.storage.sqlite import get_feria_store

            self._store = await get_feria_store()
        return self._store

    async def list_all(self) -> list[HistoricalFeria]:
        """All archived fairs, most recently archived first."""
        store = await self._get_store()
        return await store.list_history()

    async def execute(self, historical_id: str) -> HistoricalFeria:
        """Fetch one archived fair."""
        store = await self._get_store()
        record = await store.get_history(historical_id)
        if record is None:
            raise HistoricalFeriaNotFoundError(historical_id)
        return record

    async def recompute_report(self, historical_id: str) -> ReportSummary:
        """
        Recompute the report from the archived config and sales.

        The stored summary is left as archived.
        """
        record = await self.execute(historical_id)
        report = self._engine.summarize(record.config, record.sales)
        if report != record.report_summary:
            logger.info(
                "historical_report_differs",
                historical_id=historical_id,
                archived_total=record.report_summary.total_amount,
                recomputed_total=report.total_amount,
            )
        return report

    def to_list_response(self, records: list[HistoricalFeria]) -> HistoricalFeriaListResponse:
        """Convert a history listing to API response."""
        return HistoricalFeriaListResponse(
            ferias=[
                HistoricalFeriaSummaryResponse(
                    id=r.id or "",
                    name=r.name,
                    archived_at=r.archived_at,
                    sale_count=len(r.sales),
                    report=ReportSummaryResponse.from_entity(r.report_summary),
                )
                for r in records
            ],
            total=len(records),
        )
