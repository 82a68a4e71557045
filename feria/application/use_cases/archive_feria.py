"""Archive Feria Use Case: move the running fair into history."""

from feria.application.dto.responses import HistoricalFeriaResponse
from feria.config import get_logger
from feria.core.entities.feria import HistoricalFeria
from feria.core.services import FeriaLifecycleManager

logger = get_logger(__name__)


class ArchiveFeriaUseCase:
    """Archive the active fair and empty the active slot."""

    def __init__(self, lifecycle: FeriaLifecycleManager | None = None):
        self._lifecycle = lifecycle

    async def _get_lifecycle(self) -> FeriaLifecycleManager:
        if self._lifecycle is None:
            from feria.application.services import get_lifecycle_manager

            self._lifecycle = await get_lifecycle_manager()
        return self._lifecycle

    async def execute(self) -> HistoricalFeria:
        """Execute archive use case."""
        logger.info("archive_feria_started")
        lifecycle = await self._get_lifecycle()
        record = await lifecycle.archive()
        logger.info("archive_feria_complete", historical_id=record.id, feria=record.name)
        return record

    def to_response(self, record: HistoricalFeria) -> HistoricalFeriaResponse:
        """Convert result to API response."""
        return HistoricalFeriaResponse.from_entity(record)
