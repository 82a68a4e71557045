"""Delete Historical Feria Use Case."""

from feria.config import get_logger
from feria.core.services import FeriaLifecycleManager

logger = get_logger(__name__)


class DeleteHistoricalFeriaUseCase:
    """Permanently delete an archived fair."""

    def __init__(self, lifecycle: FeriaLifecycleManager | None = None):
        self._lifecycle = lifecycle

    async def _get_lifecycle(self) -> FeriaLifecycleManager:
        if self._lifecycle is None:
            from feria.application.services import get_lifecycle_manager

            self._lifecycle = await get_lifecycle_manager()
        return self._lifecycle

    async def execute(self, historical_id: str) -> None:
        """Execute delete use case. Raises HistoricalFeriaNotFoundError if absent."""
        lifecycle = await self._get_lifecycle()
        await lifecycle.delete(historical_id)
        logger.info("delete_historical_feria_complete", historical_id=historical_id)
