"""Activate Feria Use Case: bring an archived fair back to the active slot."""

from feria.application.dto.responses import FeriaStateResponse
from feria.config import get_logger
from feria.core.entities.feria import FeriaActive
from feria.core.exceptions import HistoricalFeriaNotFoundError
from feria.core.interfaces.feria_store import IFeriaStore
from feria.core.services import FeriaLifecycleManager

logger = get_logger(__name__)


class ActivateFeriaUseCase:
    """Activate a historical fair by id."""

    def __init__(
        self,
        store: IFeriaStore | None = None,
        lifecycle: FeriaLifecycleManager | None = None,
    ):
        self._store = store
        self._lifecycle = lifecycle

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

    async def execute(self, historical_id: str) -> FeriaActive:
        """Execute activate use case."""
        logger.info("activate_feria_started", historical_id=historical_id)

        store = await self._get_store()
        historical = await store.get_history(historical_id)
        if historical is None:
            raise HistoricalFeriaNotFoundError(historical_id)

        lifecycle = await self._get_lifecycle()
        state = await lifecycle.activate(historical)

        logger.info("activate_feria_complete", feria=state.config.name)
        return state

    def to_response(self, state: FeriaActive) -> FeriaStateResponse:
        """Convert result to API response."""
        return FeriaStateResponse.from_state(state)
