"""Save Feria Config Use Case: create or edit the running fair."""

from pydantic import ValidationError as PydanticValidationError

from feria.application.dto.requests import FeriaConfigRequest
from feria.application.dto.responses import FeriaStateResponse
from feria.config import get_logger
from feria.core.entities.feria import FeriaActive, FeriaConfig
from feria.core.exceptions import ValidationError
from feria.core.services import FeriaLifecycleManager

logger = get_logger(__name__)


class SaveFeriaConfigUseCase:
    """Write a configuration into the active slot."""

    def __init__(self, lifecycle: FeriaLifecycleManager | None = None):
        self._lifecycle = lifecycle

    async def _get_lifecycle(self) -> FeriaLifecycleManager:
        if self._lifecycle is None:
            from feria.application.services import get_lifecycle_manager

            self._lifecycle = await get_lifecycle_manager()
        return self._lifecycle

    async def execute(self, request: FeriaConfigRequest) -> FeriaActive:
        """Execute save config use case."""
        try:
            config = FeriaConfig(**request.model_dump())
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(p) for p in first["loc"]) or "config"
            raise ValidationError(field, first["msg"]) from e

        lifecycle = await self._get_lifecycle()
        state = await lifecycle.save_active_config(config)

        logger.info(
            "save_feria_config_complete",
            feria=config.name,
            styles=len(config.initial_stock),
        )
        return state

    def to_response(self, state: FeriaActive) -> FeriaStateResponse:
        """Convert result to API response."""
        return FeriaStateResponse.from_state(state)
