"""Record Sale Use Case: price a terminal cart and hand it to the ledger."""

from dataclasses import dataclass

from pydantic import ValidationError as PydanticValidationError

from feria.application.dto.requests import RecordSaleRequest
from feria.application.dto.responses import RecordSaleResponse, SaleResponse
from feria.config import get_logger, get_settings
from feria.core.entities.feria import FeriaConfig
from feria.core.entities.sale import Sale, SaleItem, ServingUnit
from feria.core.exceptions import NoActiveFeriaError, StorageError, ValidationError
from feria.core.services import FeriaLifecycleManager, SaleLedger

logger = get_logger(__name__)


@dataclass
class RecordSaleResult:
    """Result of recording a sale."""

    sale: Sale
    queued: bool
    pending_count: int


def aggregate_cart(request: RecordSaleRequest) -> list[SaleItem]:
    """Merge cart lines with the same style and unit, keeping first-seen order."""
    totals: dict[tuple[str, str], float] = {}
    for line in request.items:
        key = (line.style.strip(), line.unit)
        totals[key] = totals.get(key, 0.0) + line.quantity

    try:
        return [
            SaleItem(style=style, unit=ServingUnit(unit), quantity=quantity)
            for (style, unit), quantity in totals.items()
        ]
    except PydanticValidationError as e:
        first = e.errors()[0]
        raise ValidationError("items", first["msg"]) from e


class RecordSaleUseCase:
    """Compose a sale from cart lines, price it and record it."""

    def __init__(
        self,
        ledger: SaleLedger | None = None,
        lifecycle: FeriaLifecycleManager | None = None,
    ):
        self._ledger = ledger
        self._lifecycle = lifecycle

    async def _get_ledger(self) -> SaleLedger:
        if self._ledger is None:
            from feria.application.services import get_sale_ledger

            self._ledger = await get_sale_ledger()
        return self._ledger

    async def _get_lifecycle(self) -> FeriaLifecycleManager:
        if self._lifecycle is None:
            from feria.application.services import get_lifecycle_manager

            self._lifecycle = await get_lifecycle_manager()
        return self._lifecycle

    async def _pricing_config(self, ledger: SaleLedger) -> FeriaConfig:
        """Active fair config, or the last one seen when the store is unreachable."""
        lifecycle = await self._get_lifecycle()
        cached = lifecycle.last_known_config

        if not ledger.is_online and cached is not None:
            return cached

        try:
            return await lifecycle.require_active("record_sale")
        except (StorageError, OSError) as e:
            if cached is None:
                raise NoActiveFeriaError("record_sale") from e
            logger.warning("active_feria_read_failed", using_cached=cached.name, error=str(e))
            return cached

    async def execute(
        self,
        request: RecordSaleRequest,
        operator_id: str | None = None,
    ) -> RecordSaleResult:
        """Execute record sale use case."""
        ledger = await self._get_ledger()
        operator = (operator_id or "").strip() or get_settings().ledger.default_operator

        logger.info(
            "record_sale_started",
            lines=len(request.items),
            payment=request.payment_method.value,
            operator=operator,
        )

        # 1. Merge duplicate lines
        items = aggregate_cart(request)

        # 2. Price with the running fair; the total is fixed from here on
        config = await self._pricing_config(ledger)
        total = sum(item.quantity * config.price_for(item.unit) for item in items)

        # 3. Hand over to the ledger (store or offline queue)
        sale = Sale(
            items=tuple(items),
            total_amount=total,
            payment_method=request.payment_method,
            operator_id=operator,
        )
        recorded = await ledger.record_sale(sale)
        queued = any(p.client_ref == recorded.client_ref for p in ledger.pending_sales)

        logger.info(
            "record_sale_complete",
            sale_id=recorded.id,
            total=recorded.total_amount,
            queued=queued,
        )

        return RecordSaleResult(
            sale=recorded,
            queued=queued,
            pending_count=ledger.pending_count,
        )

    def to_response(self, result: RecordSaleResult) -> RecordSaleResponse:
        """Convert result to API response."""
        return RecordSaleResponse(
            sale=SaleResponse.from_entity(result.sale),
            queued=result.queued,
            pending_count=result.pending_count,
        )
