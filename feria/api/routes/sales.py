"""Terminal sale endpoints."""

from fastapi import APIRouter, Depends, status

from feria.api.dependencies import get_operator_id, get_record_sale_use_case, get_store
from feria.application.dto.requests import RecordSaleRequest
from feria.application.dto.responses import (
    ErrorResponse,
    RecordSaleResponse,
    SaleListResponse,
    SaleResponse,
)
from feria.application.use_cases import RecordSaleUseCase
from feria.core.interfaces import IFeriaStore

router = APIRouter(prefix="/api/sales", tags=["sales"])


@router.post(
    "",
    response_model=RecordSaleResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)
async def record_sale(
    request: RecordSaleRequest,
    operator_id: str | None = Depends(get_operator_id),
    use_case: RecordSaleUseCase = Depends(get_record_sale_use_case),
) -> RecordSaleResponse:
    """Record a sale from cart lines. Queued locally when the store is unreachable."""
    result = await use_case.execute(request, operator_id=operator_id)
    return use_case.to_response(result)


@router.get("", response_model=SaleListResponse)
async def list_sales(store: IFeriaStore = Depends(get_store)) -> SaleListResponse:
    """Live sales of the running fair."""
    sales = await store.list_sales()
    return SaleListResponse(
        sales=[SaleResponse.from_entity(s) for s in sales],
        total=len(sales),
    )
