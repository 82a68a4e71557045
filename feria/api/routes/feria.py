"""Fair lifecycle endpoints: the active slot and the history."""

from fastapi import APIRouter, Depends, status

from feria.api.dependencies import (
    get_activate_feria_use_case,
    get_archive_feria_use_case,
    get_delete_historical_feria_use_case,
    get_historical_feria_use_case,
    get_lifecycle,
    get_live_report_use_case,
    get_save_feria_config_use_case,
)
from feria.application.dto.requests import FeriaConfigRequest
from feria.application.dto.responses import (
    ErrorResponse,
    FeriaStateResponse,
    HistoricalFeriaListResponse,
    HistoricalFeriaResponse,
    LiveReportResponse,
    ReportSummaryResponse,
)
from feria.application.use_cases import (
    ActivateFeriaUseCase,
    ArchiveFeriaUseCase,
    DeleteHistoricalFeriaUseCase,
    GetHistoricalFeriaUseCase,
    GetLiveReportUseCase,
    SaveFeriaConfigUseCase,
)
from feria.core.services import FeriaLifecycleManager

router = APIRouter(prefix="/api/feria", tags=["feria"])


# Active slot


@router.get("/active", response_model=FeriaStateResponse)
async def get_active_feria(
    lifecycle: FeriaLifecycleManager = Depends(get_lifecycle),
) -> FeriaStateResponse:
    """Current lifecycle state: no fair, or the running fair's config."""
    return FeriaStateResponse.from_state(await lifecycle.current_state())


@router.put(
    "/active",
    response_model=FeriaStateResponse,
    responses={400: {"model": ErrorResponse}},
)
async def save_active_feria(
    request: FeriaConfigRequest,
    use_case: SaveFeriaConfigUseCase = Depends(get_save_feria_config_use_case),
) -> FeriaStateResponse:
    """Create a fair or edit the running one."""
    state = await use_case.execute(request)
    return use_case.to_response(state)


@router.get(
    "/active/report",
    response_model=LiveReportResponse,
    responses={409: {"model": ErrorResponse}},
)
async def get_live_report(
    use_case: GetLiveReportUseCase = Depends(get_live_report_use_case),
) -> LiveReportResponse:
    """Report of the running fair, recomputed from the live sales."""
    result = await use_case.execute()
    return use_case.to_response(result)


@router.post(
    "/active/archive",
    response_model=HistoricalFeriaResponse,
    responses={
        409: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def archive_active_feria(
    use_case: ArchiveFeriaUseCase = Depends(get_archive_feria_use_case),
) -> HistoricalFeriaResponse:
    """Archive the running fair. Re-running after a failure converges."""
    record = await use_case.execute()
    return use_case.to_response(record)


# History


@router.get("/history", response_model=HistoricalFeriaListResponse)
async def list_history(
    use_case: GetHistoricalFeriaUseCase = Depends(get_historical_feria_use_case),
) -> HistoricalFeriaListResponse:
    """Archived fairs, most recent first."""
    records = await use_case.list_all()
    return use_case.to_list_response(records)


@router.get(
    "/history/{feria_id}",
    response_model=HistoricalFeriaResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_history(
    feria_id: str,
    use_case: GetHistoricalFeriaUseCase = Depends(get_historical_feria_use_case),
) -> HistoricalFeriaResponse:
    """One archived fair with its sales and frozen report."""
    return HistoricalFeriaResponse.from_entity(await use_case.execute(feria_id))


@router.get(
    "/history/{feria_id}/report",
    response_model=ReportSummaryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_history_report(
    feria_id: str,
    use_case: GetHistoricalFeriaUseCase = Depends(get_historical_feria_use_case),
) -> ReportSummaryResponse:
    """Report recomputed from the archived config and sales."""
    return ReportSummaryResponse.from_entity(await use_case.recompute_report(feria_id))


@router.post(
    "/history/{feria_id}/activate",
    response_model=FeriaStateResponse,
    responses={
        404: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def activate_history(
    feria_id: str,
    use_case: ActivateFeriaUseCase = Depends(get_activate_feria_use_case),
) -> FeriaStateResponse:
    """Bring an archived fair back; a different running fair is archived first."""
    state = await use_case.execute(feria_id)
    return use_case.to_response(state)


@router.delete(
    "/history/{feria_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_history(
    feria_id: str,
    use_case: DeleteHistoricalFeriaUseCase = Depends(get_delete_historical_feria_use_case),
) -> None:
    """Permanently delete an archived fair."""
    await use_case.execute(feria_id)
