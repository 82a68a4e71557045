"""Terminal connectivity endpoints.

The environment reports connectivity transitions here; nothing is polled.
"""

from fastapi import APIRouter, Depends

from feria.api.dependencies import get_ledger
from feria.application.dto.requests import ConnectivityRequest
from feria.application.dto.responses import TerminalStatusResponse
from feria.core.services import SaleLedger

router = APIRouter(prefix="/api/terminal", tags=["terminal"])


@router.get("/status", response_model=TerminalStatusResponse)
async def terminal_status(ledger: SaleLedger = Depends(get_ledger)) -> TerminalStatusResponse:
    """Online/offline indicator and pending queue length."""
    return TerminalStatusResponse(
        connectivity=ledger.connectivity.value,
        pending_count=ledger.pending_count,
    )


@router.post("/connectivity", response_model=TerminalStatusResponse)
async def report_connectivity(
    request: ConnectivityRequest,
    ledger: SaleLedger = Depends(get_ledger),
) -> TerminalStatusResponse:
    """Report a connectivity change. Going online replays the pending queue."""
    drained = None
    if request.online:
        drained = await ledger.on_connectivity_restored()
    else:
        ledger.on_connectivity_lost()

    return TerminalStatusResponse(
        connectivity=ledger.connectivity.value,
        pending_count=ledger.pending_count,
        drained=drained,
    )
