"""Health endpoints for the fair backend and the terminal it serves."""

import time

from fastapi import APIRouter, Depends

from feria.api.dependencies import get_app_settings, get_ledger
from feria.application.dto.responses import (
    HealthResponse,
    ProviderHealthResponse,
    TerminalStatusResponse,
)
from feria.config import Settings
from feria.core.services import SaleLedger

router = APIRouter(prefix="/api/health", tags=["health"])

_started_at = time.monotonic()


def _terminal_status(ledger: SaleLedger) -> TerminalStatusResponse:
    return TerminalStatusResponse(
        connectivity=ledger.connectivity.value,
        pending_count=ledger.pending_count,
    )


@router.get("", response_model=HealthResponse)
async def health_check(
    settings: Settings = Depends(get_app_settings),
    ledger: SaleLedger = Depends(get_ledger),
) -> HealthResponse:
    """
    Service liveness plus the terminal indicator.

    Reported as ``degraded`` while the terminal is offline: sales are still
    accepted but only reach the store once connectivity returns.
    """
    return HealthResponse(
        status="healthy" if ledger.is_online else "degraded",
        version=settings.app_version,
        uptime_seconds=time.monotonic() - _started_at,
        terminal=_terminal_status(ledger),
    )


@router.get("/db", response_model=HealthResponse)
async def db_health(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Round-trip to SQLite, reporting latency and the live sale count."""
    from feria.infrastructure.storage.sqlite import get_connection

    started = time.perf_counter()
    try:
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM active_sales")
            (live_sales,) = await cursor.fetchone()
        database = ProviderHealthResponse(
            name=f"sqlite ({live_sales} live sales)",
            available=True,
            latency_ms=(time.perf_counter() - started) * 1000,
        )
    except Exception as e:
        database = ProviderHealthResponse(name="sqlite", available=False, error=str(e))

    return HealthResponse(
        status="healthy" if database.available else "unhealthy",
        version=settings.app_version,
        uptime_seconds=time.monotonic() - _started_at,
        database=database,
    )
