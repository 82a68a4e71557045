"""
FastAPI application factory.

Creates and configures the main application instance.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from feria import __version__
from feria.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from feria.api.middleware.error_handler import setup_exception_handlers
from feria.api.middleware.logging import OPERATOR_HEADER
from feria.api.routes import feria_router, health_router, sales_router, terminal_router
from feria.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Migrate and open the store, then bring the terminal ledger up.

    A failed migration aborts startup; the migrator has already restored the
    previous database file.
    """
    from feria.application.services import get_sale_ledger, reset_services
    from feria.infrastructure.storage.sqlite import close_pool, get_pool
    from feria.infrastructure.storage.sqlite.migrations import run_migrations

    settings = get_settings()
    logger.info("application_starting", environment=settings.environment)

    results = await run_migrations()
    failed = [r.version for r in results if not r.success]
    if failed:
        logger.error("database_migration_failed", versions=failed)
        raise RuntimeError(f"migrations failed: {', '.join(failed)}")
    await get_pool()

    # Sales queued before the last shutdown are pending again
    ledger = await get_sale_ledger()
    if ledger.pending_count and ledger.is_online:
        await ledger.drain()

    logger.info("application_started", pending=ledger.pending_count)

    yield

    logger.info("application_stopping")
    await close_pool()
    reset_services()
    logger.info("application_stopped")


ROUTERS = (health_router, feria_router, sales_router, terminal_router)


def create_app() -> FastAPI:
    """
    Build the API: the terminal's sale and connectivity endpoints plus the
    administrative fair lifecycle endpoints.
    """
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=f"{settings.app_name} API",
        description="Fair point-of-sale: sales ledger, live reports and fair lifecycle",
        version=__version__,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # Added innermost first: errors are rendered outside the request log
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
    if settings.api.cors_origins:
        # Browser terminals send the operator header and read the timing ones
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["Content-Type", OPERATOR_HEADER],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )

    setup_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "feria.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )
