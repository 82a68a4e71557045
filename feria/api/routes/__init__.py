"""API route modules."""

from feria.api.routes.feria import router as feria_router
from feria.api.routes.health import router as health_router
from feria.api.routes.sales import router as sales_router
from feria.api.routes.terminal import router as terminal_router

__all__ = [
    "health_router",
    "feria_router",
    "sales_router",
    "terminal_router",
]
