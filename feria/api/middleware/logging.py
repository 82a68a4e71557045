"""
Request logging middleware.

Binds a short request id and the terminal operator into the logging context
so sale and lifecycle events can be traced back to the request that caused
them.
"""

import time
import uuid
from collections.abc import Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from feria.config import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

OPERATOR_HEADER = "X-Operator-Id"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs one ``request_completed`` event per request with its timing."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = uuid.uuid4().hex[:8]
        request.state.request_id = request_id

        clear_request_context()
        bind_request_context(request_id=request_id, operator=request.headers.get(OPERATOR_HEADER))
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
            )
            raise
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000

        logger.info(
            "request_completed",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=round(elapsed_ms, 2),
        )
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{elapsed_ms:.2f}ms"
        return response
