"""
Error responses for the fair API.

Every failure, whether a domain error, a request that fails schema
validation or an unknown route, is returned as an ``ErrorResponse`` with a
machine-readable code, a hint for the operator and whether simply retrying
the same call can succeed.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from feria.application.dto.responses import ErrorResponse
from feria.config import get_logger
from feria.core.exceptions import (
    FeriaError,
    HistoricalFeriaNotFoundError,
    LifecycleStepError,
    NoActiveFeriaError,
    StorageError,
    StoreUnavailableError,
    ValidationError,
)

logger = get_logger(__name__)

# Checked in order, so subclasses come before their bases
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    HistoricalFeriaNotFoundError: status.HTTP_404_NOT_FOUND,
    NoActiveFeriaError: status.HTTP_409_CONFLICT,
    StoreUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    LifecycleStepError: status.HTTP_502_BAD_GATEWAY,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ValueError: status.HTTP_400_BAD_REQUEST,
}

# Re-running the same request can succeed: lifecycle steps are idempotent
RETRYABLE: tuple[type[Exception], ...] = (StoreUnavailableError, LifecycleStepError)

HINT_MAP: dict[str, str] = {
    "NO_ACTIVE_FERIA": "Create a fair with PUT /api/feria/active or activate one from history.",
    "HISTORICAL_FERIA_NOT_FOUND": "List archived fairs with GET /api/feria/history.",
    "LIFECYCLE_STEP_FAILED": "Completed steps are kept. Retry the same operation to finish it.",
    "STORE_UNAVAILABLE": "The store is unreachable. Sales are queued on the terminal; retry later.",
    "VALIDATION_ERROR": "Check the cart lines and fair configuration values.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    404: "Check the URL; no such resource.",
    405: "Check the HTTP method for this route.",
    409: "The request conflicts with the current fair state.",
    422: "Check the request body fields and types.",
    500: "An internal error occurred. Check server logs.",
    502: "A storage step failed part-way. Retry the operation.",
    503: "The store is temporarily unavailable. Retry later.",
}

HTTP_ERROR_CODES: dict[int, str] = {
    400: "BAD_REQUEST",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    409: "CONFLICT",
    422: "UNPROCESSABLE_ENTITY",
}


def _status_for(exc: Exception) -> int:
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _render(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    detail: str | None = None,
    retryable: bool = False,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code),
        detail=detail,
        retryable=retryable,
        path=request.url.path,
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Render any exception as an ``ErrorResponse``."""
    status_code = _status_for(exc)
    if isinstance(exc, FeriaError):
        error_code, message = exc.code, exc.message
        detail = ", ".join(f"{k}={v}" for k, v in exc.details.items() if v is not None) or None
    else:
        error_code, message, detail = exc.__class__.__name__, str(exc), None

    log = logger.error if status_code >= 500 else logger.warning
    log(
        "request_error",
        path=request.url.path,
        error_code=error_code,
        error=message,
        traceback=traceback.format_exc() if status_code == 500 else None,
    )
    return _render(
        request,
        status_code,
        error_code,
        message,
        detail=detail,
        retryable=isinstance(exc, RETRYABLE),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Catches anything no exception handler claimed."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            return error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the handlers for domain, schema and routing errors."""

    @app.exception_handler(FeriaError)
    async def feria_error_handler(request: Request, exc: FeriaError) -> JSONResponse:
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        problems = [
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        ]
        return _render(
            request,
            422,
            "VALIDATION_ERROR",
            "Request validation failed",
            detail="; ".join(problems),
        )

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return _render(
            request,
            exc.status_code,
            HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR"),
            str(exc.detail or "An error occurred"),
        )
