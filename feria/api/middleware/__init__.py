"""API middleware."""

from feria.api.middleware.error_handler import ErrorHandlerMiddleware
from feria.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware"]
