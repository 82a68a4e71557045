"""
Domain exceptions for the fair point-of-sale.

Provides specific exception types for different error scenarios.
"""

from typing import Any


class FeriaError(Exception):
    """Base exception for all fair POS errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Storage Exceptions
class StorageError(FeriaError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class StoreUnavailableError(StorageError):
    """The shared store cannot be reached from this terminal."""

    def __init__(self, operation: str, reason: str | None = None):
        super().__init__(
            f"Store unavailable during {operation}" + (f" - {reason}" if reason else ""),
            code="STORE_UNAVAILABLE",
            details={"operation": operation, "reason": reason},
        )


class HistoricalFeriaNotFoundError(StorageError):
    """Historical fair not found in storage."""

    def __init__(self, feria_id: str):
        super().__init__(
            f"Historical fair not found: {feria_id}",
            code="HISTORICAL_FERIA_NOT_FOUND",
            details={"feria_id": feria_id},
        )


# Lifecycle Exceptions
class LifecycleError(FeriaError):
    """Base exception for fair lifecycle operations."""

    pass


class NoActiveFeriaError(LifecycleError):
    """Operation requires an active fair but none is active."""

    def __init__(self, operation: str):
        super().__init__(
            f"No active fair for {operation}",
            code="NO_ACTIVE_FERIA",
            details={"operation": operation},
        )


class LifecycleStepError(LifecycleError):
    """A step of a multi-step archive/activate operation failed.

    Completed steps are not rolled back; re-running the operation converges.
    """

    def __init__(self, operation: str, step: str, reason: str, chunks_done: int = 0):
        super().__init__(
            f"{operation} failed at step '{step}': {reason}",
            code="LIFECYCLE_STEP_FAILED",
            details={
                "operation": operation,
                "step": step,
                "reason": reason,
                "chunks_done": chunks_done,
            },
        )


# Validation Exceptions
class ValidationError(FeriaError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value else None,
            },
        )
