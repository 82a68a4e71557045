"""
Structured logging for the fair backend.

Events are snake_case with keyword context. A request's id and operator are
bound once by the HTTP middleware and then appear on every event logged
while that request runs, including ledger and lifecycle events.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from feria.config.settings import Settings, get_settings

# Libraries that log every statement or access line at INFO
QUIET_LOGGERS = ("aiosqlite", "uvicorn.access", "httpx")


def add_app_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp events with the app name and environment."""
    settings = get_settings()
    event_dict.setdefault("app", settings.app_name)
    event_dict.setdefault("environment", settings.environment)
    return event_dict


def drop_empty_fields(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Remove keys logged as None (an unknown operator, no error, ...)."""
    return {k: v for k, v in event_dict.items() if v is not None}


def _use_json(settings: Settings) -> bool:
    if settings.log_json is not None:
        return settings.log_json
    return settings.environment != "development"


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger from settings."""
    settings = get_settings()

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
        drop_empty_fields,
    ]
    if _use_json(settings):
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=settings.log_level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_request_context(**values: Any) -> None:
    """Attach values to every event logged in the current task."""
    structlog.contextvars.bind_contextvars(**values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
