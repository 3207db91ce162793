"""Structured logging configuration using structlog.

JSON output for production, pretty console output for development. Every
event logged while a query is running carries its ``query_id`` and the
current ``attempt`` through structlog's contextvars.

Host applications call ``configure_logging()`` once at startup; without
arguments it reads LOG_LEVEL and ENVIRONMENT from the process settings.
"""

import logging
import sys

import structlog
from structlog.types import EventDict, WrappedLogger

from query_reexecution.config import settings


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add application context to all log events."""
    event_dict["app"] = "query-reexecution"
    return event_dict


def bind_query_context(query_id: str, attempt: int | None = None) -> None:
    """Bind the running query (and attempt, if known) to subsequent log events."""
    if attempt is None:
        structlog.contextvars.bind_contextvars(query_id=query_id)
    else:
        structlog.contextvars.bind_contextvars(query_id=query_id, attempt=attempt)


def clear_query_context() -> None:
    """Drop the query bindings once the orchestrator returns."""
    structlog.contextvars.unbind_contextvars("query_id", "attempt")


def configure_logging(log_level: str | None = None, environment: str | None = None) -> None:
    """Configure structlog for structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL),
            defaults to settings.LOG_LEVEL
        environment: Environment name (development, production),
            defaults to settings.ENVIRONMENT

    Production renders one JSON object per line with ISO timestamps and
    formatted tracebacks. Development renders colored console lines.
    """
    log_level = log_level or settings.LOG_LEVEL
    environment = environment or settings.ENVIRONMENT
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
    ]

    is_production = environment.lower() == "production"
    if is_production:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Route stdlib records (engine client libraries) through the same renderer
    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    handler.setLevel(log_level_int)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level_int)

    logger = structlog.get_logger(__name__)
    logger.info(
        "Logging configured",
        log_level=log_level,
        environment=environment,
        renderer="json" if is_production else "console",
    )
