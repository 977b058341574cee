"""Structured logging configuration with structlog.

Production emits one JSON object per line for log aggregation; any other
environment renders colored console output. The level comes from the
``LOG_LEVEL`` environment variable (default INFO).

Log Entry Format (production):
    {
        "timestamp": "2026-01-01T00:00:00.000000Z",
        "level": "info",
        "event": "entry_submitted",
        "correlation_id": "uuid",
        "service": "observable-entropy",
        ...additional context
    }

Usage:
    configure_structlog(environment="production")

    from structlog import get_logger
    logger = get_logger(__name__)
    logger.info("event_name", key="value")
"""

import logging
import os
from typing import Any, TextIO, cast

import structlog
from structlog.typing import Processor

from observable_entropy.infrastructure.observability.correlation import (
    correlation_id_processor,
)

LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_LOG_LEVEL = "INFO"
SERVICE_NAME = "observable-entropy"


def _get_log_level() -> int:
    """Resolve LOG_LEVEL to a logging level, INFO when unknown."""
    level_name = os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def _add_service_name(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_structlog(
    environment: str = "production",
    *,
    level: int | None = None,
    log_file: TextIO | None = None,
    cache_loggers: bool = True,
) -> None:
    """Configure structlog for the process.

    Call once at startup (API lifespan or CLI entry).

    Args:
        environment: 'production' for JSON output, anything else for
            console output.
        level: Minimum level. Defaults to LOG_LEVEL from the environment.
        log_file: Stream to write to. Defaults to stdout.
        cache_loggers: Cache loggers on first use. Disable when the
            output stream is swapped between runs (tests, CLI runners).
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        cast(Processor, correlation_id_processor),
        cast(Processor, _add_service_name),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if environment == "production":
        final_processors: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        final_processors = [structlog.dev.ConsoleRenderer(colors=True)]

    structlog.configure(
        processors=shared_processors + final_processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level() if level is None else level
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=log_file),
        cache_logger_on_first_use=cache_loggers,
    )


def get_logger_for_component(component: str) -> Any:
    """Get a logger with the component name already bound.

    Args:
        component: Component name, e.g. ``github_content_origin``.

    Returns:
        A bound structlog logger.
    """
    return structlog.get_logger().bind(component=component)
