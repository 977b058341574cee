"""Observability infrastructure: structured logging and correlation ids.

Usage:
    from observable_entropy.infrastructure.observability import (
        configure_structlog,
        set_correlation_id,
    )

    configure_structlog(environment="production")
"""

from observable_entropy.infrastructure.observability.correlation import (
    CORRELATION_HEADER,
    correlation_id_processor,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)
from observable_entropy.infrastructure.observability.logging import (
    configure_structlog,
    get_logger_for_component,
)

__all__: list[str] = [
    "CORRELATION_HEADER",
    "configure_structlog",
    "correlation_id_processor",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger_for_component",
    "reset_correlation_id",
    "set_correlation_id",
]
