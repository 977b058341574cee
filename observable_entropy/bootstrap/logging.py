"""Bootstrap wiring for logging configuration."""

from __future__ import annotations

from typing import Any

from observable_entropy.infrastructure.observability import (
    configure_structlog as _configure_structlog,
)


def configure_structlog(environment: str, **options: Any) -> None:
    """Configure structlog for the given environment."""
    _configure_structlog(environment=environment, **options)


__all__ = ["configure_structlog"]
