"""Request correlation ids carried through async code via contextvars.

A request's id is set once by the HTTP middleware (or the CLI) and then
stamped onto every log entry by ``correlation_id_processor``, so origin
fetches, store calls and verifications can be tied back to one request.

Usage:
    token = set_correlation_id(request.headers.get(CORRELATION_HEADER) or generate_correlation_id())
    try:
        ...
    finally:
        reset_correlation_id(token)
"""

from contextvars import ContextVar, Token
from typing import Any

from uuid6 import uuid7

CORRELATION_HEADER = "X-Correlation-ID"

# Empty string means "not inside a request"
_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    """Generate a new, time-ordered correlation id (UUIDv7)."""
    return str(uuid7())


def get_correlation_id() -> str:
    """Get the current correlation id, or an empty string outside a request."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> Token[str]:
    """Set the correlation id for the current context.

    Args:
        correlation_id: The id to carry.

    Returns:
        Token restoring the previous value via ``reset_correlation_id``.
    """
    return _correlation_id.set(correlation_id)


def reset_correlation_id(token: Token[str]) -> None:
    """Restore the correlation id that was current before ``set_correlation_id``."""
    _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor adding ``correlation_id`` to every entry.

    Args:
        logger: The logger instance (unused, required by structlog).
        method_name: The logging method name (unused, required by structlog).
        event_dict: The event dictionary to modify.

    Returns:
        The event dictionary, with correlation_id when one is set.
    """
    correlation_id = get_correlation_id()
    if correlation_id and "correlation_id" not in event_dict:
        event_dict["correlation_id"] = correlation_id
    return event_dict
