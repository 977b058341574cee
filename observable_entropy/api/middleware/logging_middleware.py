"""Logging middleware for correlation id propagation.

For every HTTP request this middleware:
- takes the correlation id from ``X-Correlation-ID`` or generates one,
- makes it current for the request so every log entry carries it,
- logs request start and completion with timing,
- echoes the id back in the response headers.

Usage:
    app = FastAPI()
    app.add_middleware(LoggingMiddleware)
"""

import time
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from observable_entropy.infrastructure.observability.correlation import (
    CORRELATION_HEADER,
    generate_correlation_id,
    reset_correlation_id,
    set_correlation_id,
)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for correlation id propagation and request logging."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request with correlation id and logging.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware or route handler.

        Returns:
            HTTP response with the correlation id header added.
        """
        correlation_id = request.headers.get(CORRELATION_HEADER) or generate_correlation_id()
        token = set_correlation_id(correlation_id)

        log = structlog.get_logger().bind(
            method=request.method,
            path=request.url.path,
            client_host=request.client.host if request.client else None,
        )
        log.info("request_started")
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = (time.perf_counter() - start_time) * 1000
            log.exception(
                "request_failed",
                duration_ms=round(duration_ms, 2),
                error_type=type(exc).__name__,
            )
            raise
        finally:
            reset_correlation_id(token)

        duration_ms = (time.perf_counter() - start_time) * 1000
        log.info(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
            correlation_id=correlation_id,
        )
        response.headers[CORRELATION_HEADER] = correlation_id
        return response
