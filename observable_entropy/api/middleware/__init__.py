"""HTTP middleware."""

from observable_entropy.api.middleware.logging_middleware import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
