"""Caching infrastructure."""

from observable_entropy.infrastructure.cache.origin_response_cache import (
    CachedResponse,
    OriginResponseCache,
)

__all__ = ["CachedResponse", "OriginResponseCache"]
