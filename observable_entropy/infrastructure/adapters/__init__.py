"""Adapters for external systems: the content origin and the key-value store."""

from observable_entropy.infrastructure.adapters.github_content_origin import (
    GitHubContentOrigin,
)
from observable_entropy.infrastructure.adapters.redis_key_value_store import (
    RedisKeyValueStore,
)

__all__ = ["GitHubContentOrigin", "RedisKeyValueStore"]
