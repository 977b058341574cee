"""Redis key-value store adapter.

Values are stored as plain strings with an absolute expiry (``SET ... EXAT``),
so Redis itself enforces the contribution pool's self-destruct. The item
metadata reports that expiry, read back with ``EXPIRETIME`` (Redis 7+).
"""

from __future__ import annotations

import re
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from observable_entropy.application.ports.key_value_store import (
    KeyValueItem,
    KeyValueStoreError,
    KeyValueStorePort,
)
from observable_entropy.infrastructure.observability.logging import (
    get_logger_for_component,
)

# Redis glob metacharacters
_GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def escape_glob(prefix: str) -> str:
    """Escape a literal prefix for use in a Redis MATCH pattern."""
    return _GLOB_SPECIAL.sub(r"\\\1", prefix)


class RedisKeyValueStore(KeyValueStorePort):
    """Key-value store backed by Redis.

    Example:
        store = RedisKeyValueStore.from_url("redis://localhost:6379/0")
        await store.write("entry::abc", '{"entropy": "..."}', expiration=1700000600)
    """

    def __init__(self, client: aioredis.Redis, scan_count: int = 500) -> None:
        """Initialize the store.

        Args:
            client: Redis client created with ``decode_responses=True``.
            scan_count: COUNT hint for SCAN batches.
        """
        self._redis = client
        self._scan_count = scan_count
        self._log = get_logger_for_component("redis_key_value_store")

    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> RedisKeyValueStore:
        """Create a store from a Redis URL."""
        return cls(aioredis.from_url(url, decode_responses=True), **kwargs)

    async def close(self) -> None:
        """Close the Redis connection pool."""
        await self._redis.aclose()

    async def read(self, key: str) -> KeyValueItem | None:
        try:
            async with self._redis.pipeline(transaction=False) as pipe:
                pipe.get(key)
                pipe.expiretime(key)
                value, expires_at = await pipe.execute()
        except RedisError as e:
            self._log.warning("store_read_failed", key=key, error=str(e))
            raise KeyValueStoreError(f"read failed for {key} : {e}") from e

        if value is None:
            return None
        metadata: dict[str, Any] = {}
        if isinstance(expires_at, int) and expires_at > 0:
            metadata["expiration"] = expires_at
        return KeyValueItem(value=value, metadata=metadata)

    async def write(self, key: str, value: str, *, expiration: int) -> bool:
        try:
            accepted = await self._redis.set(key, value, exat=expiration)
        except RedisError as e:
            self._log.error("store_write_failed", key=key, error=str(e))
            return False
        if not accepted:
            self._log.error("store_write_rejected", key=key)
            return False
        return True

    async def list_keys(self, prefix: str) -> list[str]:
        try:
            return [
                key
                async for key in self._redis.scan_iter(
                    match=f"{escape_glob(prefix)}*", count=self._scan_count
                )
            ]
        except RedisError as e:
            self._log.warning("store_list_failed", prefix=prefix, error=str(e))
            raise KeyValueStoreError(f"list failed for {prefix} : {e}") from e
