"""
Integration test configuration with testcontainers.

This module provides a session-scoped Redis 7 container:
- The container is started once per test session (scope="session")
- Redis state is flushed between tests (function-scoped fixtures)
- The container is automatically cleaned up after all tests complete

Usage:
    @pytest.mark.integration
    async def test_example(redis_store: RedisKeyValueStore) -> None:
        ...

Note: Docker must be running for these fixtures to work.
"""

from collections.abc import AsyncGenerator, Generator

import pytest
import redis.asyncio as aioredis
from testcontainers.redis import RedisContainer

from observable_entropy.infrastructure.adapters.redis_key_value_store import (
    RedisKeyValueStore,
)


@pytest.fixture(scope="session")
def redis_container() -> Generator[RedisContainer, None, None]:
    """Session-scoped Redis 7 container (EXPIRETIME needs Redis 7)."""
    with RedisContainer("redis:7-alpine") as redis_cont:
        yield redis_cont


@pytest.fixture
async def redis_client(
    redis_container: RedisContainer,
) -> AsyncGenerator[aioredis.Redis, None]:  # type: ignore[type-arg]
    """Per-test Redis client with FLUSHDB isolation."""
    host = redis_container.get_container_host_ip()
    port = redis_container.get_exposed_port(6379)

    client: aioredis.Redis = aioredis.Redis(  # type: ignore[type-arg]
        host=host, port=int(port), decode_responses=True
    )

    yield client

    await client.flushdb()
    await client.aclose()


@pytest.fixture
def redis_store(redis_client: aioredis.Redis) -> RedisKeyValueStore:  # type: ignore[type-arg]
    """Key-value store over the per-test client."""
    return RedisKeyValueStore(redis_client, scan_count=10)
