"""Bootstrap wiring for the entropy resolution and contribution services."""

from __future__ import annotations

from structlog import get_logger

from observable_entropy.application.ports.content_origin import ContentOriginPort
from observable_entropy.application.ports.key_value_store import KeyValueStorePort
from observable_entropy.application.services.contribution_pool_service import (
    ContributionPoolService,
)
from observable_entropy.application.services.entropy_resolution_service import (
    EntropyResolutionService,
)
from observable_entropy.application.services.entropy_verifier import EntropyVerifier
from observable_entropy.config.entropy_config import EntropyServiceConfig
from observable_entropy.infrastructure.adapters.github_content_origin import (
    GitHubContentOrigin,
)
from observable_entropy.infrastructure.cache.origin_response_cache import (
    OriginResponseCache,
)
from observable_entropy.infrastructure.stubs.key_value_store_stub import (
    InMemoryKeyValueStore,
)

logger = get_logger()

_config: EntropyServiceConfig | None = None
_key_value_store: KeyValueStorePort | None = None
_content_origin: ContentOriginPort | None = None
_verifier: EntropyVerifier | None = None
_pool_service: ContributionPoolService | None = None
_resolution_service: EntropyResolutionService | None = None


def get_entropy_config() -> EntropyServiceConfig:
    """Get service configuration, read from the environment once."""
    global _config
    if _config is None:
        _config = EntropyServiceConfig.from_environment()
    return _config


def get_key_value_store() -> KeyValueStorePort:
    """Get key-value store instance.

    Returns the Redis store if REDIS_URL is configured, otherwise falls back
    to the in-memory store (pool contents do not survive a restart).
    """
    global _key_value_store
    if _key_value_store is None:
        config = get_entropy_config()
        if config.redis_url:
            try:
                from observable_entropy.infrastructure.adapters.redis_key_value_store import (
                    RedisKeyValueStore,
                )

                _key_value_store = RedisKeyValueStore.from_url(config.redis_url)
                logger.info("key_value_store_initialized", store_type="Redis")
            except ValueError as e:
                logger.error(
                    "redis_store_init_failed",
                    error=str(e),
                    message="Falling back to in-memory store",
                )
                _key_value_store = InMemoryKeyValueStore()
        else:
            logger.warning(
                "key_value_store_initialized",
                store_type="InMemory",
                message="REDIS_URL not set - using in-memory store (data will not persist)",
            )
            _key_value_store = InMemoryKeyValueStore()
    return _key_value_store


def get_content_origin() -> ContentOriginPort:
    """Get content origin instance with its response cache."""
    global _content_origin
    if _content_origin is None:
        config = get_entropy_config()
        cache = OriginResponseCache(
            success_ttl_seconds=config.success_cache_ttl_seconds,
            latest_ttl_seconds=config.latest_cache_ttl_seconds,
            not_found_ttl_seconds=config.not_found_cache_ttl_seconds,
            max_entries=config.origin_cache_max_entries,
        )
        _content_origin = GitHubContentOrigin(
            base_url=config.origin_base_url,
            branch=config.origin_branch,
            timeout=config.origin_timeout_seconds,
            cache=cache,
        )
    return _content_origin


def get_entropy_verifier() -> EntropyVerifier:
    """Get verifier bound to the configured public key and iteration budget."""
    global _verifier
    if _verifier is None:
        config = get_entropy_config()
        _verifier = EntropyVerifier(
            config.public_key_hex,
            max_iterations=config.max_hash_iterations,
        )
    return _verifier


def get_contribution_pool_service() -> ContributionPoolService:
    """Get contribution pool service instance."""
    global _pool_service
    if _pool_service is None:
        config = get_entropy_config()
        _pool_service = ContributionPoolService(
            get_key_value_store(),
            entry_prefix=config.entry_prefix,
            min_expiry_minutes=config.min_expiry_minutes,
            max_expiry_minutes=config.max_expiry_minutes,
        )
    return _pool_service


def get_entropy_resolution_service() -> EntropyResolutionService:
    """Get the entropy resolution façade."""
    global _resolution_service
    if _resolution_service is None:
        _resolution_service = EntropyResolutionService(
            get_content_origin(),
            get_key_value_store(),
            get_entropy_verifier(),
            get_contribution_pool_service(),
            latest_key=get_entropy_config().latest_key,
        )
    return _resolution_service


async def close_entropy_dependencies() -> None:
    """Release network clients held by the singletons."""
    if isinstance(_content_origin, GitHubContentOrigin):
        await _content_origin.close()
    close = getattr(_key_value_store, "close", None)
    if close is not None:
        await close()


def reset_entropy_dependencies() -> None:
    """Reset entropy dependency singletons."""
    global _config
    global _key_value_store
    global _content_origin
    global _verifier
    global _pool_service
    global _resolution_service

    _config = None
    _key_value_store = None
    _content_origin = None
    _verifier = None
    _pool_service = None
    _resolution_service = None


def set_entropy_config(config: EntropyServiceConfig) -> None:
    """Set custom configuration for testing."""
    global _config
    _config = config


def set_key_value_store(store: KeyValueStorePort) -> None:
    """Set custom key-value store for testing."""
    global _key_value_store
    _key_value_store = store


def set_content_origin(origin: ContentOriginPort) -> None:
    """Set custom content origin for testing."""
    global _content_origin
    _content_origin = origin
