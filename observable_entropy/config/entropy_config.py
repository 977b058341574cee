"""Observable Entropy service configuration.

Every value can be overridden through the environment for deployment
tuning. Unset or unparseable variables fall back to the defaults.

Environment Variables (Origin):
- ENTROPY_PUBLIC_KEY: Ed25519 publisher key, hex (default: Truestamp key)
- ENTROPY_ORIGIN_BASE_URL: Raw content base URL of the entropy repository
- ENTROPY_ORIGIN_BRANCH: Branch holding the head record and hash index (default: main)
- ENTROPY_ORIGIN_TIMEOUT: Origin request timeout in seconds (default: 10.0)
- ENTROPY_SUCCESS_CACHE_TTL: Cache TTL for 2xx origin responses (default: 86400)
- ENTROPY_LATEST_CACHE_TTL: Cache TTL for the head record (default: 5)
- ENTROPY_NOT_FOUND_CACHE_TTL: Cache TTL for 404 origin responses (default: 5)
- ENTROPY_ORIGIN_CACHE_MAX_ENTRIES: Upper bound on cached origin responses (default: 10000)

Environment Variables (Store and pool):
- REDIS_URL: Key-value store URL; unset selects the in-memory store
- ENTROPY_LATEST_KEY: Store key of the cached latest record (default: latest)
- ENTROPY_MIN_EXPIRY_MINUTES: Lower bound of contribution expiry (default: 10)
- ENTROPY_MAX_EXPIRY_MINUTES: Upper bound of contribution expiry (default: 60)

Environment Variables (Verification and HTTP):
- ENTROPY_MAX_HASH_ITERATIONS: Iteration budget per verification (default: 1000000)
- ENTROPY_RESPONSE_MAX_AGE: Cache-Control max-age of responses (default: 5)
- ENTROPY_HOME_URL: Redirect target of the root path
- ENVIRONMENT: production (JSON logs) or development (console logs)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_PUBLIC_KEY_HEX = (
    "2682144fd3a0a10edce91b9c622bf7e83ccb3816574e1a4071ad16842954dd26"
)
DEFAULT_ORIGIN_BASE_URL = (
    "https://raw.githubusercontent.com/truestamp/observable-entropy"
)
DEFAULT_HOME_URL = "https://observable-entropy.truestamp.com"

DEFAULT_MIN_EXPIRY_MINUTES = 10
DEFAULT_MAX_EXPIRY_MINUTES = 60
DEFAULT_MAX_HASH_ITERATIONS = 1_000_000

# One day for immutable content, a few seconds for anything that moves
DEFAULT_SUCCESS_CACHE_TTL_SECONDS = 86400
DEFAULT_LATEST_CACHE_TTL_SECONDS = 5
DEFAULT_NOT_FOUND_CACHE_TTL_SECONDS = 5
DEFAULT_ORIGIN_CACHE_MAX_ENTRIES = 10_000
DEFAULT_RESPONSE_MAX_AGE_SECONDS = 5


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float_env(key: str, default: float) -> float:
    """Get float environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed float value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_str_env(key: str, default: str) -> str:
    """Get string environment variable, treating blank as unset."""
    value = os.environ.get(key)
    if value is None or not value.strip():
        return default
    return value.strip()


@dataclass(frozen=True)
class EntropyServiceConfig:
    """Configuration for the Observable Entropy service.

    Attributes:
        public_key_hex: Ed25519 public key records must be signed with.
        origin_base_url: Raw content base URL of the entropy repository.
        origin_branch: Branch holding the head record and hash index.
        origin_timeout_seconds: Per-request origin timeout.
        redis_url: Key-value store URL. None selects the in-memory store.
        latest_key: Store key of the cached latest record.
        entry_prefix: Key prefix of every contribution pool entry.
        min_expiry_minutes: Inclusive lower bound of contribution expiry.
        max_expiry_minutes: Exclusive upper bound of contribution expiry.
        max_hash_iterations: Iteration budget per verification.
        success_cache_ttl_seconds: Cache TTL of 2xx origin responses.
        latest_cache_ttl_seconds: Cache TTL of the head record.
        not_found_cache_ttl_seconds: Cache TTL of 404 origin responses.
        origin_cache_max_entries: Upper bound on cached origin responses.
        response_max_age_seconds: Cache-Control max-age of HTTP responses.
        home_redirect_url: Redirect target of ``GET /``.
        environment: ``production`` or ``development``.
    """

    public_key_hex: str = DEFAULT_PUBLIC_KEY_HEX
    origin_base_url: str = DEFAULT_ORIGIN_BASE_URL
    origin_branch: str = "main"
    origin_timeout_seconds: float = 10.0
    redis_url: str | None = None
    latest_key: str = "latest"
    entry_prefix: str = "entry::"
    min_expiry_minutes: int = DEFAULT_MIN_EXPIRY_MINUTES
    max_expiry_minutes: int = DEFAULT_MAX_EXPIRY_MINUTES
    max_hash_iterations: int = DEFAULT_MAX_HASH_ITERATIONS
    success_cache_ttl_seconds: int = DEFAULT_SUCCESS_CACHE_TTL_SECONDS
    latest_cache_ttl_seconds: int = DEFAULT_LATEST_CACHE_TTL_SECONDS
    not_found_cache_ttl_seconds: int = DEFAULT_NOT_FOUND_CACHE_TTL_SECONDS
    origin_cache_max_entries: int = DEFAULT_ORIGIN_CACHE_MAX_ENTRIES
    response_max_age_seconds: int = DEFAULT_RESPONSE_MAX_AGE_SECONDS
    home_redirect_url: str = DEFAULT_HOME_URL
    environment: str = "production"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        try:
            key_bytes = bytes.fromhex(self.public_key_hex)
        except ValueError:
            raise ValueError(
                f"public_key_hex must be hex encoded, got {self.public_key_hex!r}"
            ) from None
        if len(key_bytes) != 32:
            raise ValueError(
                f"public_key_hex must encode 32 bytes, got {len(key_bytes)}"
            )
        if not self.origin_base_url.startswith(("http://", "https://")):
            raise ValueError(
                f"origin_base_url must be an http(s) URL, got {self.origin_base_url!r}"
            )
        if self.origin_timeout_seconds <= 0:
            raise ValueError(
                f"origin_timeout_seconds must be positive, got {self.origin_timeout_seconds}"
            )
        if self.min_expiry_minutes < 1:
            raise ValueError(
                f"min_expiry_minutes must be positive, got {self.min_expiry_minutes}"
            )
        if self.max_expiry_minutes <= self.min_expiry_minutes:
            raise ValueError(
                f"max_expiry_minutes ({self.max_expiry_minutes}) must be greater than "
                f"min_expiry_minutes ({self.min_expiry_minutes})"
            )
        if self.max_hash_iterations < 0:
            raise ValueError(
                f"max_hash_iterations must be non-negative, got {self.max_hash_iterations}"
            )
        if self.origin_cache_max_entries < 1:
            raise ValueError(
                "origin_cache_max_entries must be at least 1, "
                f"got {self.origin_cache_max_entries}"
            )
        for name in (
            "success_cache_ttl_seconds",
            "latest_cache_ttl_seconds",
            "not_found_cache_ttl_seconds",
            "response_max_age_seconds",
        ):
            if getattr(self, name) < 0:
                raise ValueError(
                    f"{name} must be non-negative, got {getattr(self, name)}"
                )

    @property
    def cache_control(self) -> str:
        """Cache-Control header value for successful responses."""
        age = self.response_max_age_seconds
        return f"public, max-age={age}, s-max-age={age}"

    @classmethod
    def from_environment(cls) -> EntropyServiceConfig:
        """Create config from environment variables with defaults.

        Returns:
            EntropyServiceConfig with values from environment or defaults.

        Raises:
            ValueError: If the resulting combination of values is invalid.
        """
        redis_url = os.environ.get("REDIS_URL", "").strip() or None
        return cls(
            public_key_hex=_get_str_env("ENTROPY_PUBLIC_KEY", DEFAULT_PUBLIC_KEY_HEX),
            origin_base_url=_get_str_env(
                "ENTROPY_ORIGIN_BASE_URL", DEFAULT_ORIGIN_BASE_URL
            ),
            origin_branch=_get_str_env("ENTROPY_ORIGIN_BRANCH", "main"),
            origin_timeout_seconds=_get_float_env("ENTROPY_ORIGIN_TIMEOUT", 10.0),
            redis_url=redis_url,
            latest_key=_get_str_env("ENTROPY_LATEST_KEY", "latest"),
            min_expiry_minutes=_get_int_env(
                "ENTROPY_MIN_EXPIRY_MINUTES", DEFAULT_MIN_EXPIRY_MINUTES
            ),
            max_expiry_minutes=_get_int_env(
                "ENTROPY_MAX_EXPIRY_MINUTES", DEFAULT_MAX_EXPIRY_MINUTES
            ),
            max_hash_iterations=_get_int_env(
                "ENTROPY_MAX_HASH_ITERATIONS", DEFAULT_MAX_HASH_ITERATIONS
            ),
            success_cache_ttl_seconds=_get_int_env(
                "ENTROPY_SUCCESS_CACHE_TTL", DEFAULT_SUCCESS_CACHE_TTL_SECONDS
            ),
            latest_cache_ttl_seconds=_get_int_env(
                "ENTROPY_LATEST_CACHE_TTL", DEFAULT_LATEST_CACHE_TTL_SECONDS
            ),
            not_found_cache_ttl_seconds=_get_int_env(
                "ENTROPY_NOT_FOUND_CACHE_TTL", DEFAULT_NOT_FOUND_CACHE_TTL_SECONDS
            ),
            origin_cache_max_entries=_get_int_env(
                "ENTROPY_ORIGIN_CACHE_MAX_ENTRIES", DEFAULT_ORIGIN_CACHE_MAX_ENTRIES
            ),
            response_max_age_seconds=_get_int_env(
                "ENTROPY_RESPONSE_MAX_AGE", DEFAULT_RESPONSE_MAX_AGE_SECONDS
            ),
            home_redirect_url=_get_str_env("ENTROPY_HOME_URL", DEFAULT_HOME_URL),
            environment=_get_str_env("ENVIRONMENT", "production"),
        )


# Default configuration for production use
DEFAULT_ENTROPY_CONFIG = EntropyServiceConfig()

# Testing config: no response caching, console logs, small iteration budget
TEST_ENTROPY_CONFIG = EntropyServiceConfig(
    max_hash_iterations=10_000,
    success_cache_ttl_seconds=0,
    latest_cache_ttl_seconds=0,
    not_found_cache_ttl_seconds=0,
    environment="development",
)
