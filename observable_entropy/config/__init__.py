"""Configuration module for Observable Entropy.

Available Configurations:
- EntropyServiceConfig: Origin, store, pool, verification and HTTP settings
"""

from observable_entropy.config.entropy_config import (
    DEFAULT_ENTROPY_CONFIG,
    TEST_ENTROPY_CONFIG,
    EntropyServiceConfig,
)

__all__ = [
    "EntropyServiceConfig",
    "DEFAULT_ENTROPY_CONFIG",
    "TEST_ENTROPY_CONFIG",
]
