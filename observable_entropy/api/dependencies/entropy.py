"""Entropy API dependencies.

Thin FastAPI dependency functions over the bootstrap singletons. Tests
replace them with ``app.dependency_overrides``.
"""

from observable_entropy.application.services.entropy_resolution_service import (
    EntropyResolutionService,
)
from observable_entropy.bootstrap.entropy import (
    get_entropy_config,
    get_entropy_resolution_service,
)
from observable_entropy.config.entropy_config import EntropyServiceConfig


def get_resolution_service() -> EntropyResolutionService:
    """Get the entropy resolution façade."""
    return get_entropy_resolution_service()


def get_service_config() -> EntropyServiceConfig:
    """Get the service configuration."""
    return get_entropy_config()
