"""API routers."""

from observable_entropy.api.routes.entries import router as entries_router
from observable_entropy.api.routes.entropy import router as entropy_router

__all__ = ["entries_router", "entropy_router"]
