"""FastAPI application entry point for Observable Entropy."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from observable_entropy import __version__
from observable_entropy.api.middleware.logging_middleware import LoggingMiddleware
from observable_entropy.api.routes.entries import router as entries_router
from observable_entropy.api.routes.entropy import router as entropy_router
from observable_entropy.bootstrap.entropy import (
    close_entropy_dependencies,
    get_entropy_config,
)
from observable_entropy.bootstrap.logging import configure_structlog


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_structlog(get_entropy_config().environment)
    yield
    await close_entropy_dependencies()


def create_app() -> FastAPI:
    """Build the API application."""
    application = FastAPI(
        title="Observable Entropy API",
        description="Signed, independently verifiable public randomness",
        version=__version__,
        lifespan=lifespan,
    )
    application.add_middleware(LoggingMiddleware)
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "HEAD", "POST"],
        allow_headers=["Cache-Control", "Content-Type"],
    )
    application.include_router(entropy_router)
    application.include_router(entries_router)
    return application


app = create_app()
