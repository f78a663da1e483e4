"""Main entry point for the SmartSkip service."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from smartskip import __version__
from smartskip.api.deps import init_services
from smartskip.api.routes import analysis, cache, health
from smartskip.config import settings
from smartskip.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Initialize services on startup."""
    settings.ensure_directories()
    init_services(settings)
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="SmartSkip",
        description="Transcript-based detection of skippable video segments",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(health.router)
    app.include_router(analysis.router)
    app.include_router(cache.router)

    return app


app = create_app()


def main() -> None:
    """Run the application."""
    configure_logging(settings.log_level)
    uvicorn.run(
        "smartskip.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
