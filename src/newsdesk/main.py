"""FastAPI application entry point."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from newsdesk.api.router import api_router
from newsdesk.config import get_settings
from newsdesk.core.logging import get_logger, setup_logging
from newsdesk.runtime import app_lifespan

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: builds the orchestrator and starts the publish scheduler."""
    settings = get_settings()
    setup_logging(settings)

    async with app_lifespan(settings) as state:
        app.state.newsdesk = state
        yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="Newsdesk",
        description="Breaking news vs. scheduled content decisions and video pipeline orchestration",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Infrastructure (no prefix, not versioned)
    @app.get("/health")
    async def health() -> dict[str, str]:
        """Liveness check, always ok if process is running."""
        return {"status": "ok"}

    # Domain API
    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
