"""FastAPI application factory."""

from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from ... import __version__
from ...config import Config
from .dependencies import get_config, get_orchestrator
from .models.responses import HealthResponse
from .routers import captions_router, generate_router, jobs_router, styles_router


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    orchestrator = app.dependency_overrides.get(get_orchestrator, get_orchestrator)()
    orchestrator.start()

    yield

    # Shutdown
    orchestrator.shutdown(wait=True)


def create_app(config: Config | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        config: Optional configuration. Uses the cached config if not provided.

    Returns:
        The FastAPI application.
    """
    if config is None:
        config = get_config()

    app = FastAPI(
        title="Motion Studio API",
        description="Prompt-to-video and caption rendering on Remotion Lambda",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(generate_router, prefix="/api/v1")
    app.include_router(captions_router, prefix="/api/v1")
    app.include_router(jobs_router, prefix="/api/v1")
    app.include_router(styles_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse)
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(timestamp=datetime.now())

    videos_dir = Path(config.paths.videos_dir)
    videos_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/videos", StaticFiles(directory=videos_dir), name="videos")

    return app
