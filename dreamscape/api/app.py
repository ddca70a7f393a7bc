"""
FastAPI application factory.

``create_app()`` assembles the application with CORS, error handlers,
routers, and the health endpoint. The lifespan builds the Archive Store,
profile store and AI services once and holds them on ``app.state``.
The module-level ``app`` instance allows
``uvicorn dreamscape.api.app:app --reload``.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dreamscape import __version__
from dreamscape.api import websocket
from dreamscape.api.middleware.error_handler import register_error_handlers
from dreamscape.api.routes import ai, dreams, profile
from dreamscape.core.config import get_settings
from dreamscape.core.models import HealthResponse
from dreamscape.services.gateway import DreamServices
from dreamscape.services.storage import create_archive_store
from dreamscape.services.storage.local import LocalKeyValueStore
from dreamscape.services.storage.profile import ProfileStore
from dreamscape.services.video.thumbnail import ThumbnailExtractor

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application startup and shutdown lifecycle.

    Startup: open the archive backend and load existing dreams, build the
    provider-backed services.
    Shutdown: dispose the archive backend.
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    local_store = LocalKeyValueStore(settings.local_store_path)
    archive = create_archive_store(settings, local_store)
    await archive.init()

    app.state.settings = settings
    app.state.archive = archive
    app.state.profiles = ProfileStore(local_store)
    app.state.services = DreamServices.from_settings(settings)
    app.state.thumbnails = ThumbnailExtractor(settings.thumbnail_placeholder)
    logger.info(
        "Dreamscape ready (archive=%s, llm=%s, video=%s)",
        settings.archive_backend,
        settings.llm_provider,
        settings.video_provider,
    )
    yield
    await archive.dispose()


def create_app() -> FastAPI:
    """Build and return a fully configured FastAPI application."""

    app = FastAPI(
        title="Dreamscape",
        description="Voice-to-video dream journal: transcription, structuring, "
        "and video generation for recorded dreams.",
        version=__version__,
        lifespan=lifespan,
    )

    # -- CORS --
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -- Error handlers --
    register_error_handlers(app)

    # -- Health check (root-level, not under /api/v1) --
    @app.get("/health", response_model=HealthResponse, tags=["system"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, timestamp=datetime.now(UTC))

    # -- REST routes --
    app.include_router(ai.router, prefix="/api/v1")
    app.include_router(dreams.router, prefix="/api/v1")
    app.include_router(profile.router, prefix="/api/v1")

    # -- WebSocket --
    app.include_router(websocket.router)

    return app


app = create_app()


def main() -> None:
    settings = get_settings()
    uvicorn.run("dreamscape.api.app:app", host=settings.app_host, port=settings.app_port)
