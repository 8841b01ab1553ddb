"""FastAPI application factory.

Main entry point for the SocialHub Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from socialhub.config.app_config import load_app_config
from socialhub.config.logging import configure_logging
from socialhub.db.client import get_client
from socialhub.web.routes import (
    auth_router,
    chat_router,
    dashboard_router,
    drawings_router,
    feed_router,
    health_router,
    library_router,
    maps_router,
    notes_router,
    posts_router,
    quizzes_router,
    storage_router,
    videos_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    config = load_app_config()
    configure_logging(config.logging)
    client = get_client()
    logger.info(
        "api_startup",
        database=str(client.db_path),
        storage_root=str(client.storage.root),
        buckets=config.storage.buckets,
    )
    yield
    logger.info("api_shutdown")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    config = load_app_config()
    app = FastAPI(
        title="SocialHub API",
        description="Web API for the SocialHub productivity and social suite",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(notes_router)
    app.include_router(drawings_router)
    app.include_router(maps_router)
    app.include_router(library_router)
    app.include_router(quizzes_router)
    app.include_router(videos_router)
    app.include_router(feed_router)
    app.include_router(posts_router)
    app.include_router(chat_router)
    app.include_router(dashboard_router)
    app.include_router(storage_router)

    return app


# Default app instance for uvicorn
app = create_app()
