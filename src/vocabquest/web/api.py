"""FastAPI application factory.

Main entry point for the vocabquest Web API.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vocabquest import __version__
from vocabquest.core.sample_data import seed_database
from vocabquest.db import init_db
from vocabquest.web.routes import (
    health_router,
    learners_router,
    quiz_router,
    ruby_router,
    scenes_router,
    vocabulary_router,
)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    db_path = init_db()
    result = seed_database()
    logger.info(
        "api_startup",
        db_path=str(db_path.absolute()),
        vocabulary_inserted=result.vocabulary_inserted,
        scenes_inserted=result.scenes_inserted,
    )
    yield


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Vocabulary Quest API",
        description="Scene-based Japanese vocabulary study",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health_router)
    app.include_router(vocabulary_router)
    app.include_router(scenes_router)
    app.include_router(learners_router)
    app.include_router(quiz_router)
    app.include_router(ruby_router)

    return app


# Default app instance for uvicorn
app = create_app()
