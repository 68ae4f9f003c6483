"""
Study Tracker API

FastAPI application entry point.

Run:
    uvicorn study_tracker.main:app --reload --app-dir backend
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from study_tracker.config import settings
from study_tracker.db.base import close_db, init_db
from study_tracker.middleware.error_handling import setup_error_handling
from study_tracker.routers import (
    analytics_router,
    assignments_router,
    dashboard_router,
    flashcards_router,
    health_router,
    quiz_router,
    study_sessions_router,
    subjects_router,
)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )


setup_logging(settings.DEBUG)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup and release the pool on shutdown."""
    logger.info(f"Starting {settings.APP_NAME}")
    await init_db()
    yield
    await close_db()
    logger.info(f"Shutting down {settings.APP_NAME}")


def create_app() -> FastAPI:
    """Build the FastAPI application with middleware and routers."""
    app = FastAPI(title=f"{settings.APP_NAME} API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_error_handling(app, debug=settings.DEBUG)

    app.include_router(health_router.router)
    app.include_router(subjects_router.router)
    app.include_router(study_sessions_router.router)
    app.include_router(analytics_router.router)
    app.include_router(flashcards_router.router)
    app.include_router(quiz_router.router)
    app.include_router(assignments_router.router)
    app.include_router(dashboard_router.router)

    return app


app = create_app()
