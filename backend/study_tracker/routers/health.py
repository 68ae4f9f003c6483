"""
Health Endpoints

Endpoints:
- GET /api/health - Liveness; no database access
- GET /api/health/detailed - Database reachability, calendar zone and
  quiz provider configuration
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.config import settings
from study_tracker.db.base import get_db
from study_tracker.services.quiz.generator import has_credentials

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/health", tags=["health"])


async def _check_postgres(db: AsyncSession) -> dict:
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Health check: PostgreSQL unreachable: {e}")
        return {"status": "unhealthy", "error": str(e)}
    return {"status": "healthy"}


@router.get("")
async def health_check():
    """Liveness check."""
    return {"status": "healthy", "service": settings.APP_NAME}


@router.get("/detailed")
async def detailed_health_check(db: AsyncSession = Depends(get_db)):
    """
    Readiness report.

    status is "degraded" when PostgreSQL is unreachable. Quiz providers
    without an API key are listed but do not degrade the service, since
    quiz generation falls back to templated questions.
    """
    postgres = await _check_postgres(db)

    return {
        "status": "healthy" if postgres["status"] == "healthy" else "degraded",
        "service": settings.APP_NAME,
        "timezone": settings.LOCAL_TIMEZONE,
        "dependencies": {
            "postgres": postgres,
            "quiz_providers": {
                model: "configured" if has_credentials(model) else "missing_api_key"
                for model in settings.QUIZ_MODELS
            },
        },
    }
