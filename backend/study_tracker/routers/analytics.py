"""
Analytics API Router

Endpoints for account-wide study statistics.

Endpoints:
- GET /api/analytics/summary - Today/week/month totals and highlights
- GET /api/analytics/daily - Per-day minutes for the last N days
- GET /api/analytics/by-subject - Minutes and sessions per subject
- GET /api/analytics/streaks - Account streak with milestones
"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.config import settings
from study_tracker.db.base import get_db
from study_tracker.dependencies import get_current_user_id
from study_tracker.middleware.error_handling import handle_endpoint_errors
from study_tracker.models.study import (
    DailyStudyData,
    StreakData,
    StudySummary,
    SubjectStudyData,
)
from study_tracker.services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/analytics", tags=["analytics"])


# ===========================================
# Dependency Injection
# ===========================================


async def get_analytics_service(
    db: AsyncSession = Depends(get_db),
) -> AnalyticsService:
    """Get analytics service."""
    return AnalyticsService(db)


# ===========================================
# Analytics Endpoints
# ===========================================


@router.get("/summary", response_model=StudySummary)
@handle_endpoint_errors("Get study summary")
async def get_summary(
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
) -> StudySummary:
    """
    Get headline study statistics.

    Returns:
    - Minutes studied today, this week (from Sunday) and this month
    - Total completed sessions and average length
    - Most studied subject
    - Most productive hour of day
    """
    return await service.get_summary(user_id)


@router.get("/daily", response_model=list[DailyStudyData])
@handle_endpoint_errors("Get daily stats")
async def get_daily_stats(
    days: int = Query(
        settings.ANALYTICS_DEFAULT_DAILY_WINDOW,
        ge=1,
        le=settings.ANALYTICS_MAX_DAILY_WINDOW,
        description="Number of days ending today",
    ),
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[DailyStudyData]:
    """
    Get per-day study minutes for charts.

    Always returns exactly `days` entries, oldest first, with zeros for
    days without study.
    """
    return await service.get_daily_stats(user_id, days=days)


@router.get("/by-subject", response_model=list[SubjectStudyData])
@handle_endpoint_errors("Get stats by subject")
async def get_by_subject(
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
) -> list[SubjectStudyData]:
    """Get completed minutes and session counts per subject."""
    return await service.get_by_subject(user_id)


@router.get("/streaks", response_model=StreakData)
@handle_endpoint_errors("Get streaks")
async def get_streaks(
    user_id: str = Depends(get_current_user_id),
    service: AnalyticsService = Depends(get_analytics_service),
) -> StreakData:
    """
    Get the account-wide study streak.

    A day counts when at least one session was completed. The current
    streak survives until the end of the day after the last study day.
    """
    return await service.get_streaks(user_id)
