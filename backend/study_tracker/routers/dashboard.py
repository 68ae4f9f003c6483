"""
Dashboard API Router

Endpoints:
- GET /api/dashboard/stats - Open assignments and today's study time
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.db.base import get_db
from study_tracker.dependencies import get_current_user_id
from study_tracker.middleware.error_handling import handle_endpoint_errors
from study_tracker.models.assignments import DashboardStats
from study_tracker.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


async def get_dashboard_service(
    db: AsyncSession = Depends(get_db),
) -> DashboardService:
    """Get dashboard service."""
    return DashboardService(db)


@router.get("/stats", response_model=DashboardStats)
@handle_endpoint_errors("Get dashboard stats")
async def get_dashboard_stats(
    user_id: str = Depends(get_current_user_id),
    service: DashboardService = Depends(get_dashboard_service),
) -> DashboardStats:
    """
    Dashboard card for the caller.

    Counts assignments not yet completed, lists the next few by due date,
    and sums completed study minutes on the local calendar day.
    """
    return await service.get_stats(user_id)
