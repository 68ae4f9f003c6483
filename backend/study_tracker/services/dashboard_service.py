"""
Dashboard Service

Builds the dashboard card: how much coursework is still open, which
assignments are due next, and how long the user has studied today.

Today's minutes use the same local-day rule as the analytics summary, so
the two figures always agree.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.config import settings
from study_tracker.db.models import Assignment, Subject
from study_tracker.enums.study import AssignmentStatus, SummaryPeriod
from study_tracker.models.assignments import AssignmentResponse, DashboardStats
from study_tracker.services.analytics import aggregation
from study_tracker.services.analytics_service import AnalyticsService

logger = logging.getLogger(__name__)


def open_assignments(assignments: Iterable[Assignment]) -> list[Assignment]:
    """Assignments not yet completed, earliest due date first."""
    pending = [a for a in assignments if a.status != AssignmentStatus.COMPLETED.value]
    return sorted(pending, key=lambda a: a.due_date)


class DashboardService:
    """Read-only service for the dashboard stats card."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_stats(
        self, user_id: str, now: Optional[datetime] = None
    ) -> DashboardStats:
        """
        Dashboard figures for the caller.

        Args:
            user_id: Caller's user id
            now: Reference instant for "today" (defaults to current UTC time)

        Returns:
            Pending assignment count, the next DASHBOARD_DUE_SOON_LIMIT
            open assignments by due date, and completed minutes today
        """
        now = now or datetime.now(timezone.utc)

        result = await self.db.execute(
            select(Assignment)
            .join(Subject, Assignment.subject_id == Subject.id)
            .where(Subject.user_id == user_id)
        )
        pending = open_assignments(result.scalars().all())

        sessions = await AnalyticsService(self.db).get_completed_sessions(user_id)
        minutes_today = aggregation.total_minutes(
            sessions, aggregation.period_predicate(SummaryPeriod.TODAY, now)
        )

        logger.debug(
            f"Dashboard for user {user_id}: {len(pending)} pending, "
            f"{minutes_today} minutes today"
        )
        return DashboardStats(
            assignments_pending=len(pending),
            assignments_due_soon=[
                AssignmentResponse.model_validate(a)
                for a in pending[: settings.DASHBOARD_DUE_SOON_LIMIT]
            ],
            study_minutes_today=minutes_today,
        )
