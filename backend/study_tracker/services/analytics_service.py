"""
Study Analytics Service

Account-level study statistics for the dashboard.

Every method loads the user's completed sessions once and delegates the
computation to the pure aggregation and streak functions, so results are
re-derivable views over persisted sessions and never stored.

Usage:
    from study_tracker.services.analytics_service import AnalyticsService

    service = AnalyticsService(db)
    summary = await service.get_summary(user_id)
    series = await service.get_daily_stats(user_id, days=30)
"""

from datetime import datetime, timezone
from typing import Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.db.models import StudySession, Subject
from study_tracker.enums.study import SessionStatus
from study_tracker.models.study import (
    DailyStudyData,
    StreakData,
    StudySummary,
    SubjectStudyData,
)
from study_tracker.services.analytics import aggregation
from study_tracker.services.analytics.calendar import local_today
from study_tracker.services.analytics.streaks import build_streak_data, compute_streak

logger = logging.getLogger(__name__)


class AnalyticsService:
    """
    Service for study analytics.

    Provides:
    - Summary: today/week/month minutes, averages, best hour, top subject
    - Daily series for charts
    - Per-subject totals
    - Account-wide streak with milestones
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_completed_sessions(self, user_id: str) -> list[StudySession]:
        """The user's completed sessions with a start time, oldest first."""
        result = await self.db.execute(
            select(StudySession)
            .join(Subject, StudySession.subject_id == Subject.id)
            .where(
                Subject.user_id == user_id,
                StudySession.status == SessionStatus.COMPLETED.value,
                StudySession.start_time.is_not(None),
            )
            .order_by(StudySession.start_time.asc())
        )
        return aggregation.completed_sessions(result.scalars().all())

    async def _subjects_by_id(self, user_id: str) -> dict[str, Subject]:
        result = await self.db.execute(select(Subject).where(Subject.user_id == user_id))
        return {subject.id: subject for subject in result.scalars().all()}

    async def get_summary(
        self, user_id: str, now: Optional[datetime] = None
    ) -> StudySummary:
        """
        Headline statistics for the dashboard.

        Args:
            user_id: Caller's user id
            now: Reference instant for period boundaries (defaults to now)
        """
        now = now or datetime.now(timezone.utc)
        sessions = await self.get_completed_sessions(user_id)
        subjects = await self._subjects_by_id(user_id)
        return aggregation.summarize(sessions, subjects, now)

    async def get_daily_stats(
        self,
        user_id: str,
        days: int = 7,
        now: Optional[datetime] = None,
    ) -> list[DailyStudyData]:
        """
        Minutes and session counts per day for the last `days` days.

        Returns exactly `days` entries ending today, oldest first, with
        zeros for days without study.
        """
        sessions = await self.get_completed_sessions(user_id)
        return aggregation.daily_series(sessions, days, end_date=local_today(now))

    async def get_by_subject(self, user_id: str) -> list[SubjectStudyData]:
        """Completed minutes and session counts per subject."""
        sessions = await self.get_completed_sessions(user_id)
        subjects = await self._subjects_by_id(user_id)
        return aggregation.by_subject(sessions, subjects)

    async def get_streaks(
        self, user_id: str, now: Optional[datetime] = None
    ) -> StreakData:
        """
        Account-wide streak across all subjects.

        Returns:
            StreakData with current/longest streak, last study date,
            whether today counts, and milestone progress
        """
        today = local_today(now)
        sessions = await self.get_completed_sessions(user_id)
        result = compute_streak((s.start_time for s in sessions), today)

        logger.debug(
            f"User {user_id} streak: current={result.current}, longest={result.longest}"
        )
        return build_streak_data(result, today)
