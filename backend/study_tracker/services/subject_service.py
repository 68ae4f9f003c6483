"""
Subject Service

CRUD for subjects, scoped to the owning user.

Subject.streak is a cache. It is recomputed from completed sessions every
time subjects are read (get and list) and written back in the same
commit, so readers always see the streak as of the current local day.
"""

from datetime import date, datetime
from typing import Iterable, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.config import settings
from study_tracker.db.models import Subject
from study_tracker.models.study import SubjectCreate, SubjectResponse, SubjectUpdate
from study_tracker.services.analytics.calendar import local_today
from study_tracker.services.analytics.streaks import compute_streak
from study_tracker.services.study_session_service import StudySessionService

logger = logging.getLogger(__name__)


class SubjectService:
    """Service for managing a user's subjects."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.sessions = StudySessionService(db)

    async def create(self, user_id: str, data: SubjectCreate) -> SubjectResponse:
        """Create a subject with a zero streak."""
        subject = Subject(
            user_id=user_id,
            name=data.name,
            color=data.color or settings.DEFAULT_SUBJECT_COLOR,
            category=data.category or None,
            difficulty=data.difficulty or None,
            study_goal_hours=data.study_goal_hours or 0.0,
            streak=0,
        )
        self.db.add(subject)
        await self.db.commit()

        logger.info(f"Created subject '{subject.name}' for user {user_id}")
        return SubjectResponse.model_validate(subject)

    async def list_subjects(
        self, user_id: str, now: Optional[datetime] = None
    ) -> list[SubjectResponse]:
        """List the user's subjects, newest first, with refreshed streaks."""
        result = await self.db.execute(
            select(Subject)
            .where(Subject.user_id == user_id)
            .order_by(Subject.created_at.desc())
        )
        subjects = list(result.scalars().all())
        if not subjects:
            return []

        try:
            start_times = await self.sessions.get_completed_start_times_by_subject(
                [s.id for s in subjects]
            )
        except Exception as e:
            logger.warning(f"Failed to refresh streaks for user {user_id}: {e}")
        else:
            today = local_today(now)
            for subject in subjects:
                self._apply_streak(subject, start_times.get(subject.id, []), today)
            await self.db.commit()

        return [SubjectResponse.model_validate(s) for s in subjects]

    async def get(
        self, user_id: str, subject_id: str, now: Optional[datetime] = None
    ) -> SubjectResponse:
        """
        Get one subject with a refreshed streak.

        Raises:
            NotFoundError: If the subject is not the user's
        """
        subject = await self.sessions.get_owned_subject(user_id, subject_id)
        await self._refresh_streak(subject, now)
        await self.db.commit()
        return SubjectResponse.model_validate(subject)

    async def update(
        self, user_id: str, subject_id: str, data: SubjectUpdate
    ) -> SubjectResponse:
        """
        Apply a partial update. Only fields present in the request change.

        Raises:
            NotFoundError: If the subject is not the user's
        """
        subject = await self.sessions.get_owned_subject(user_id, subject_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(subject, field, value)
        await self.db.commit()

        logger.info(f"Updated subject {subject_id}")
        return SubjectResponse.model_validate(subject)

    async def delete(self, user_id: str, subject_id: str) -> None:
        """
        Delete a subject and, by cascade, its sessions.

        Raises:
            NotFoundError: If the subject is not the user's
        """
        subject = await self.sessions.get_owned_subject(user_id, subject_id)
        await self.db.delete(subject)
        await self.db.commit()
        logger.info(f"Deleted subject {subject_id}")

    async def _refresh_streak(
        self, subject: Subject, now: Optional[datetime]
    ) -> None:
        """Recompute the cached streak; keep the old value if that fails."""
        try:
            start_times = await self.sessions.get_completed_start_times(subject.id)
        except Exception as e:
            logger.warning(f"Failed to refresh streak for subject {subject.id}: {e}")
            return

        self._apply_streak(subject, start_times, local_today(now))

    @staticmethod
    def _apply_streak(
        subject: Subject, start_times: Iterable[Optional[datetime]], today: date
    ) -> None:
        result = compute_streak(start_times, today)
        if subject.streak != result.current:
            logger.debug(
                f"Subject {subject.id} streak {subject.streak} -> {result.current}"
            )
        subject.streak = result.current
