"""
Study Session Service

Database boundary for study sessions. Fetches rows, hands them to the pure
recurrence and streak functions, and writes the results back.

Handles:
- Logging a session that already happened (stored as COMPLETED)
- Planning a single session or a recurring series
- Status changes, planner range queries, per-subject totals and streaks

Ownership: sessions belong to a subject, subjects belong to a user. A
subject or session owned by someone else is reported as not found.

Usage:
    from study_tracker.services.study_session_service import StudySessionService

    service = StudySessionService(db)
    sessions = await service.create_recurring(user_id, data)
    streak = await service.calculate_subject_streak(user_id, subject_id)
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Sequence
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.config import settings
from study_tracker.db.models import StudySession, Subject
from study_tracker.enums.study import FocusType, SessionStatus
from study_tracker.middleware.error_handling import NotFoundError
from study_tracker.models.study import (
    StudySessionCreate,
    StudySessionLog,
    StudySessionResponse,
    SubjectStudyTotal,
)
from study_tracker.services.analytics.calendar import local_today
from study_tracker.services.analytics.recurrence import (
    SessionInstance,
    SessionTemplate,
    generate_sessions,
)
from study_tracker.services.analytics.streaks import StreakResult, compute_streak

logger = logging.getLogger(__name__)


class StudySessionService:
    """
    Service for logging, planning and querying study sessions.

    All methods take the caller's user id and scope every query to it.
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the study session service.

        Args:
            db: Async database session
        """
        self.db = db

    # ===========================================
    # Lookups
    # ===========================================

    async def get_owned_subject(self, user_id: str, subject_id: str) -> Subject:
        """
        Fetch a subject owned by the user.

        Raises:
            NotFoundError: If the subject does not exist or belongs to
                another user
        """
        result = await self.db.execute(
            select(Subject).where(Subject.id == subject_id, Subject.user_id == user_id)
        )
        subject = result.scalar_one_or_none()
        if subject is None:
            raise NotFoundError(f"Subject with ID {subject_id} not found")
        return subject

    async def get_completed_start_times(
        self, subject_id: str
    ) -> list[Optional[datetime]]:
        """Start times of a subject's completed sessions, newest first."""
        result = await self.db.execute(
            select(StudySession.start_time)
            .where(
                StudySession.subject_id == subject_id,
                StudySession.status == SessionStatus.COMPLETED.value,
                StudySession.start_time.is_not(None),
            )
            .order_by(StudySession.start_time.desc())
        )
        return list(result.scalars().all())

    async def get_completed_start_times_by_subject(
        self, subject_ids: Sequence[str]
    ) -> dict[str, list[datetime]]:
        """
        Start times of completed sessions for several subjects in one query.

        Returns:
            Mapping of subject id to start times, newest first. Subjects
            without completed sessions map to an empty list.
        """
        grouped: dict[str, list[datetime]] = {sid: [] for sid in subject_ids}
        if not grouped:
            return grouped

        result = await self.db.execute(
            select(StudySession.subject_id, StudySession.start_time)
            .where(
                StudySession.subject_id.in_(list(grouped)),
                StudySession.status == SessionStatus.COMPLETED.value,
                StudySession.start_time.is_not(None),
            )
            .order_by(StudySession.start_time.desc())
        )
        for subject_id, start_time in result.all():
            grouped.setdefault(subject_id, []).append(start_time)
        return grouped

    # ===========================================
    # Creation
    # ===========================================

    async def log_session(
        self,
        user_id: str,
        data: StudySessionLog,
        now: Optional[datetime] = None,
    ) -> StudySessionResponse:
        """
        Record a session that already happened.

        The session is stored as COMPLETED with end_time derived from the
        start time and duration. start_time defaults to now.

        Args:
            user_id: Caller's user id
            data: Subject, duration and optional start time

        Returns:
            The stored session

        Raises:
            NotFoundError: If the subject is not the user's
        """
        await self.get_owned_subject(user_id, data.subject_id)

        start = data.start_time or now or datetime.now(timezone.utc)
        session = StudySession(
            subject_id=data.subject_id,
            duration_minutes=data.duration_minutes,
            start_time=start,
            end_time=start + timedelta(minutes=data.duration_minutes),
            status=SessionStatus.COMPLETED.value,
            focus_type=FocusType.DEEP_FOCUS.value,
        )
        self.db.add(session)
        await self.db.commit()

        logger.info(
            f"Logged {data.duration_minutes} min for subject {data.subject_id}"
        )
        return self._to_response(session)

    async def create(
        self, user_id: str, data: StudySessionCreate
    ) -> StudySessionResponse:
        """
        Plan a single, non-recurring session.

        Duration comes from the request, else from end_time - start_time
        when both are given, else settings.DEFAULT_SESSION_MINUTES.
        Status defaults to PLANNED and focus type to DEEP_FOCUS.

        Raises:
            NotFoundError: If the subject is not the user's
        """
        await self.get_owned_subject(user_id, data.subject_id)

        duration = data.duration_minutes
        if not duration and data.start_time and data.end_time:
            duration = round((data.end_time - data.start_time).total_seconds() / 60)

        session = StudySession(
            subject_id=data.subject_id,
            duration_minutes=duration or settings.DEFAULT_SESSION_MINUTES,
            start_time=data.start_time,
            end_time=data.end_time,
            title=data.title or None,
            focus_type=(data.focus_type or FocusType.DEEP_FOCUS).value,
            status=(data.status or SessionStatus.PLANNED).value,
        )
        self.db.add(session)
        await self.db.commit()

        logger.info(f"Planned session {session.id} for subject {data.subject_id}")
        return self._to_response(session)

    async def create_recurring(
        self,
        user_id: str,
        data: StudySessionCreate,
        now: Optional[datetime] = None,
    ) -> list[StudySessionResponse]:
        """
        Generate and store a recurring series of sessions.

        Without a recurrence rule this plans one session via create().
        The whole series is inserted in a single commit; if the commit
        fails it is rolled back and no session of the group is stored.

        Args:
            user_id: Caller's user id
            data: Session fields plus the recurrence rule. start_time is
                the anchor (defaults to now).
            now: Anchor to use when start_time is absent

        Returns:
            Stored sessions in start-time order (possibly empty)

        Raises:
            NotFoundError: If the subject is not the user's
        """
        if data.recurrence_rule is None:
            return [await self.create(user_id, data)]

        await self.get_owned_subject(user_id, data.subject_id)

        anchor = data.start_time or now or datetime.now(timezone.utc)
        batch = generate_sessions(
            data.recurrence_rule,
            anchor,
            data.duration_minutes or settings.DEFAULT_SESSION_MINUTES,
            SessionTemplate(
                subject_id=data.subject_id,
                title=data.title or None,
                focus_type=data.focus_type or FocusType.DEEP_FOCUS,
                status=data.status,
            ),
        )
        if not batch.instances:
            return []

        sessions = [self._from_instance(instance) for instance in batch.instances]
        self.db.add_all(sessions)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            logger.error(
                f"Failed to store recurrence group {batch.recurrence_group_id}, "
                "rolled back"
            )
            raise

        logger.info(
            f"Created {len(sessions)} sessions in recurrence group "
            f"{batch.recurrence_group_id}"
        )
        return [self._to_response(s) for s in sessions]

    # ===========================================
    # Updates & Queries
    # ===========================================

    async def update_status(
        self, user_id: str, session_id: str, status: SessionStatus
    ) -> StudySessionResponse:
        """
        Change a session's status.

        Raises:
            NotFoundError: If the session does not exist or its subject
                belongs to another user
        """
        result = await self.db.execute(
            select(StudySession, Subject.user_id)
            .join(Subject, StudySession.subject_id == Subject.id)
            .where(StudySession.id == session_id)
        )
        row = result.first()
        if row is None or row[1] != user_id:
            raise NotFoundError(f"Study session with ID {session_id} not found")

        session = row[0]
        session.status = SessionStatus(status).value
        await self.db.commit()

        logger.info(f"Session {session_id} status -> {session.status}")
        return self._to_response(session)

    async def get_planner(
        self, user_id: str, start: datetime, end: datetime
    ) -> list[StudySessionResponse]:
        """
        Scheduled sessions whose start time falls in [start, end].

        Sessions without a start time are excluded. Ordered by start time.
        """
        result = await self.db.execute(
            select(StudySession)
            .join(Subject, StudySession.subject_id == Subject.id)
            .where(
                Subject.user_id == user_id,
                StudySession.start_time.is_not(None),
                StudySession.start_time >= start,
                StudySession.start_time <= end,
            )
            .order_by(StudySession.start_time.asc())
        )
        return [self._to_response(s) for s in result.scalars().all()]

    async def get_stats_by_subject(
        self, user_id: str, subject_id: str
    ) -> SubjectStudyTotal:
        """Total minutes of completed sessions for one subject."""
        await self.get_owned_subject(user_id, subject_id)

        result = await self.db.execute(
            select(func.coalesce(func.sum(StudySession.duration_minutes), 0)).where(
                StudySession.subject_id == subject_id,
                StudySession.status == SessionStatus.COMPLETED.value,
            )
        )
        return SubjectStudyTotal(
            subject_id=subject_id, total_minutes=int(result.scalar() or 0)
        )

    async def calculate_subject_streak(
        self,
        user_id: str,
        subject_id: str,
        now: Optional[datetime] = None,
    ) -> StreakResult:
        """
        Streak of consecutive local days with a completed session.

        Args:
            user_id: Caller's user id
            subject_id: Subject to compute for
            now: Reference instant (defaults to current time)

        Raises:
            NotFoundError: If the subject is not the user's
        """
        await self.get_owned_subject(user_id, subject_id)
        start_times = await self.get_completed_start_times(subject_id)
        return compute_streak(start_times, local_today(now))

    # ===========================================
    # Helpers
    # ===========================================

    @staticmethod
    def _from_instance(instance: SessionInstance) -> StudySession:
        return StudySession(
            subject_id=instance.subject_id,
            duration_minutes=instance.duration_minutes,
            start_time=instance.start_time,
            end_time=instance.end_time,
            title=instance.title,
            focus_type=FocusType(instance.focus_type).value,
            status=SessionStatus(instance.status).value,
            recurrence_group_id=instance.recurrence_group_id,
        )

    @staticmethod
    def _to_response(session: StudySession) -> StudySessionResponse:
        return StudySessionResponse.model_validate(session)
