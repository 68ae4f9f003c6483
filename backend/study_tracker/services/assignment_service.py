"""
Assignment Service

CRUD for assignments. Assignments have no owner column of their own: they
belong to whoever owns their subject, so every lookup joins Subject and
filters on its user_id. A missing or foreign assignment raises
NotFoundError, the same as a foreign subject.

Usage:
    from study_tracker.services.assignment_service import AssignmentService

    service = AssignmentService(db)
    upcoming = await service.list_assignments(user_id, subject_id="...")
"""

from typing import Iterable, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.db.models import Assignment, Subject
from study_tracker.middleware.error_handling import NotFoundError
from study_tracker.models.assignments import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
)
from study_tracker.services.study_session_service import StudySessionService

logger = logging.getLogger(__name__)


def _url_strings(urls: Iterable) -> list[str]:
    # HttpUrl values are not JSON serializable as-is
    return [str(url) for url in urls]


class AssignmentService:
    """Service for the caller's assignments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_owned(self, user_id: str, assignment_id: str) -> Assignment:
        result = await self.db.execute(
            select(Assignment)
            .join(Subject, Assignment.subject_id == Subject.id)
            .where(Assignment.id == assignment_id, Subject.user_id == user_id)
        )
        assignment = result.scalar_one_or_none()
        if assignment is None:
            raise NotFoundError(f"Assignment with ID {assignment_id} not found")
        return assignment

    async def create(self, user_id: str, data: AssignmentCreate) -> AssignmentResponse:
        """Create an assignment under one of the caller's subjects."""
        await StudySessionService(self.db).get_owned_subject(user_id, data.subject_id)

        assignment = Assignment(
            subject_id=data.subject_id,
            title=data.title,
            description=data.description,
            due_date=data.due_date,
            status=data.status.value,
            priority=data.priority.value,
            attachment_urls=_url_strings(data.attachment_urls),
        )
        self.db.add(assignment)
        await self.db.commit()

        logger.info(f"Created assignment '{assignment.title}' for user {user_id}")
        return AssignmentResponse.model_validate(assignment)

    async def list_assignments(
        self, user_id: str, subject_id: Optional[str] = None
    ) -> list[AssignmentResponse]:
        """
        The caller's assignments, earliest due date first.

        Args:
            user_id: Caller's user id
            subject_id: Restrict to one subject; it must be the caller's

        Raises:
            NotFoundError: If subject_id is given but not owned
        """
        query = (
            select(Assignment)
            .join(Subject, Assignment.subject_id == Subject.id)
            .where(Subject.user_id == user_id)
        )
        if subject_id:
            await StudySessionService(self.db).get_owned_subject(user_id, subject_id)
            query = query.where(Assignment.subject_id == subject_id)

        result = await self.db.execute(query.order_by(Assignment.due_date.asc()))
        return [AssignmentResponse.model_validate(a) for a in result.scalars().all()]

    async def get(self, user_id: str, assignment_id: str) -> AssignmentResponse:
        assignment = await self._get_owned(user_id, assignment_id)
        return AssignmentResponse.model_validate(assignment)

    async def update(
        self, user_id: str, assignment_id: str, data: AssignmentUpdate
    ) -> AssignmentResponse:
        """Apply a partial update. Moving to another subject requires owning it."""
        assignment = await self._get_owned(user_id, assignment_id)
        updates = data.model_dump(exclude_unset=True)

        if updates.get("subject_id") and updates["subject_id"] != assignment.subject_id:
            await StudySessionService(self.db).get_owned_subject(
                user_id, updates["subject_id"]
            )
        if "attachment_urls" in updates:
            updates["attachment_urls"] = _url_strings(updates["attachment_urls"])
        for field in ("status", "priority"):
            if field in updates:
                updates[field] = updates[field].value

        for field, value in updates.items():
            setattr(assignment, field, value)
        await self.db.commit()

        logger.info(f"Updated assignment {assignment_id}")
        return AssignmentResponse.model_validate(assignment)

    async def delete(self, user_id: str, assignment_id: str) -> None:
        assignment = await self._get_owned(user_id, assignment_id)
        await self.db.delete(assignment)
        await self.db.commit()
        logger.info(f"Deleted assignment {assignment_id}")
