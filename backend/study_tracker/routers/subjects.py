"""
Subjects API Router

Endpoints for managing the caller's subjects.

Endpoints:
- POST /api/subjects - Create a subject
- GET /api/subjects - List subjects (streaks refreshed)
- GET /api/subjects/{subject_id} - Get a subject (streak refreshed)
- PATCH /api/subjects/{subject_id} - Update a subject
- DELETE /api/subjects/{subject_id} - Delete a subject and its sessions
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.db.base import get_db
from study_tracker.dependencies import get_current_user_id
from study_tracker.middleware.error_handling import handle_endpoint_errors
from study_tracker.models.base import SuccessResponse
from study_tracker.models.study import SubjectCreate, SubjectResponse, SubjectUpdate
from study_tracker.services.subject_service import SubjectService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/subjects", tags=["subjects"])


async def get_subject_service(
    db: AsyncSession = Depends(get_db),
) -> SubjectService:
    """Get subject service."""
    return SubjectService(db)


@router.post("", response_model=SubjectResponse, status_code=status.HTTP_201_CREATED)
@handle_endpoint_errors("Create subject")
async def create_subject(
    data: SubjectCreate,
    user_id: str = Depends(get_current_user_id),
    service: SubjectService = Depends(get_subject_service),
) -> SubjectResponse:
    """Create a subject. Color defaults to blue when omitted."""
    return await service.create(user_id, data)


@router.get("", response_model=list[SubjectResponse])
@handle_endpoint_errors("List subjects")
async def list_subjects(
    user_id: str = Depends(get_current_user_id),
    service: SubjectService = Depends(get_subject_service),
) -> list[SubjectResponse]:
    """List subjects, newest first. Each streak is recomputed before returning."""
    return await service.list_subjects(user_id)


@router.get("/{subject_id}", response_model=SubjectResponse)
@handle_endpoint_errors("Get subject")
async def get_subject(
    subject_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SubjectService = Depends(get_subject_service),
) -> SubjectResponse:
    """Get one subject with its current streak."""
    return await service.get(user_id, subject_id)


@router.patch("/{subject_id}", response_model=SubjectResponse)
@handle_endpoint_errors("Update subject")
async def update_subject(
    subject_id: str,
    data: SubjectUpdate,
    user_id: str = Depends(get_current_user_id),
    service: SubjectService = Depends(get_subject_service),
) -> SubjectResponse:
    """Partially update a subject."""
    return await service.update(user_id, subject_id, data)


@router.delete("/{subject_id}", response_model=SuccessResponse)
@handle_endpoint_errors("Delete subject")
async def delete_subject(
    subject_id: str,
    user_id: str = Depends(get_current_user_id),
    service: SubjectService = Depends(get_subject_service),
) -> SuccessResponse:
    """Delete a subject together with its study sessions."""
    await service.delete(user_id, subject_id)
    return SuccessResponse(message=f"Subject {subject_id} deleted")
