"""
Assignments API Router

Endpoints for the caller's assignments.

Endpoints:
- POST /api/assignments - Create an assignment
- GET /api/assignments - List assignments (optionally for one subject)
- GET /api/assignments/{assignment_id} - Get an assignment
- PATCH /api/assignments/{assignment_id} - Update an assignment
- DELETE /api/assignments/{assignment_id} - Delete an assignment
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.db.base import get_db
from study_tracker.dependencies import get_current_user_id
from study_tracker.middleware.error_handling import handle_endpoint_errors
from study_tracker.models.assignments import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
)
from study_tracker.models.base import SuccessResponse
from study_tracker.services.assignment_service import AssignmentService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/assignments", tags=["assignments"])


async def get_assignment_service(
    db: AsyncSession = Depends(get_db),
) -> AssignmentService:
    """Get assignment service."""
    return AssignmentService(db)


@router.post("", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
@handle_endpoint_errors("Create assignment")
async def create_assignment(
    data: AssignmentCreate,
    user_id: str = Depends(get_current_user_id),
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResponse:
    """Create an assignment under one of the caller's subjects."""
    return await service.create(user_id, data)


@router.get("", response_model=list[AssignmentResponse])
@handle_endpoint_errors("List assignments")
async def list_assignments(
    subject_id: Optional[str] = Query(None, description="Only this subject's assignments"),
    user_id: str = Depends(get_current_user_id),
    service: AssignmentService = Depends(get_assignment_service),
) -> list[AssignmentResponse]:
    """List assignments, earliest due date first."""
    return await service.list_assignments(user_id, subject_id)


@router.get("/{assignment_id}", response_model=AssignmentResponse)
@handle_endpoint_errors("Get assignment")
async def get_assignment(
    assignment_id: str,
    user_id: str = Depends(get_current_user_id),
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResponse:
    return await service.get(user_id, assignment_id)


@router.patch("/{assignment_id}", response_model=AssignmentResponse)
@handle_endpoint_errors("Update assignment")
async def update_assignment(
    assignment_id: str,
    data: AssignmentUpdate,
    user_id: str = Depends(get_current_user_id),
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResponse:
    """Partially update an assignment."""
    return await service.update(user_id, assignment_id, data)


@router.delete("/{assignment_id}", response_model=SuccessResponse)
@handle_endpoint_errors("Delete assignment")
async def delete_assignment(
    assignment_id: str,
    user_id: str = Depends(get_current_user_id),
    service: AssignmentService = Depends(get_assignment_service),
) -> SuccessResponse:
    await service.delete(user_id, assignment_id)
    return SuccessResponse(message=f"Assignment {assignment_id} deleted")
