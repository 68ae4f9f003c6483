"""
Study Sessions API Router

Endpoints for logging, planning and querying study sessions.

Endpoints:
- POST /api/study-sessions - Plan a session, or a recurring series when
  recurrence_rule is given
- POST /api/study-sessions/log - Log a completed session
- PATCH /api/study-sessions/{session_id}/status - Change a session's status
- GET /api/study-sessions/planner - Sessions starting within a date range
- GET /api/study-sessions/stats/{subject_id} - Total minutes for a subject
- GET /api/study-sessions/streak/{subject_id} - Streak for a subject
"""

from datetime import datetime
from typing import Union
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.db.base import get_db
from study_tracker.dependencies import get_current_user_id
from study_tracker.middleware.error_handling import handle_endpoint_errors
from study_tracker.models.study import (
    SessionStatusUpdate,
    StreakData,
    StudySessionCreate,
    StudySessionLog,
    StudySessionResponse,
    SubjectStudyTotal,
)
from study_tracker.services.analytics.calendar import as_local, local_today
from study_tracker.services.analytics.streaks import build_streak_data
from study_tracker.services.study_session_service import StudySessionService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/study-sessions", tags=["study-sessions"])


async def get_study_session_service(
    db: AsyncSession = Depends(get_db),
) -> StudySessionService:
    """Get study session service."""
    return StudySessionService(db)


# ===========================================
# Creation Endpoints
# ===========================================


@router.post(
    "",
    response_model=Union[list[StudySessionResponse], StudySessionResponse],
    status_code=status.HTTP_201_CREATED,
)
@handle_endpoint_errors("Create study session")
async def create_study_session(
    data: StudySessionCreate,
    user_id: str = Depends(get_current_user_id),
    service: StudySessionService = Depends(get_study_session_service),
) -> Union[list[StudySessionResponse], StudySessionResponse]:
    """
    Plan a study session.

    With a recurrence_rule, the whole series is generated and stored
    atomically and the list of created sessions is returned (possibly
    empty). Without one, the single created session is returned.
    """
    if data.recurrence_rule is not None:
        return await service.create_recurring(user_id, data)
    return await service.create(user_id, data)


@router.post(
    "/log", response_model=StudySessionResponse, status_code=status.HTTP_201_CREATED
)
@handle_endpoint_errors("Log study session")
async def log_study_session(
    data: StudySessionLog,
    user_id: str = Depends(get_current_user_id),
    service: StudySessionService = Depends(get_study_session_service),
) -> StudySessionResponse:
    """Record a session that already happened. Stored as completed."""
    return await service.log_session(user_id, data)


# ===========================================
# Update & Query Endpoints
# ===========================================


@router.patch("/{session_id}/status", response_model=StudySessionResponse)
@handle_endpoint_errors("Update session status")
async def update_session_status(
    session_id: str,
    data: SessionStatusUpdate,
    user_id: str = Depends(get_current_user_id),
    service: StudySessionService = Depends(get_study_session_service),
) -> StudySessionResponse:
    """Change a session's status (e.g. planned -> completed)."""
    return await service.update_status(user_id, session_id, data.status)


@router.get("/planner", response_model=list[StudySessionResponse])
@handle_endpoint_errors("Get planner")
async def get_planner(
    start_date: datetime = Query(..., description="Range start (inclusive)"),
    end_date: datetime = Query(..., description="Range end (inclusive)"),
    user_id: str = Depends(get_current_user_id),
    service: StudySessionService = Depends(get_study_session_service),
) -> list[StudySessionResponse]:
    """
    Scheduled sessions starting within [start_date, end_date], earliest first.

    Bounds without a UTC offset are read as local wall time.
    """
    start_date, end_date = as_local(start_date), as_local(end_date)
    if end_date < start_date:
        raise HTTPException(
            status_code=422, detail="end_date must not be before start_date"
        )
    return await service.get_planner(user_id, start_date, end_date)


@router.get("/stats/{subject_id}", response_model=SubjectStudyTotal)
@handle_endpoint_errors("Get subject stats")
async def get_subject_stats(
    subject_id: str,
    user_id: str = Depends(get_current_user_id),
    service: StudySessionService = Depends(get_study_session_service),
) -> SubjectStudyTotal:
    """Total completed study minutes for a subject."""
    return await service.get_stats_by_subject(user_id, subject_id)


@router.get("/streak/{subject_id}", response_model=StreakData)
@handle_endpoint_errors("Get subject streak")
async def get_subject_streak(
    subject_id: str,
    user_id: str = Depends(get_current_user_id),
    service: StudySessionService = Depends(get_study_session_service),
) -> StreakData:
    """Current and longest streak of completed sessions for a subject."""
    result = await service.calculate_subject_streak(user_id, subject_id)
    return build_streak_data(result, local_today())
