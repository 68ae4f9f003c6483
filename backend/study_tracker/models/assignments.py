"""
Assignment and Dashboard API Models (Pydantic)

Request/response schemas for assignments and the dashboard stats card.

ARCHITECTURE NOTE:
    There is a corresponding SQLAlchemy file: study_tracker/db/models.py

API Contract:
    Request models use StrictRequest (extra="forbid") to reject unknown fields.
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import Field, HttpUrl

from study_tracker.enums.study import AssignmentPriority, AssignmentStatus
from study_tracker.models.base import PartialUpdate, StrictRequest, StrictResponse


class AssignmentCreate(StrictRequest):
    """Request to create an assignment under one of the caller's subjects."""

    subject_id: str
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: datetime
    status: AssignmentStatus = AssignmentStatus.NOT_STARTED
    priority: AssignmentPriority = AssignmentPriority.MEDIUM
    attachment_urls: list[HttpUrl] = Field(default_factory=list)


class AssignmentUpdate(PartialUpdate):
    """
    Partial update of an assignment. Omitted fields are left unchanged.

    Moving an assignment to another subject requires owning that subject.
    """

    non_nullable: ClassVar[tuple[str, ...]] = (
        "subject_id",
        "title",
        "due_date",
        "status",
        "priority",
        "attachment_urls",
    )

    subject_id: Optional[str] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    status: Optional[AssignmentStatus] = None
    priority: Optional[AssignmentPriority] = None
    attachment_urls: Optional[list[HttpUrl]] = None


class AssignmentResponse(StrictResponse):
    """Assignment as returned by the API."""

    id: str
    subject_id: str
    title: str
    description: Optional[str] = None
    due_date: datetime
    status: AssignmentStatus
    priority: AssignmentPriority
    attachment_urls: list[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DashboardStats(StrictResponse):
    """
    Dashboard card: open coursework and today's study time.

    `study_minutes_today` counts completed sessions on the local calendar
    day, the same figure as the analytics summary's total_minutes_today.
    """

    assignments_pending: int = 0
    assignments_due_soon: list[AssignmentResponse] = Field(default_factory=list)
    study_minutes_today: int = 0
