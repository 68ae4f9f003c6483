"""
Study Tracking API Models (Pydantic)

Request/response schemas for subjects, study sessions, recurrence rules and
study analytics.

ARCHITECTURE NOTE:
    This file contains PYDANTIC models for API validation.
    There is a corresponding SQLAlchemy file: study_tracker/db/models.py

    Data flows: API Request → Pydantic → Service → SQLAlchemy → Database

API Contract:
    Request models use StrictRequest (extra="forbid") to reject unknown fields.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import ClassVar, Optional

from pydantic import Field, field_validator, model_validator

from study_tracker.models.base import (
    HEX_COLOR_PATTERN,
    PartialUpdate,
    StrictRequest,
    StrictResponse,
)
from study_tracker.enums.study import (
    FocusType,
    RecurrenceFrequency,
    SessionStatus,
)


# ===========================================
# Subject Models
# ===========================================


class SubjectCreate(StrictRequest):
    """Request to create a subject."""

    name: str = Field(..., min_length=1, max_length=255)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    category: Optional[str] = Field(None, max_length=50)
    difficulty: Optional[str] = Field(None, max_length=10)
    study_goal_hours: float = Field(0.0, ge=0)


class SubjectUpdate(PartialUpdate):
    """Partial update of a subject. Omitted fields are left unchanged."""

    non_nullable: ClassVar[tuple[str, ...]] = ("name", "color", "study_goal_hours")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)
    category: Optional[str] = Field(None, max_length=50)
    difficulty: Optional[str] = Field(None, max_length=10)
    study_goal_hours: Optional[float] = Field(None, ge=0)


class SubjectResponse(StrictResponse):
    """
    Subject as returned by the API.

    `streak` is recomputed from completed sessions whenever a subject is
    read, so it reflects the current calendar day.
    """

    id: str
    user_id: str
    name: str
    color: str
    category: Optional[str] = None
    difficulty: Optional[str] = None
    study_goal_hours: float = 0.0
    streak: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ===========================================
# Study Session Models
# ===========================================


class RecurrenceRule(StrictRequest):
    """
    Rule for generating a series of sessions.

    The anchor (the session's start_time) supplies the time of day and the
    first candidate date. `until` is inclusive.

    - DAILY: one session per day
    - WEEKLY: one session on each weekday in `days` (0=Sunday .. 6=Saturday)

    A WEEKLY rule without days is accepted and produces no sessions.
    """

    frequency: RecurrenceFrequency
    days: list[int] = Field(default_factory=list, description="Weekdays, 0=Sunday")
    until: date = Field(..., description="Last calendar date to generate (inclusive)")

    @field_validator("days")
    @classmethod
    def _validate_days(cls, value: list[int]) -> list[int]:
        for day in value:
            if day < 0 or day > 6:
                raise ValueError(f"Weekday index must be 0-6, got {day}")
        return sorted(set(value))


class StudySessionCreate(StrictRequest):
    """
    Request to plan a session, or a recurring series when
    `recurrence_rule` is present.

    When both times are given, end_time may not precede start_time and
    both must be either offset-aware or naive.

    Note: Uses StrictRequest - unknown fields will be rejected with 422.
    """

    subject_id: str
    duration_minutes: Optional[int] = Field(None, ge=1)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    title: Optional[str] = Field(None, max_length=255)
    focus_type: Optional[FocusType] = None
    status: Optional[SessionStatus] = None
    recurrence_rule: Optional[RecurrenceRule] = None

    @model_validator(mode="after")
    def _check_time_order(self) -> StudySessionCreate:
        if self.start_time is None or self.end_time is None:
            return self
        if (self.start_time.tzinfo is None) != (self.end_time.tzinfo is None):
            raise ValueError(
                "start_time and end_time must both carry a UTC offset or neither"
            )
        if self.end_time < self.start_time:
            raise ValueError("end_time must not be before start_time")
        return self


class StudySessionLog(StrictRequest):
    """Request to log a session that already happened."""

    subject_id: str
    duration_minutes: int = Field(..., ge=1)
    start_time: Optional[datetime] = Field(
        None, description="When the session started (defaults to now)"
    )


class SessionStatusUpdate(StrictRequest):
    """Request to change a session's status."""

    status: SessionStatus


class StudySessionResponse(StrictResponse):
    """Study session as returned by the API."""

    id: str
    subject_id: str
    duration_minutes: int
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    title: Optional[str] = None
    focus_type: FocusType = FocusType.DEEP_FOCUS
    status: SessionStatus
    recurrence_group_id: Optional[str] = None
    created_at: Optional[datetime] = None


class SubjectStudyTotal(StrictResponse):
    """Total logged minutes for one subject."""

    subject_id: str
    total_minutes: int


# ===========================================
# Analytics Models
# ===========================================


class DailyStudyData(StrictResponse):
    """Minutes and session count for one calendar day."""

    date: date
    minutes: int = 0
    sessions: int = 0


class SubjectStudyData(StrictResponse):
    """Completed study time for one subject."""

    subject_id: str
    subject_name: str
    subject_color: str
    total_minutes: int = 0
    session_count: int = 0


class StreakData(StrictResponse):
    """
    Study streak information.

    A streak counts consecutive calendar days with at least one completed
    session, ending today or yesterday. `longest_streak` is the best run
    ever and is independent of the current one.
    """

    current_streak: int = 0  # Days
    longest_streak: int = 0
    last_study_date: Optional[date] = None
    streak_start: Optional[date] = None
    is_active_today: bool = False
    # Milestones
    milestones_reached: list[int] = Field(default_factory=list)  # e.g., [3, 7, 14]
    next_milestone: Optional[int] = None


class StudySummary(StrictResponse):
    """Headline study statistics for the dashboard."""

    total_minutes_today: int = 0
    total_minutes_this_week: int = 0
    total_minutes_this_month: int = 0
    total_sessions: int = 0
    average_session_minutes: int = 0
    most_studied_subject: Optional[SubjectStudyData] = None
    best_study_hour: Optional[int] = Field(None, ge=0, le=23)
