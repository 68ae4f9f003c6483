"""
Study Tracking Enums

Defines enums for study sessions, recurrence rules, flashcard difficulty,
analytics periods and assignments.
"""

from enum import Enum


class SessionStatus(str, Enum):
    """
    Lifecycle status of a study session.

    Only COMPLETED sessions count towards streaks and analytics.
    """

    PLANNED = "planned"  # Scheduled, not started (default for generated sessions)
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FocusType(str, Enum):
    """
    Kind of study activity a session represents.
    """

    DEEP_FOCUS = "deep_focus"
    LIGHT_REVIEW = "light_review"
    PRACTICE = "practice"
    READING = "reading"


class RecurrenceFrequency(str, Enum):
    """
    Frequency of a recurrence rule.

    - DAILY: one session on every calendar day through `until`
    - WEEKLY: one session on each listed weekday (Sunday=0) through `until`
    """

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"


class CardDifficulty(str, Enum):
    """
    Self-reported difficulty tier for a flashcard review.

    Determines the interval until the next review:
    EASY → 7 days, MEDIUM → 3 days, HARD → 1 day.
    """

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class SummaryPeriod(str, Enum):
    """
    Calendar periods used by the analytics summary.

    Weeks start on Sunday.
    """

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"


class AssignmentStatus(str, Enum):
    """
    Progress of an assignment.

    Anything not COMPLETED counts as pending on the dashboard.
    """

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class AssignmentPriority(str, Enum):
    """Self-assigned urgency of an assignment."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
