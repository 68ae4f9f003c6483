"""
Centralized enum definitions for the application.

Usage:
    from study_tracker.enums import SessionStatus, CardDifficulty, AssignmentStatus

    # Or import from the module directly
    from study_tracker.enums.study import RecurrenceFrequency
"""

from study_tracker.enums.study import (
    AssignmentPriority,
    AssignmentStatus,
    CardDifficulty,
    FocusType,
    RecurrenceFrequency,
    SessionStatus,
    SummaryPeriod,
)

__all__ = [
    "AssignmentPriority",
    "AssignmentStatus",
    "CardDifficulty",
    "FocusType",
    "RecurrenceFrequency",
    "SessionStatus",
    "SummaryPeriod",
]
