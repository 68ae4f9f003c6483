"""
Study Analytics Engine

Pure, re-derivable computations over study session timelines.

Modules:
- calendar: local calendar-day keys and date arithmetic
- recurrence: recurring session generation
- streaks: current and longest streak calculation
- aggregation: period totals, daily series, per-subject and per-hour stats

Usage:
    from study_tracker.services.analytics import compute_streak, generate_sessions
"""

from study_tracker.services.analytics.aggregation import (
    by_subject,
    daily_series,
    summarize,
)
from study_tracker.services.analytics.calendar import (
    date_key,
    date_range,
    day_of_week,
    days_between,
)
from study_tracker.services.analytics.recurrence import (
    RecurrenceBatch,
    SessionInstance,
    SessionTemplate,
    generate_sessions,
)
from study_tracker.services.analytics.streaks import (
    StreakResult,
    build_streak_data,
    compute_streak,
)

__all__ = [
    # Aggregation
    "by_subject",
    "daily_series",
    "summarize",
    # Calendar
    "date_key",
    "date_range",
    "day_of_week",
    "days_between",
    # Recurrence
    "RecurrenceBatch",
    "SessionInstance",
    "SessionTemplate",
    "generate_sessions",
    # Streaks
    "StreakResult",
    "build_streak_data",
    "compute_streak",
]
