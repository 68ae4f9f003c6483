"""
Study Time Aggregation

Pure functions that bucket completed study sessions by day, subject and
hour of day. The analytics service fetches sessions and hands them here;
nothing in this module touches the database or mutates its inputs.

Responsibilities:
- Period totals (today, this week starting Sunday, this month)
- Zero-filled per-day series
- Per-subject totals and the most studied subject
- Best study hour and average session length

Usage:
    from study_tracker.services.analytics import aggregation

    sessions = aggregation.completed_sessions(rows)
    series = aggregation.daily_series(sessions, window_days=7, end_date=today)
    summary = aggregation.summarize(sessions, subjects_by_id, now)
"""

import math
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING, Callable, Iterable, Mapping, Optional, Sequence

from study_tracker.config import settings
from study_tracker.enums.study import SessionStatus, SummaryPeriod
from study_tracker.models.study import DailyStudyData, StudySummary, SubjectStudyData
from study_tracker.services.analytics.calendar import (
    date_key,
    date_range,
    hour_of_day,
    local_date,
    local_today,
    start_of_month,
    start_of_week,
)

if TYPE_CHECKING:
    from study_tracker.db.models import StudySession, Subject

SessionPredicate = Callable[["StudySession"], bool]


def completed_sessions(sessions: Iterable["StudySession"]) -> list["StudySession"]:
    """Keep COMPLETED sessions that have a start time."""
    return [
        s
        for s in sessions
        if s.status == SessionStatus.COMPLETED and s.start_time is not None
    ]


def period_predicate(period: SummaryPeriod, now: datetime) -> SessionPredicate:
    """
    Build a predicate matching sessions whose local start date falls in a period.

    Args:
        period: TODAY, WEEK (Sunday through Saturday) or MONTH.
        now: Reference instant that defines the period.

    Returns:
        Callable taking a session and returning True when it is inside.
    """
    today = local_today(now)

    if period == SummaryPeriod.TODAY:
        first, last = today, today
    elif period == SummaryPeriod.WEEK:
        first = start_of_week(now).date()
        last = first + timedelta(days=6)
    else:  # SummaryPeriod.MONTH
        first = start_of_month(now).date()
        next_month = (first.replace(day=28) + timedelta(days=4)).replace(day=1)
        last = next_month - timedelta(days=1)

    def _in_period(session: "StudySession") -> bool:
        day = local_date(session.start_time)
        return day is not None and first <= day <= last

    return _in_period


def total_minutes(
    sessions: Iterable["StudySession"],
    predicate: Optional[SessionPredicate] = None,
) -> int:
    """Sum duration_minutes of sessions matching the predicate (all when None)."""
    return sum(
        s.duration_minutes or 0
        for s in sessions
        if predicate is None or predicate(s)
    )


def daily_series(
    sessions: Iterable["StudySession"],
    window_days: int,
    end_date: Optional[date] = None,
) -> list[DailyStudyData]:
    """
    Per-day minutes and session counts over a window ending on end_date.

    Every date in [end_date - window_days + 1, end_date] is present, in
    ascending order, with zero values for days without sessions. Sessions
    outside the window are ignored.

    Args:
        sessions: Completed sessions.
        window_days: Number of days in the window (0 yields an empty list).
        end_date: Last day of the window; defaults to the local today.

    Returns:
        list[DailyStudyData] of length window_days.
    """
    if window_days <= 0:
        return []
    if end_date is None:
        end_date = local_today()

    start_date = end_date - timedelta(days=window_days - 1)
    buckets: dict[str, dict[str, int]] = {
        day.isoformat(): {"minutes": 0, "sessions": 0}
        for day in date_range(start_date, end_date)
    }

    for session in sessions:
        key = date_key(session.start_time)
        if key in buckets:
            buckets[key]["minutes"] += session.duration_minutes or 0
            buckets[key]["sessions"] += 1

    return [
        DailyStudyData(
            date=date.fromisoformat(key),
            minutes=data["minutes"],
            sessions=data["sessions"],
        )
        for key, data in sorted(buckets.items())
    ]


def by_subject(
    sessions: Iterable["StudySession"],
    subjects: Mapping[str, "Subject"],
) -> list[SubjectStudyData]:
    """
    Group sessions by subject, summing minutes and counting sessions.

    Entries are ordered by the subject's first appearance in `sessions`.
    Subjects without a color get settings.ANALYTICS_DEFAULT_COLOR.

    Args:
        sessions: Completed sessions.
        subjects: Subject rows keyed by id, for display metadata.

    Returns:
        list[SubjectStudyData], one per subject that has sessions.
    """
    minutes: dict[str, int] = defaultdict(int)
    counts: dict[str, int] = defaultdict(int)

    for session in sessions:
        minutes[session.subject_id] += session.duration_minutes or 0
        counts[session.subject_id] += 1

    results = []
    for subject_id in minutes:
        subject = subjects.get(subject_id)
        results.append(
            SubjectStudyData(
                subject_id=subject_id,
                subject_name=subject.name if subject else "Unknown subject",
                subject_color=(subject.color if subject else None)
                or settings.ANALYTICS_DEFAULT_COLOR,
                total_minutes=minutes[subject_id],
                session_count=counts[subject_id],
            )
        )
    return results


def most_studied_subject(
    entries: Sequence[SubjectStudyData],
) -> Optional[SubjectStudyData]:
    """
    Entry with the most total minutes.

    Ties are broken by the lowest subject id so the answer does not depend
    on query ordering.
    """
    if not entries:
        return None
    return min(entries, key=lambda e: (-e.total_minutes, e.subject_id))


def best_study_hour(sessions: Iterable["StudySession"]) -> Optional[int]:
    """
    Local hour of day (0-23) with the most study minutes.

    Ties go to the earliest hour. Returns None when there are no sessions.
    """
    hour_minutes: dict[int, int] = defaultdict(int)
    for session in sessions:
        if session.start_time is None:
            continue
        hour_minutes[hour_of_day(session.start_time)] += session.duration_minutes or 0

    if not hour_minutes:
        return None
    return min(hour_minutes, key=lambda hour: (-hour_minutes[hour], hour))


def average_session_minutes(sessions: Sequence["StudySession"]) -> int:
    """Mean session length rounded to the nearest minute (half up); 0 when empty."""
    if not sessions:
        return 0
    return math.floor(total_minutes(sessions) / len(sessions) + 0.5)


def summarize(
    sessions: Sequence["StudySession"],
    subjects: Mapping[str, "Subject"],
    now: datetime,
) -> StudySummary:
    """
    Build the dashboard summary from completed sessions.

    Args:
        sessions: Completed sessions with start times.
        subjects: Subject rows keyed by id.
        now: Reference instant for the today/week/month boundaries.

    Returns:
        StudySummary. Zero-valued when there are no sessions.
    """
    return StudySummary(
        total_minutes_today=total_minutes(
            sessions, period_predicate(SummaryPeriod.TODAY, now)
        ),
        total_minutes_this_week=total_minutes(
            sessions, period_predicate(SummaryPeriod.WEEK, now)
        ),
        total_minutes_this_month=total_minutes(
            sessions, period_predicate(SummaryPeriod.MONTH, now)
        ),
        total_sessions=len(sessions),
        average_session_minutes=average_session_minutes(sessions),
        most_studied_subject=most_studied_subject(by_subject(sessions, subjects)),
        best_study_hour=best_study_hour(sessions),
    )
