"""
Streak Calculator

The single streak algorithm used for both subject-level and account-level
streaks. Works on any collection of session timestamps; callers decide
which sessions qualify (completed sessions with a start time).

Algorithm:
1. Collapse timestamps to unique local day keys.
2. Sort descending; the first key is the last study date.
3. Current streak: anchor on the reference date if studied that day,
   otherwise on the day before if studied then, otherwise 0. Walk backward
   one day at a time while each expected day is present.
4. Longest streak: walk the sorted keys pairwise and keep the longest run
   of keys exactly one day apart.

Current and longest are independent: a broken streak can leave current at
0 while longest still reports the best historical run.

Usage:
    from study_tracker.services.analytics.streaks import compute_streak

    result = compute_streak([s.start_time for s in sessions], date(2025, 3, 14))
    result.current, result.longest, result.last_date
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from study_tracker.config import settings
from study_tracker.models.study import StreakData
from study_tracker.services.analytics.calendar import date_key, local_today


@dataclass(frozen=True)
class StreakResult:
    """Outcome of a streak computation."""

    current: int = 0
    longest: int = 0
    last_date: Optional[date] = None
    streak_start: Optional[date] = None


def unique_study_days(timestamps: Iterable[Optional[datetime]]) -> list[date]:
    """
    Reduce timestamps to unique local study days, most recent first.

    Missing timestamps are skipped.
    """
    keys = {date_key(ts) for ts in timestamps if ts is not None}
    return [date.fromisoformat(key) for key in sorted(keys, reverse=True)]


def calculate_current_streak(
    study_days: Sequence[date], reference_date: date
) -> tuple[int, Optional[date]]:
    """
    Count consecutive study days ending on the reference date or the day before.

    Args:
        study_days: Unique study days in descending order.
        reference_date: The local "today".

    Returns:
        Tuple of (streak length, first day of the streak or None).
    """
    if not study_days:
        return 0, None

    present = set(study_days)
    yesterday = reference_date - timedelta(days=1)

    if study_days[0] == reference_date:
        anchor = reference_date
    elif study_days[0] == yesterday:
        anchor = yesterday
    else:
        # A gap of two or more days from today breaks the streak entirely
        return 0, None

    streak = 0
    expected = anchor
    while expected in present:
        streak += 1
        expected -= timedelta(days=1)

    return streak, expected + timedelta(days=1)


def calculate_longest_streak(study_days: Sequence[date]) -> int:
    """
    Length of the longest run of consecutive study days ever achieved.

    Args:
        study_days: Unique study days in descending order.

    Returns:
        Longest run length; 0 when there are no days.
    """
    if not study_days:
        return 0

    longest = 1
    run = 1
    for previous, current in zip(study_days, study_days[1:]):
        if previous - current == timedelta(days=1):
            run += 1
            longest = max(longest, run)
        else:
            run = 1

    return longest


def compute_streak(
    timestamps: Iterable[Optional[datetime]],
    reference_date: Optional[date] = None,
) -> StreakResult:
    """
    Compute current and longest streaks from session timestamps.

    Args:
        timestamps: Start times of qualifying sessions (None entries ignored).
        reference_date: Local "today"; defaults to the current local date.

    Returns:
        StreakResult. All zeros and None when there are no timestamps.
    """
    study_days = unique_study_days(timestamps)
    if not study_days:
        return StreakResult()

    if reference_date is None:
        reference_date = local_today()

    current, streak_start = calculate_current_streak(study_days, reference_date)

    return StreakResult(
        current=current,
        longest=calculate_longest_streak(study_days),
        last_date=study_days[0],
        streak_start=streak_start,
    )


def milestones_for(longest: int, current: int) -> tuple[list[int], Optional[int]]:
    """
    Milestones reached by the best streak and the next one for the current streak.

    Thresholds are configured in settings.STREAK_MILESTONES.
    """
    milestones = sorted(settings.STREAK_MILESTONES)
    reached = [m for m in milestones if longest >= m]
    next_milestone = next((m for m in milestones if m > current), None)
    return reached, next_milestone


def build_streak_data(result: StreakResult, reference_date: date) -> StreakData:
    """Shape a StreakResult into the API response, adding milestones."""
    reached, next_milestone = milestones_for(result.longest, result.current)
    return StreakData(
        current_streak=result.current,
        longest_streak=result.longest,
        last_study_date=result.last_date,
        streak_start=result.streak_start,
        is_active_today=result.last_date == reference_date,
        milestones_reached=reached,
        next_milestone=next_milestone,
    )
