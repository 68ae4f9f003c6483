"""
Unit tests for the streak calculator.

One algorithm serves subject-level and account-level streaks, so these
tests pin down its behavior on plain timestamps.
"""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from study_tracker.services.analytics import streaks
from study_tracker.services.analytics.streaks import (
    StreakResult,
    build_streak_data,
    calculate_longest_streak,
    compute_streak,
    milestones_for,
    unique_study_days,
)

TODAY = date(2025, 3, 14)


def at(day: date, hour: int = 10) -> datetime:
    return datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc)


def days_ago(n: int, hour: int = 10) -> datetime:
    return at(TODAY - timedelta(days=n), hour)


class TestUniqueStudyDays:
    """Tests for unique_study_days()."""

    def test_collapses_same_day_and_sorts_descending(self):
        """Several sessions on one day count once; newest first."""
        timestamps = [days_ago(2), days_ago(0, 8), days_ago(0, 20), None]
        assert unique_study_days(timestamps) == [TODAY, TODAY - timedelta(days=2)]


class TestComputeStreak:
    """Tests for compute_streak()."""

    def test_empty_input(self):
        """No sessions gives zeros and no dates."""
        assert compute_streak([], TODAY) == StreakResult(0, 0, None, None)

    def test_simple_three_day_streak(self):
        """Today, yesterday and the day before: current 3, longest 3."""
        result = compute_streak([days_ago(0), days_ago(1), days_ago(2)], TODAY)

        assert result.current == 3
        assert result.longest == 3
        assert result.last_date == TODAY
        assert result.streak_start == TODAY - timedelta(days=2)

    def test_broken_streak(self):
        """Today and three days ago: current 1, longest 1."""
        result = compute_streak([days_ago(0), days_ago(3)], TODAY)
        assert (result.current, result.longest) == (1, 1)

    def test_streak_alive_from_yesterday(self):
        """A streak ending yesterday is still current."""
        result = compute_streak([days_ago(1), days_ago(2)], TODAY)
        assert result.current == 2
        assert result.last_date == TODAY - timedelta(days=1)

    def test_stale_streak_keeps_longest(self):
        """Last study two or more days ago: current 0, longest preserved."""
        timestamps = [days_ago(n) for n in (5, 6, 7, 8)]
        result = compute_streak(timestamps, TODAY)

        assert result.current == 0
        assert result.longest == 4
        assert result.streak_start is None
        assert result.last_date == TODAY - timedelta(days=5)

    def test_current_and_longest_independent(self):
        """A short current run does not cap the historical best."""
        timestamps = [days_ago(0), days_ago(1)] + [days_ago(n) for n in range(10, 16)]
        result = compute_streak(timestamps, TODAY)
        assert (result.current, result.longest) == (2, 6)

    def test_none_timestamps_ignored(self):
        """Sessions without a start time never count."""
        assert compute_streak([None, days_ago(0)], TODAY).current == 1


class TestLongestStreak:
    """Tests for calculate_longest_streak()."""

    @pytest.mark.parametrize(
        "offsets,expected",
        [
            pytest.param([], 0, id="empty"),
            pytest.param([0], 1, id="single-day"),
            pytest.param([0, 2, 4], 1, id="all-gaps"),
            pytest.param([0, 1, 5, 6, 7], 3, id="older-run-longer"),
        ],
    )
    def test_longest(self, offsets, expected):
        """Longest run of exactly-one-day gaps."""
        days = [TODAY - timedelta(days=n) for n in offsets]
        assert calculate_longest_streak(days) == expected


class TestMilestones:
    """Tests for milestone progress."""

    def test_reached_and_next(self):
        """Reached milestones come from longest; next from current."""
        with patch.object(streaks.settings, "STREAK_MILESTONES", [3, 7, 14]):
            reached, next_milestone = milestones_for(longest=8, current=2)
        assert reached == [3, 7]
        assert next_milestone == 3

    def test_beyond_last_milestone(self):
        """No next milestone after the largest one."""
        with patch.object(streaks.settings, "STREAK_MILESTONES", [3, 7]):
            assert milestones_for(longest=10, current=10) == ([3, 7], None)

    def test_build_streak_data(self):
        """The API shape reports whether today already counts."""
        result = compute_streak([days_ago(0), days_ago(1), days_ago(2)], TODAY)
        data = build_streak_data(result, TODAY)

        assert data.current_streak == 3
        assert data.longest_streak == 3
        assert data.is_active_today is True
        assert data.last_study_date == TODAY
        assert 3 in data.milestones_reached

    def test_not_active_today(self):
        """A streak kept alive by yesterday is not active today."""
        result = compute_streak([days_ago(1)], TODAY)
        assert build_streak_data(result, TODAY).is_active_today is False


class TestLocalDayBoundaries:
    """Streak days follow the local calendar, not UTC."""

    def test_late_utc_session_counts_for_next_local_day(self, berlin_zone):
        """23:30 UTC on the 13th is 00:30 on the 14th in Berlin."""
        timestamps = [
            datetime(2025, 3, 12, 10, 0, tzinfo=timezone.utc),
            datetime(2025, 3, 13, 23, 30, tzinfo=timezone.utc),
        ]

        result = compute_streak(timestamps, TODAY)

        assert result.last_date == TODAY
        assert result.current == 1
        assert result.longest == 1

    def test_same_sessions_in_utc(self):
        """Without the zone shift the two sessions are consecutive days."""
        timestamps = [
            datetime(2025, 3, 12, 10, 0, tzinfo=timezone.utc),
            datetime(2025, 3, 13, 23, 30, tzinfo=timezone.utc),
        ]

        result = compute_streak(timestamps, TODAY)

        assert result.last_date == date(2025, 3, 13)
        assert result.current == 2
        assert result.streak_start == date(2025, 3, 12)
