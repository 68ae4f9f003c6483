"""
Unit tests for AnalyticsService.
"""

from datetime import date, datetime, timezone

import pytest

from study_tracker.services.analytics_service import AnalyticsService
from tests.factories import USER_ID, make_result, make_session, make_subject

NOW = datetime(2025, 3, 14, 18, 0, tzinfo=timezone.utc)


def at(day: int, hour: int = 9) -> datetime:
    return datetime(2025, 3, day, hour, tzinfo=timezone.utc)


@pytest.fixture
def service(mock_db_session):
    return AnalyticsService(mock_db_session)


@pytest.fixture
def sessions():
    return [
        make_session(at(12), 60, subject_id="subject-2"),
        make_session(at(13), 20, subject_id="subject-1"),
        make_session(at(14), 30, subject_id="subject-1"),
    ]


@pytest.fixture
def subjects():
    return [make_subject("subject-1"), make_subject("subject-2", name="Physics")]


class TestAnalyticsService:
    """Tests for the dashboard queries."""

    @pytest.mark.asyncio
    async def test_summary(self, service, mock_db_session, sessions, subjects):
        """Summary combines sessions with subject metadata."""
        mock_db_session.execute.side_effect = [
            make_result(scalars=sessions),
            make_result(scalars=subjects),
        ]

        summary = await service.get_summary(USER_ID, now=NOW)

        assert summary.total_sessions == 3
        assert summary.total_minutes_today == 30
        assert summary.total_minutes_this_week == 110
        assert summary.most_studied_subject.subject_id == "subject-2"
        assert summary.most_studied_subject.subject_name == "Physics"
        assert summary.best_study_hour == 9

    @pytest.mark.asyncio
    async def test_summary_empty(self, service, mock_db_session):
        """A user without sessions gets zeros."""
        summary = await service.get_summary(USER_ID, now=NOW)

        assert summary.total_sessions == 0
        assert summary.most_studied_subject is None

    @pytest.mark.asyncio
    async def test_daily_stats(self, service, mock_db_session, sessions):
        """The series ends today and has one entry per day."""
        mock_db_session.execute.return_value = make_result(scalars=sessions)

        series = await service.get_daily_stats(USER_ID, days=3, now=NOW)

        assert [(d.date, d.minutes) for d in series] == [
            (date(2025, 3, 12), 60),
            (date(2025, 3, 13), 20),
            (date(2025, 3, 14), 30),
        ]
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_by_subject(self, service, mock_db_session, sessions, subjects):
        """Per-subject totals in first-appearance order."""
        mock_db_session.execute.side_effect = [
            make_result(scalars=sessions),
            make_result(scalars=subjects),
        ]

        entries = await service.get_by_subject(USER_ID)

        assert [(e.subject_id, e.total_minutes, e.session_count) for e in entries] == [
            ("subject-2", 60, 1),
            ("subject-1", 50, 2),
        ]

    @pytest.mark.asyncio
    async def test_streaks(self, service, mock_db_session, sessions):
        """Account streak spans all subjects."""
        mock_db_session.execute.return_value = make_result(scalars=sessions)

        data = await service.get_streaks(USER_ID, now=NOW)

        assert data.current_streak == 3
        assert data.longest_streak == 3
        assert data.is_active_today is True
        assert data.streak_start == date(2025, 3, 12)
        assert data.milestones_reached == [3]
        assert data.next_milestone == 7
