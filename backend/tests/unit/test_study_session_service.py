"""
Unit tests for StudySessionService.

The database session is mocked; each test queues the results the service's
queries should see via execute.side_effect.
"""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from study_tracker.enums.study import RecurrenceFrequency, SessionStatus
from study_tracker.middleware.error_handling import NotFoundError
from study_tracker.models.study import (
    RecurrenceRule,
    StudySessionCreate,
    StudySessionLog,
)
from study_tracker.services.study_session_service import StudySessionService
from tests.factories import (
    OTHER_USER_ID,
    USER_ID,
    make_result,
    make_session,
    make_subject,
)

NOW = datetime(2025, 3, 14, 18, 0, tzinfo=timezone.utc)


@pytest.fixture
def service(mock_db_session):
    return StudySessionService(mock_db_session)


@pytest.fixture
def owned_subject(mock_db_session):
    """Queue a successful ownership lookup."""
    subject = make_subject()
    mock_db_session.execute.return_value = make_result(scalar_one_or_none=subject)
    return subject


class TestOwnership:
    """Tests for subject ownership checks."""

    @pytest.mark.asyncio
    async def test_owned_subject_returned(self, service, owned_subject):
        """The subject row is returned when the user owns it."""
        assert await service.get_owned_subject(USER_ID, "subject-1") is owned_subject

    @pytest.mark.asyncio
    async def test_start_times_grouped_by_subject(self, service, mock_db_session):
        """One query serves several subjects; subjects without rows map to []."""
        first = datetime(2025, 3, 14, 9, tzinfo=timezone.utc)
        second = datetime(2025, 3, 13, 9, tzinfo=timezone.utc)
        mock_db_session.execute.return_value = make_result(
            rows=[("subject-1", first), ("subject-1", second)]
        )

        grouped = await service.get_completed_start_times_by_subject(
            ["subject-1", "subject-2"]
        )

        assert grouped == {"subject-1": [first, second], "subject-2": []}
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_grouped_start_times_without_subjects(self, service, mock_db_session):
        """No subject ids, no query."""
        assert await service.get_completed_start_times_by_subject([]) == {}
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_subject_raises(self, service, mock_db_session):
        """A subject that is absent or foreign is reported as not found."""
        mock_db_session.execute.return_value = make_result(scalar_one_or_none=None)

        with pytest.raises(NotFoundError, match="subject-9"):
            await service.get_owned_subject(OTHER_USER_ID, "subject-9")


class TestLogSession:
    """Tests for log_session()."""

    @pytest.mark.asyncio
    async def test_log_stores_completed_session(
        self, service, mock_db_session, owned_subject
    ):
        """Logged sessions are COMPLETED with a derived end time."""
        start = datetime(2025, 3, 14, 9, 0, tzinfo=timezone.utc)

        response = await service.log_session(
            USER_ID,
            StudySessionLog(subject_id="subject-1", duration_minutes=45, start_time=start),
        )

        assert response.status == SessionStatus.COMPLETED
        assert response.start_time == start
        assert response.end_time == datetime(2025, 3, 14, 9, 45, tzinfo=timezone.utc)
        mock_db_session.add.assert_called_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_log_defaults_start_to_now(self, service, owned_subject):
        """Without a start time the session starts now."""
        response = await service.log_session(
            USER_ID,
            StudySessionLog(subject_id="subject-1", duration_minutes=20),
            now=NOW,
        )
        assert response.start_time == NOW

    @pytest.mark.asyncio
    async def test_log_for_foreign_subject_writes_nothing(
        self, service, mock_db_session
    ):
        """Ownership failure happens before any write."""
        mock_db_session.execute.return_value = make_result(scalar_one_or_none=None)

        with pytest.raises(NotFoundError):
            await service.log_session(
                USER_ID, StudySessionLog(subject_id="subject-1", duration_minutes=20)
            )
        mock_db_session.add.assert_not_called()
        mock_db_session.commit.assert_not_awaited()


class TestCreate:
    """Tests for create() and create_recurring()."""

    @pytest.mark.asyncio
    async def test_single_session_defaults(self, service, owned_subject):
        """A bare request is PLANNED with the default duration."""
        response = await service.create(
            USER_ID, StudySessionCreate(subject_id="subject-1")
        )

        assert response.status == SessionStatus.PLANNED
        assert response.duration_minutes == 25
        assert response.recurrence_group_id is None

    @pytest.mark.asyncio
    async def test_duration_derived_from_range(self, service, owned_subject):
        """end_time - start_time is used when no duration is given."""
        response = await service.create(
            USER_ID,
            StudySessionCreate(
                subject_id="subject-1",
                start_time=datetime(2025, 3, 14, 9, 0, tzinfo=timezone.utc),
                end_time=datetime(2025, 3, 14, 10, 30, tzinfo=timezone.utc),
            ),
        )
        assert response.duration_minutes == 90

    def test_end_before_start_rejected(self):
        """An inverted range never reaches the service as a negative duration."""
        with pytest.raises(PydanticValidationError, match="end_time must not be before"):
            StudySessionCreate(
                subject_id="subject-1",
                start_time=datetime(2025, 3, 14, 10, 0, tzinfo=timezone.utc),
                end_time=datetime(2025, 3, 14, 9, 0, tzinfo=timezone.utc),
            )

    def test_mixed_offset_awareness_rejected(self):
        """An aware start and a naive end cannot be ordered."""
        with pytest.raises(PydanticValidationError, match="UTC offset"):
            StudySessionCreate(
                subject_id="subject-1",
                start_time=datetime(2025, 3, 14, 9, 0, tzinfo=timezone.utc),
                end_time=datetime(2025, 3, 14, 10, 0),
            )

    @pytest.mark.asyncio
    async def test_equal_times_fall_back_to_default_duration(
        self, service, owned_subject
    ):
        """A zero-length range stores a positive default duration."""
        start = datetime(2025, 3, 14, 9, 0, tzinfo=timezone.utc)
        response = await service.create(
            USER_ID,
            StudySessionCreate(subject_id="subject-1", start_time=start, end_time=start),
        )
        assert response.duration_minutes == 25

    @pytest.mark.asyncio
    async def test_without_rule_creates_one(self, service, owned_subject):
        """create_recurring without a rule plans a single session."""
        responses = await service.create_recurring(
            USER_ID, StudySessionCreate(subject_id="subject-1", duration_minutes=30)
        )
        assert len(responses) == 1

    @pytest.mark.asyncio
    async def test_daily_series_single_commit(
        self, service, mock_db_session, owned_subject
    ):
        """A three-day rule inserts three grouped sessions in one commit."""
        data = StudySessionCreate(
            subject_id="subject-1",
            duration_minutes=40,
            start_time=datetime(2025, 3, 10, 18, 0, tzinfo=timezone.utc),
            recurrence_rule=RecurrenceRule(
                frequency=RecurrenceFrequency.DAILY, until=date(2025, 3, 12)
            ),
        )

        responses = await service.create_recurring(USER_ID, data)

        assert [r.start_time.day for r in responses] == [10, 11, 12]
        assert len({r.recurrence_group_id for r in responses}) == 1
        assert responses[0].recurrence_group_id is not None
        assert all(r.status == SessionStatus.PLANNED for r in responses)
        assert all(r.duration_minutes == 40 for r in responses)
        mock_db_session.add_all.assert_called_once()
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_empty_series_writes_nothing(
        self, service, mock_db_session, owned_subject
    ):
        """A WEEKLY rule without days stores nothing."""
        data = StudySessionCreate(
            subject_id="subject-1",
            start_time=datetime(2025, 3, 10, 18, 0, tzinfo=timezone.utc),
            recurrence_rule=RecurrenceRule(
                frequency=RecurrenceFrequency.WEEKLY, days=[], until=date(2025, 3, 31)
            ),
        )

        assert await service.create_recurring(USER_ID, data) == []
        mock_db_session.add_all.assert_not_called()
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_commit_rolls_back(
        self, service, mock_db_session, owned_subject
    ):
        """A commit failure rolls back the whole group and propagates."""
        mock_db_session.commit.side_effect = RuntimeError("connection lost")
        data = StudySessionCreate(
            subject_id="subject-1",
            start_time=datetime(2025, 3, 10, 18, 0, tzinfo=timezone.utc),
            recurrence_rule=RecurrenceRule(
                frequency=RecurrenceFrequency.DAILY, until=date(2025, 3, 11)
            ),
        )

        with pytest.raises(RuntimeError):
            await service.create_recurring(USER_ID, data)
        mock_db_session.rollback.assert_awaited_once()


class TestUpdateStatus:
    """Tests for update_status()."""

    @pytest.mark.asyncio
    async def test_status_changed(self, service, mock_db_session):
        """The session's status is updated and committed."""
        session = make_session(NOW, status=SessionStatus.PLANNED)
        mock_db_session.execute.return_value = make_result(first=(session, USER_ID))

        response = await service.update_status(
            USER_ID, session.id, SessionStatus.COMPLETED
        )

        assert response.status == SessionStatus.COMPLETED
        assert session.status == "completed"
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_foreign_session_not_found(self, service, mock_db_session):
        """Sessions under another user's subject are invisible."""
        session = make_session(NOW, status=SessionStatus.PLANNED)
        mock_db_session.execute.return_value = make_result(
            first=(session, OTHER_USER_ID)
        )

        with pytest.raises(NotFoundError):
            await service.update_status(USER_ID, session.id, SessionStatus.CANCELLED)
        assert session.status == "planned"

    @pytest.mark.asyncio
    async def test_missing_session_not_found(self, service, mock_db_session):
        """Unknown ids raise NotFoundError."""
        mock_db_session.execute.return_value = make_result(first=None)

        with pytest.raises(NotFoundError):
            await service.update_status(USER_ID, "nope", SessionStatus.CANCELLED)


class TestQueries:
    """Tests for planner, totals and streak queries."""

    @pytest.mark.asyncio
    async def test_planner_returns_rows(self, service, mock_db_session):
        """Planner rows are converted to responses in query order."""
        rows = [
            make_session(datetime(2025, 3, 10, 9, tzinfo=timezone.utc)),
            make_session(datetime(2025, 3, 11, 9, tzinfo=timezone.utc)),
        ]
        mock_db_session.execute.return_value = make_result(scalars=rows)

        responses = await service.get_planner(
            USER_ID,
            datetime(2025, 3, 9, tzinfo=timezone.utc),
            datetime(2025, 3, 15, tzinfo=timezone.utc),
        )

        assert [r.id for r in responses] == [r.id for r in rows]

    @pytest.mark.asyncio
    async def test_stats_by_subject(self, service, mock_db_session):
        """The summed minutes are returned for the subject."""
        mock_db_session.execute.side_effect = [
            make_result(scalar_one_or_none=make_subject()),
            make_result(scalar=135),
        ]

        total = await service.get_stats_by_subject(USER_ID, "subject-1")

        assert total.subject_id == "subject-1"
        assert total.total_minutes == 135

    @pytest.mark.asyncio
    async def test_stats_without_sessions_is_zero(self, service, mock_db_session):
        """No completed sessions gives zero minutes."""
        mock_db_session.execute.side_effect = [
            make_result(scalar_one_or_none=make_subject()),
            make_result(scalar=None),
        ]

        total = await service.get_stats_by_subject(USER_ID, "subject-1")
        assert total.total_minutes == 0

    @pytest.mark.asyncio
    async def test_subject_streak(self, service, mock_db_session):
        """Three consecutive days ending today form a streak of three."""
        mock_db_session.execute.side_effect = [
            make_result(scalar_one_or_none=make_subject()),
            make_result(
                scalars=[
                    datetime(2025, 3, 14, 8, tzinfo=timezone.utc),
                    datetime(2025, 3, 13, 8, tzinfo=timezone.utc),
                    datetime(2025, 3, 12, 8, tzinfo=timezone.utc),
                ]
            ),
        ]

        result = await service.calculate_subject_streak(USER_ID, "subject-1", now=NOW)

        assert result.current == 3
        assert result.longest == 3
        assert result.last_date == date(2025, 3, 14)
