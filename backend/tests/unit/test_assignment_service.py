"""
Unit tests for AssignmentService.
"""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError as PydanticValidationError

from study_tracker.enums.study import AssignmentPriority, AssignmentStatus
from study_tracker.middleware.error_handling import NotFoundError
from study_tracker.models.assignments import AssignmentCreate, AssignmentUpdate
from study_tracker.services.assignment_service import AssignmentService
from tests.factories import USER_ID, make_assignment, make_result, make_subject

DUE = datetime(2025, 3, 20, 23, 59, tzinfo=timezone.utc)


@pytest.fixture
def service(mock_db_session):
    return AssignmentService(mock_db_session)


class TestCreate:
    """Tests for create()."""

    @pytest.mark.asyncio
    async def test_create_defaults(self, service, mock_db_session):
        """New assignments start not started with medium priority."""
        mock_db_session.execute.return_value = make_result(
            scalar_one_or_none=make_subject()
        )

        response = await service.create(
            USER_ID,
            AssignmentCreate(subject_id="subject-1", title="Lab report", due_date=DUE),
        )

        assert response.status == AssignmentStatus.NOT_STARTED
        assert response.priority == AssignmentPriority.MEDIUM
        assert response.attachment_urls == []
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_attachment_urls_stored_as_strings(self, service, mock_db_session):
        """Validated URLs are stored in their JSON-friendly string form."""
        mock_db_session.execute.return_value = make_result(
            scalar_one_or_none=make_subject()
        )

        await service.create(
            USER_ID,
            AssignmentCreate(
                subject_id="subject-1",
                title="Essay",
                due_date=DUE,
                attachment_urls=["https://example.com/brief.pdf"],
            ),
        )

        (row,) = mock_db_session.add.call_args.args
        assert row.attachment_urls == ["https://example.com/brief.pdf"]
        assert row.status == "not_started"

    @pytest.mark.asyncio
    async def test_foreign_subject_rejected(self, service, mock_db_session):
        """Assignments can only be filed under the caller's subjects."""
        mock_db_session.execute.return_value = make_result(scalar_one_or_none=None)

        with pytest.raises(NotFoundError):
            await service.create(
                USER_ID,
                AssignmentCreate(subject_id="subject-x", title="Essay", due_date=DUE),
            )
        mock_db_session.add.assert_not_called()


class TestList:
    """Tests for list_assignments()."""

    @pytest.mark.asyncio
    async def test_list_all(self, service, mock_db_session):
        """Without a filter, one query returns every owned assignment."""
        mock_db_session.execute.return_value = make_result(
            scalars=[make_assignment("a-1"), make_assignment("a-2")]
        )

        responses = await service.list_assignments(USER_ID)

        assert [r.id for r in responses] == ["a-1", "a-2"]
        assert mock_db_session.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_subject_filter_checks_ownership(self, service, mock_db_session):
        """Filtering by a foreign subject is a 404, not an empty list."""
        mock_db_session.execute.return_value = make_result(scalar_one_or_none=None)

        with pytest.raises(NotFoundError):
            await service.list_assignments(USER_ID, subject_id="subject-x")


class TestUpdateDelete:
    """Tests for get(), update() and delete()."""

    @pytest.mark.asyncio
    async def test_get_missing(self, service, mock_db_session):
        """Unknown or foreign assignments raise NotFoundError."""
        mock_db_session.execute.return_value = make_result(scalar_one_or_none=None)

        with pytest.raises(NotFoundError):
            await service.get(USER_ID, "a-x")

    @pytest.mark.asyncio
    async def test_partial_update(self, service, mock_db_session):
        """Enums are stored by value and other fields stay unchanged."""
        assignment = make_assignment("a-1", title="Essay")
        mock_db_session.execute.return_value = make_result(
            scalar_one_or_none=assignment
        )

        response = await service.update(
            USER_ID,
            "a-1",
            AssignmentUpdate(
                status=AssignmentStatus.IN_PROGRESS,
                attachment_urls=["https://example.com/draft"],
            ),
        )

        assert assignment.status == "in_progress"
        assert assignment.attachment_urls == ["https://example.com/draft"]
        assert response.title == "Essay"
        mock_db_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_move_to_foreign_subject_rejected(self, service, mock_db_session):
        """Changing subject_id requires owning the new subject."""
        assignment = make_assignment("a-1")
        mock_db_session.execute.side_effect = [
            make_result(scalar_one_or_none=assignment),
            make_result(scalar_one_or_none=None),
        ]

        with pytest.raises(NotFoundError):
            await service.update(
                USER_ID, "a-1", AssignmentUpdate(subject_id="subject-x")
            )
        assert assignment.subject_id == "subject-1"
        mock_db_session.commit.assert_not_awaited()

    @pytest.mark.parametrize(
        "payload",
        [
            pytest.param({"title": None}, id="title"),
            pytest.param({"due_date": None}, id="due-date"),
            pytest.param({"status": None}, id="status"),
            pytest.param({"attachment_urls": None}, id="attachments"),
        ],
    )
    def test_null_for_required_column_rejected(self, payload):
        """Explicit nulls for NOT NULL columns fail validation."""
        with pytest.raises(PydanticValidationError, match="cannot be null"):
            AssignmentUpdate(**payload)

    def test_description_can_be_cleared(self):
        """Description is nullable."""
        assert AssignmentUpdate(description=None).model_fields_set == {"description"}

    @pytest.mark.asyncio
    async def test_delete(self, service, mock_db_session):
        """The owned assignment is deleted and committed."""
        assignment = make_assignment("a-1")
        mock_db_session.execute.return_value = make_result(
            scalar_one_or_none=assignment
        )

        await service.delete(USER_ID, "a-1")

        mock_db_session.delete.assert_awaited_once_with(assignment)
        mock_db_session.commit.assert_awaited_once()
