"""
Unit tests for the flashcard review scheduler.
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest

from study_tracker.enums.study import CardDifficulty
from study_tracker.services.learning import scheduler
from study_tracker.services.learning.scheduler import (
    due_cards,
    is_due,
    review_card,
    review_interval,
)
from tests.factories import make_card

NOW = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


class TestReviewInterval:
    """Tests for review_interval()."""

    @pytest.mark.parametrize(
        "difficulty,days",
        [
            (CardDifficulty.EASY, 7),
            (CardDifficulty.MEDIUM, 3),
            (CardDifficulty.HARD, 1),
        ],
    )
    def test_default_tiers(self, difficulty, days):
        """Each tier maps to its configured number of days."""
        assert review_interval(difficulty) == timedelta(days=days)

    def test_accepts_raw_value(self):
        """Stored string values are accepted."""
        assert review_interval("easy") == timedelta(days=7)

    def test_configurable(self):
        """Intervals come from settings."""
        with patch.object(scheduler.settings, "REVIEW_INTERVAL_HARD_DAYS", 2):
            assert review_interval(CardDifficulty.HARD) == timedelta(days=2)


class TestReviewCard:
    """Tests for review_card()."""

    def test_hard_review(self):
        """HARD schedules one day out and bumps both counters."""
        card = make_card(times_reviewed=2, times_correct=1)

        review_card(card, CardDifficulty.HARD, now=NOW)

        assert card.times_reviewed == 3
        assert card.times_correct == 2
        assert card.last_reviewed_at == NOW
        assert card.next_review_at == NOW + timedelta(days=1)
        assert card.difficulty == "hard"

    def test_incorrect_answer_only_counts_review(self):
        """correct=False leaves times_correct unchanged."""
        card = make_card(times_reviewed=4, times_correct=4)

        review_card(card, CardDifficulty.EASY, correct=False, now=NOW)

        assert card.times_reviewed == 5
        assert card.times_correct == 4
        assert card.next_review_at == NOW + timedelta(days=7)

    def test_unspecified_correctness_counts_as_correct(self):
        """correct=None is treated as a correct answer."""
        card = make_card()

        review_card(card, CardDifficulty.MEDIUM, correct=None, now=NOW)

        assert (card.times_reviewed, card.times_correct) == (1, 1)
        assert card.next_review_at == NOW + timedelta(days=3)

    def test_interval_measured_from_review_not_previous_due(self):
        """An overdue card is rescheduled relative to the review instant."""
        card = make_card(next_review_at=NOW - timedelta(days=10))

        review_card(card, CardDifficulty.HARD, now=NOW)

        assert card.next_review_at == NOW + timedelta(days=1)

    def test_returns_same_card(self):
        """The card is updated in place."""
        card = make_card()
        assert review_card(card, CardDifficulty.EASY, now=NOW) is card


class TestDueCards:
    """Tests for is_due() and due_cards()."""

    def test_is_due(self):
        """Unscheduled and past-due cards are due; future cards are not."""
        assert is_due(make_card(), NOW)
        assert is_due(make_card(next_review_at=NOW), NOW)
        assert not is_due(make_card(next_review_at=NOW + timedelta(seconds=1)), NOW)

    def test_ordering_and_filtering(self):
        """Never-scheduled first, then the longest overdue; future excluded."""
        fresh = make_card("fresh")
        recent = make_card("recent", next_review_at=NOW - timedelta(hours=1))
        oldest = make_card("oldest", next_review_at=NOW - timedelta(days=3))
        future = make_card("future", next_review_at=NOW + timedelta(days=1))

        result = due_cards([recent, future, oldest, fresh], NOW)

        assert [c.id for c in result] == ["fresh", "oldest", "recent"]

    def test_empty(self):
        """No cards, nothing due."""
        assert due_cards([], NOW) == []
