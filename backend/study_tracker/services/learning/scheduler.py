"""
Flashcard Review Scheduler

Tiered spaced repetition: the difficulty reported for a review decides how
long until the card is shown again, always measured from the review
instant.

    EASY   → +7 days
    MEDIUM → +3 days
    HARD   → +1 day

Intervals are configurable through settings.REVIEW_INTERVAL_*_DAYS.

Usage:
    from study_tracker.services.learning.scheduler import review_card, due_cards

    review_card(card, CardDifficulty.HARD, correct=False, now=now)
    queue = due_cards(deck.cards, now)
"""

from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Iterable, Optional

from study_tracker.config import settings
from study_tracker.enums.study import CardDifficulty

if TYPE_CHECKING:
    from study_tracker.db.models import Flashcard


def review_interval(difficulty: CardDifficulty) -> timedelta:
    """Interval until the next review for a difficulty tier."""
    days = {
        CardDifficulty.EASY: settings.REVIEW_INTERVAL_EASY_DAYS,
        CardDifficulty.MEDIUM: settings.REVIEW_INTERVAL_MEDIUM_DAYS,
        CardDifficulty.HARD: settings.REVIEW_INTERVAL_HARD_DAYS,
    }[CardDifficulty(difficulty)]
    return timedelta(days=days)


def review_card(
    card: "Flashcard",
    difficulty: CardDifficulty,
    correct: Optional[bool] = True,
    now: Optional[datetime] = None,
) -> "Flashcard":
    """
    Apply one review to a card.

    - times_reviewed is incremented
    - times_correct is incremented unless correct is explicitly False
    - last_reviewed_at is set to now and difficulty to the reported tier
    - next_review_at is now plus the tier's interval

    Args:
        card: Card to update in place.
        difficulty: Reported difficulty tier.
        correct: Whether the answer was right. None counts as correct.
        now: Review instant (defaults to current UTC time).

    Returns:
        The same card, updated.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    difficulty = CardDifficulty(difficulty)

    card.times_reviewed = (card.times_reviewed or 0) + 1
    if correct is not False:
        card.times_correct = (card.times_correct or 0) + 1

    card.last_reviewed_at = now
    card.difficulty = difficulty.value
    card.next_review_at = now + review_interval(difficulty)

    return card


def is_due(card: "Flashcard", now: datetime) -> bool:
    """A card is due when it was never scheduled or its review time has arrived."""
    return card.next_review_at is None or card.next_review_at <= now


def due_cards(cards: Iterable["Flashcard"], now: datetime) -> list["Flashcard"]:
    """
    Cards due at `now`, never-scheduled cards first, then oldest due first.

    Args:
        cards: Candidate cards.
        now: Reference instant.

    Returns:
        Due cards in review order.
    """
    due = [card for card in cards if is_due(card, now)]
    return sorted(
        due,
        key=lambda card: (
            card.next_review_at is not None,
            card.next_review_at or now,
        ),
    )
