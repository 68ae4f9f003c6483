"""
Learning Services

Flashcard spaced-repetition scheduling.

Usage:
    from study_tracker.services.learning import due_cards, review_card
"""

from study_tracker.services.learning.scheduler import (
    due_cards,
    is_due,
    review_card,
    review_interval,
)

__all__ = [
    "due_cards",
    "is_due",
    "review_card",
    "review_interval",
]
