"""
Flashcard API Models (Pydantic)

Request/response schemas for flashcard decks, cards and reviews.

ARCHITECTURE NOTE:
    There is a corresponding SQLAlchemy file: study_tracker/db/models.py

API Contract:
    Request models use StrictRequest (extra="forbid") to reject unknown fields.
"""

from __future__ import annotations

from datetime import datetime
from typing import ClassVar, Optional

from pydantic import Field

from study_tracker.enums.study import CardDifficulty
from study_tracker.models.base import (
    HEX_COLOR_PATTERN,
    PartialUpdate,
    StrictRequest,
    StrictResponse,
)


# ===========================================
# Deck Models
# ===========================================


class DeckCreate(StrictRequest):
    """Request to create a deck."""

    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    subject_id: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)


class DeckUpdate(PartialUpdate):
    """
    Partial update of a deck. Omitted fields are left unchanged.

    description and subject_id may be cleared with an explicit null.
    """

    non_nullable: ClassVar[tuple[str, ...]] = ("name", "color")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    subject_id: Optional[str] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)


class DeckResponse(StrictResponse):
    """Deck as returned by the API, without its cards."""

    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    subject_id: Optional[str] = None
    color: str
    last_studied_at: Optional[datetime] = None
    card_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ===========================================
# Card Models
# ===========================================


class CardCreate(StrictRequest):
    """Request to add a card to a deck."""

    front: str = Field(..., min_length=1)
    back: str = Field(..., min_length=1)


class CardUpdate(PartialUpdate):
    """Partial update of a card's content."""

    non_nullable: ClassVar[tuple[str, ...]] = ("front", "back")

    front: Optional[str] = Field(None, min_length=1)
    back: Optional[str] = Field(None, min_length=1)


class CardReviewRequest(StrictRequest):
    """
    Request to record a review of a card.

    `correct` defaults to True; only an explicit false leaves times_correct
    unchanged.

    Note: Uses StrictRequest - unknown fields will be rejected with 422.
    """

    difficulty: CardDifficulty = Field(..., description="easy, medium or hard")
    correct: Optional[bool] = Field(None, description="Whether the answer was right")


class FlashcardResponse(StrictResponse):
    """Card as returned by the API."""

    id: str
    deck_id: str
    front: str
    back: str
    difficulty: CardDifficulty = CardDifficulty.MEDIUM
    times_reviewed: int = 0
    times_correct: int = 0
    last_reviewed_at: Optional[datetime] = None
    next_review_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class DeckDetailResponse(DeckResponse):
    """Deck with all of its cards."""

    cards: list[FlashcardResponse] = Field(default_factory=list)
