"""
Flashcard Service

Deck and card management plus review processing.

Ownership: decks belong to a user and cards inherit their deck's owner.
A missing deck or card raises NotFoundError; one owned by another user
raises AuthorizationError.

Reviews go through the pure scheduler (services/learning/scheduler.py);
this service only loads the card, applies the review, stamps the deck's
last_studied_at and commits both in one transaction.

Usage:
    from study_tracker.services.flashcard_service import FlashcardService

    service = FlashcardService(db)
    card = await service.review_card(user_id, card_id, CardReviewRequest(
        difficulty=CardDifficulty.HARD,
        correct=False,
    ))
"""

from datetime import datetime, timezone
from typing import Optional
import logging

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_tracker.config import settings
from study_tracker.db.models import Flashcard, FlashcardDeck
from study_tracker.enums.study import CardDifficulty
from study_tracker.middleware.error_handling import AuthorizationError, NotFoundError
from study_tracker.models.flashcards import (
    CardCreate,
    CardReviewRequest,
    CardUpdate,
    DeckCreate,
    DeckDetailResponse,
    DeckResponse,
    DeckUpdate,
    FlashcardResponse,
)
from study_tracker.services.learning.scheduler import due_cards, review_card
from study_tracker.services.study_session_service import StudySessionService

logger = logging.getLogger(__name__)


class FlashcardService:
    """
    Service for flashcard decks and cards.

    Provides:
    - Deck CRUD
    - Card CRUD within a deck
    - Review processing with tiered spaced repetition
    - Due card queries
    """

    def __init__(self, db: AsyncSession):
        """
        Initialize the flashcard service.

        Args:
            db: Async database session
        """
        self.db = db

    # ===========================================
    # Ownership Checks
    # ===========================================

    async def _get_deck(self, user_id: str, deck_id: str) -> FlashcardDeck:
        result = await self.db.execute(
            select(FlashcardDeck)
            .options(selectinload(FlashcardDeck.cards))
            .where(FlashcardDeck.id == deck_id)
        )
        deck = result.scalar_one_or_none()

        if deck is None:
            raise NotFoundError("Deck not found")
        if deck.user_id != user_id:
            raise AuthorizationError("Access denied")
        return deck

    async def _get_card(self, user_id: str, card_id: str) -> Flashcard:
        result = await self.db.execute(
            select(Flashcard)
            .options(selectinload(Flashcard.deck))
            .where(Flashcard.id == card_id)
        )
        card = result.scalar_one_or_none()

        if card is None:
            raise NotFoundError("Card not found")
        if card.deck.user_id != user_id:
            raise AuthorizationError("Access denied")
        return card

    async def _check_subject(self, user_id: str, subject_id: Optional[str]) -> None:
        """Linked subjects must belong to the same user."""
        if subject_id:
            await StudySessionService(self.db).get_owned_subject(user_id, subject_id)

    # ===========================================
    # Deck Operations
    # ===========================================

    async def create_deck(self, user_id: str, data: DeckCreate) -> DeckResponse:
        """Create an empty deck."""
        await self._check_subject(user_id, data.subject_id)

        deck = FlashcardDeck(
            user_id=user_id,
            name=data.name,
            description=data.description,
            subject_id=data.subject_id,
            color=data.color or settings.DEFAULT_DECK_COLOR,
            cards=[],
        )
        self.db.add(deck)
        await self.db.commit()

        logger.info(f"Created deck '{deck.name}' for user {user_id}")
        return DeckResponse.model_validate(deck)

    async def list_decks(self, user_id: str) -> list[DeckResponse]:
        """The user's decks, most recently updated first."""
        result = await self.db.execute(
            select(FlashcardDeck)
            .options(selectinload(FlashcardDeck.cards))
            .where(FlashcardDeck.user_id == user_id)
            .order_by(FlashcardDeck.updated_at.desc())
        )
        return [DeckResponse.model_validate(d) for d in result.scalars().all()]

    async def get_deck(self, user_id: str, deck_id: str) -> DeckDetailResponse:
        """A deck with all of its cards."""
        deck = await self._get_deck(user_id, deck_id)
        return DeckDetailResponse.model_validate(deck)

    async def update_deck(
        self, user_id: str, deck_id: str, data: DeckUpdate
    ) -> DeckResponse:
        """Apply a partial update to a deck."""
        deck = await self._get_deck(user_id, deck_id)
        updates = data.model_dump(exclude_unset=True)
        if "subject_id" in updates:
            await self._check_subject(user_id, updates["subject_id"])

        for field, value in updates.items():
            setattr(deck, field, value)
        await self.db.commit()

        logger.info(f"Updated deck {deck_id}")
        return DeckResponse.model_validate(deck)

    async def delete_deck(self, user_id: str, deck_id: str) -> None:
        """Delete a deck and its cards."""
        deck = await self._get_deck(user_id, deck_id)
        await self.db.delete(deck)
        await self.db.commit()
        logger.info(f"Deleted deck {deck_id}")

    # ===========================================
    # Card Operations
    # ===========================================

    async def add_card(
        self, user_id: str, deck_id: str, data: CardCreate
    ) -> FlashcardResponse:
        """
        Add a card to a deck.

        New cards have no next_review_at, so they are due immediately.
        """
        deck = await self._get_deck(user_id, deck_id)

        card = Flashcard(
            deck_id=deck.id,
            front=data.front,
            back=data.back,
            difficulty=CardDifficulty.MEDIUM.value,
            times_reviewed=0,
            times_correct=0,
        )
        self.db.add(card)
        await self.db.commit()

        logger.debug(f"Added card to deck {deck_id}")
        return FlashcardResponse.model_validate(card)

    async def update_card(
        self, user_id: str, card_id: str, data: CardUpdate
    ) -> FlashcardResponse:
        """Edit a card's front and/or back. Review state is untouched."""
        card = await self._get_card(user_id, card_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            setattr(card, field, value)
        await self.db.commit()

        return FlashcardResponse.model_validate(card)

    async def delete_card(self, user_id: str, card_id: str) -> None:
        """Delete a card."""
        card = await self._get_card(user_id, card_id)
        await self.db.delete(card)
        await self.db.commit()
        logger.debug(f"Deleted card {card_id}")

    # ===========================================
    # Review Operations
    # ===========================================

    async def review_card(
        self,
        user_id: str,
        card_id: str,
        review: CardReviewRequest,
        now: Optional[datetime] = None,
    ) -> FlashcardResponse:
        """
        Record a review and schedule the next one.

        Updates the card's counters and next_review_at, and the owning
        deck's last_studied_at, in a single commit.

        Args:
            user_id: Caller's user id
            card_id: Card being reviewed
            review: Reported difficulty and correctness
            now: Review instant (defaults to current UTC time)

        Returns:
            The updated card
        """
        now = now or datetime.now(timezone.utc)
        card = await self._get_card(user_id, card_id)

        review_card(card, review.difficulty, correct=review.correct, now=now)
        card.deck.last_studied_at = now
        await self.db.commit()

        logger.info(
            f"Reviewed card {card_id}: {card.difficulty}, "
            f"next review {card.next_review_at.isoformat()}"
        )
        return FlashcardResponse.model_validate(card)

    async def get_due_cards(
        self,
        user_id: str,
        deck_id: str,
        now: Optional[datetime] = None,
    ) -> list[FlashcardResponse]:
        """
        Cards in a deck that are due for review.

        Never-reviewed cards come first, then the longest overdue.
        """
        now = now or datetime.now(timezone.utc)
        deck = await self._get_deck(user_id, deck_id)

        result = await self.db.execute(
            select(Flashcard)
            .where(
                Flashcard.deck_id == deck.id,
                or_(
                    Flashcard.next_review_at.is_(None),
                    Flashcard.next_review_at <= now,
                ),
            )
            .order_by(Flashcard.next_review_at.asc().nulls_first())
        )
        cards = due_cards(result.scalars().all(), now)
        return [FlashcardResponse.model_validate(c) for c in cards]
