"""
Flashcards API Router

Endpoints for flashcard decks, cards and reviews.

Endpoints:
- POST /api/flashcards/decks - Create a deck
- GET /api/flashcards/decks - List decks
- GET /api/flashcards/decks/{deck_id} - Get a deck with its cards
- PUT /api/flashcards/decks/{deck_id} - Update a deck
- DELETE /api/flashcards/decks/{deck_id} - Delete a deck
- POST /api/flashcards/decks/{deck_id}/cards - Add a card
- GET /api/flashcards/decks/{deck_id}/due - Cards due for review
- PUT /api/flashcards/cards/{card_id} - Edit a card
- DELETE /api/flashcards/cards/{card_id} - Delete a card
- POST /api/flashcards/cards/{card_id}/review - Submit a review
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.db.base import get_db
from study_tracker.dependencies import get_current_user_id
from study_tracker.middleware.error_handling import handle_endpoint_errors
from study_tracker.models.base import SuccessResponse
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
from study_tracker.services.flashcard_service import FlashcardService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/flashcards", tags=["flashcards"])


async def get_flashcard_service(
    db: AsyncSession = Depends(get_db),
) -> FlashcardService:
    """Get flashcard service."""
    return FlashcardService(db)


# ===========================================
# Deck Endpoints
# ===========================================


@router.post("/decks", response_model=DeckResponse, status_code=status.HTTP_201_CREATED)
@handle_endpoint_errors("Create deck")
async def create_deck(
    data: DeckCreate,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardService = Depends(get_flashcard_service),
) -> DeckResponse:
    """Create an empty deck."""
    return await service.create_deck(user_id, data)


@router.get("/decks", response_model=list[DeckResponse])
@handle_endpoint_errors("List decks")
async def list_decks(
    user_id: str = Depends(get_current_user_id),
    service: FlashcardService = Depends(get_flashcard_service),
) -> list[DeckResponse]:
    """List decks, most recently updated first."""
    return await service.list_decks(user_id)


@router.get("/decks/{deck_id}", response_model=DeckDetailResponse)
@handle_endpoint_errors("Get deck")
async def get_deck(
    deck_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardService = Depends(get_flashcard_service),
) -> DeckDetailResponse:
    """Get a deck with all of its cards."""
    return await service.get_deck(user_id, deck_id)


@router.put("/decks/{deck_id}", response_model=DeckResponse)
@handle_endpoint_errors("Update deck")
async def update_deck(
    deck_id: str,
    data: DeckUpdate,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardService = Depends(get_flashcard_service),
) -> DeckResponse:
    """Update a deck's name, description, subject or color."""
    return await service.update_deck(user_id, deck_id, data)


@router.delete("/decks/{deck_id}", response_model=SuccessResponse)
@handle_endpoint_errors("Delete deck")
async def delete_deck(
    deck_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardService = Depends(get_flashcard_service),
) -> SuccessResponse:
    """Delete a deck and all of its cards."""
    await service.delete_deck(user_id, deck_id)
    return SuccessResponse(message=f"Deck {deck_id} deleted")


# ===========================================
# Card Endpoints
# ===========================================


@router.post(
    "/decks/{deck_id}/cards",
    response_model=FlashcardResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_endpoint_errors("Add card")
async def add_card(
    deck_id: str,
    data: CardCreate,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardService = Depends(get_flashcard_service),
) -> FlashcardResponse:
    """Add a card to a deck. New cards are due immediately."""
    return await service.add_card(user_id, deck_id, data)


@router.get("/decks/{deck_id}/due", response_model=list[FlashcardResponse])
@handle_endpoint_errors("Get due cards")
async def get_due_cards(
    deck_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardService = Depends(get_flashcard_service),
) -> list[FlashcardResponse]:
    """Cards due now: never-reviewed first, then the longest overdue."""
    return await service.get_due_cards(user_id, deck_id)


@router.put("/cards/{card_id}", response_model=FlashcardResponse)
@handle_endpoint_errors("Update card")
async def update_card(
    card_id: str,
    data: CardUpdate,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardService = Depends(get_flashcard_service),
) -> FlashcardResponse:
    """Edit a card's front and/or back."""
    return await service.update_card(user_id, card_id, data)


@router.delete("/cards/{card_id}", response_model=SuccessResponse)
@handle_endpoint_errors("Delete card")
async def delete_card(
    card_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardService = Depends(get_flashcard_service),
) -> SuccessResponse:
    """Delete a card."""
    await service.delete_card(user_id, card_id)
    return SuccessResponse(message=f"Card {card_id} deleted")


@router.post("/cards/{card_id}/review", response_model=FlashcardResponse)
@handle_endpoint_errors("Review card")
async def review_card(
    card_id: str,
    review: CardReviewRequest,
    user_id: str = Depends(get_current_user_id),
    service: FlashcardService = Depends(get_flashcard_service),
) -> FlashcardResponse:
    """
    Submit a review.

    The next review is scheduled 7 (easy), 3 (medium) or 1 (hard) days
    from now. `correct: false` leaves the correct-answer count unchanged.
    """
    return await service.review_card(user_id, card_id, review)
