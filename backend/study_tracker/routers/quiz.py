"""
Quiz API Router

Endpoints for generating, taking and reviewing practice quizzes.

Endpoints:
- POST /api/quiz/generate - Generate and save a quiz from study notes
- GET /api/quiz/history - Recent quizzes, newest first
- GET /api/quiz/{quiz_id} - Get a quiz with its questions
- POST /api/quiz/{quiz_id}/submit - Submit answers and get the score
- DELETE /api/quiz/{quiz_id} - Delete a quiz
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from study_tracker.db.base import get_db
from study_tracker.dependencies import get_current_user_id
from study_tracker.middleware.error_handling import handle_endpoint_errors
from study_tracker.models.base import SuccessResponse
from study_tracker.models.quiz import (
    QuizGenerateRequest,
    QuizResponse,
    QuizSubmitRequest,
    QuizSummaryResponse,
)
from study_tracker.services.quiz import QuizGenerator, QuizService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/quiz", tags=["quiz"])


async def get_quiz_generator() -> QuizGenerator:
    """Get quiz generator configured from settings."""
    return QuizGenerator()


async def get_quiz_service(
    db: AsyncSession = Depends(get_db),
    generator: QuizGenerator = Depends(get_quiz_generator),
) -> QuizService:
    """Get quiz service."""
    return QuizService(db, generator)


@router.post(
    "/generate", response_model=QuizResponse, status_code=status.HTTP_201_CREATED
)
@handle_endpoint_errors("Generate quiz")
async def generate_quiz(
    request: QuizGenerateRequest,
    user_id: str = Depends(get_current_user_id),
    service: QuizService = Depends(get_quiz_service),
) -> QuizResponse:
    """
    Generate multiple-choice questions from study notes and save them.

    Configured LLM providers are tried in order with retries. If none
    succeeds, templated fallback questions are saved with is_fallback set.
    """
    logger.debug(f"Generating {request.num_questions} questions for user {user_id}")
    return await service.generate_quiz(user_id, request)


@router.get("/history", response_model=list[QuizSummaryResponse])
@handle_endpoint_errors("Get quiz history")
async def get_quiz_history(
    user_id: str = Depends(get_current_user_id),
    service: QuizService = Depends(get_quiz_service),
) -> list[QuizSummaryResponse]:
    """Most recent quizzes, newest first, without their questions."""
    return await service.get_quiz_history(user_id)


@router.get("/{quiz_id}", response_model=QuizResponse)
@handle_endpoint_errors("Get quiz")
async def get_quiz(
    quiz_id: str,
    user_id: str = Depends(get_current_user_id),
    service: QuizService = Depends(get_quiz_service),
) -> QuizResponse:
    return await service.get_quiz(user_id, quiz_id)


@router.post("/{quiz_id}/submit", response_model=QuizResponse)
@handle_endpoint_errors("Submit quiz")
async def submit_quiz(
    quiz_id: str,
    submission: QuizSubmitRequest,
    user_id: str = Depends(get_current_user_id),
    service: QuizService = Depends(get_quiz_service),
) -> QuizResponse:
    """
    Grade the answers and mark the quiz completed.

    A quiz can be submitted once; a second submission returns 409.
    """
    return await service.submit_quiz(user_id, quiz_id, submission)


@router.delete("/{quiz_id}", response_model=SuccessResponse)
@handle_endpoint_errors("Delete quiz")
async def delete_quiz(
    quiz_id: str,
    user_id: str = Depends(get_current_user_id),
    service: QuizService = Depends(get_quiz_service),
) -> SuccessResponse:
    """Delete a quiz and its questions."""
    await service.delete_quiz(user_id, quiz_id)
    return SuccessResponse(message=f"Quiz {quiz_id} deleted")
