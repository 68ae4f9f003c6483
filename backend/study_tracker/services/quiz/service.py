"""
Quiz Service

Saves generated quizzes, scores submissions and lists past attempts.

Lifecycle:
1. generate_quiz() asks the QuizGenerator for questions and stores the
   quiz with its questions in one commit.
2. submit_quiz() grades the answers once. A completed quiz cannot be
   resubmitted (ConflictError).
3. get_quiz_history() lists the newest QUIZ_HISTORY_LIMIT quizzes.

A missing quiz raises NotFoundError; one owned by another user raises
AuthorizationError.

Usage:
    from study_tracker.services.quiz import QuizService

    service = QuizService(db, QuizGenerator())
    quiz = await service.generate_quiz(user_id, request)
    graded = await service.submit_quiz(user_id, quiz.id, answers)
"""

from datetime import datetime, timezone
from typing import Iterable, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from study_tracker.config import settings
from study_tracker.db.models import Quiz, QuizQuestionRecord
from study_tracker.middleware.error_handling import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
)
from study_tracker.models.quiz import (
    QuizAnswer,
    QuizGenerateRequest,
    QuizResponse,
    QuizSubmitRequest,
    QuizSummaryResponse,
)
from study_tracker.services.quiz.generator import QuizGenerator
from study_tracker.services.study_session_service import StudySessionService

logger = logging.getLogger(__name__)


def grade_answers(
    questions: Iterable[QuizQuestionRecord], answers: Iterable[QuizAnswer]
) -> int:
    """
    Record answers on their questions and return the number correct.

    Answers naming an unknown question are ignored. If a question is
    answered twice the last answer counts. Unanswered questions are
    marked incorrect with no user_answer.
    """
    by_id = {q.id: q for q in questions}
    for question in by_id.values():
        question.user_answer = None
        question.is_correct = False

    for answer in answers:
        question = by_id.get(answer.question_id)
        if question is None:
            continue
        question.user_answer = answer.answer_index
        question.is_correct = answer.answer_index == question.correct_option_index

    return sum(1 for q in by_id.values() if q.is_correct)


class QuizService:
    """
    Service for saved quizzes.

    Provides:
    - Generation and storage
    - Retrieval and history
    - One-time submission with scoring
    - Deletion
    """

    def __init__(self, db: AsyncSession, generator: QuizGenerator):
        """
        Initialize the quiz service.

        Args:
            db: Async database session
            generator: Question generator (LLM with templated fallback)
        """
        self.db = db
        self.generator = generator

    async def _get_quiz(self, user_id: str, quiz_id: str) -> Quiz:
        result = await self.db.execute(
            select(Quiz).options(selectinload(Quiz.questions)).where(Quiz.id == quiz_id)
        )
        quiz = result.scalar_one_or_none()

        if quiz is None:
            raise NotFoundError("Quiz not found")
        if quiz.user_id != user_id:
            raise AuthorizationError("Access denied")
        return quiz

    async def generate_quiz(
        self, user_id: str, request: QuizGenerateRequest
    ) -> QuizResponse:
        """
        Generate questions from the notes and save them as a new quiz.

        Raises:
            NotFoundError: If subject_id is given but not owned by the user
        """
        if request.subject_id:
            await StudySessionService(self.db).get_owned_subject(
                user_id, request.subject_id
            )

        generated = await self.generator.generate(
            request.content, request.num_questions
        )
        records = [
            QuizQuestionRecord(
                position=position,
                question=q.question,
                options=list(q.options),
                correct_option_index=q.correct_option_index,
                explanation=q.explanation,
            )
            for position, q in enumerate(generated.questions)
        ]
        quiz = Quiz(
            user_id=user_id,
            subject_id=request.subject_id,
            title=request.title or settings.QUIZ_DEFAULT_TITLE,
            provider=generated.provider,
            is_fallback=generated.is_fallback,
            total_questions=len(records),
            is_completed=False,
            questions=records,
        )
        self.db.add_all([quiz, *records])
        await self.db.commit()

        logger.info(
            f"Saved quiz {quiz.id} with {len(records)} questions for user {user_id} "
            f"(provider={generated.provider or 'fallback'})"
        )
        return QuizResponse.model_validate(quiz)

    async def get_quiz(self, user_id: str, quiz_id: str) -> QuizResponse:
        """A quiz with its questions."""
        quiz = await self._get_quiz(user_id, quiz_id)
        return QuizResponse.model_validate(quiz)

    async def get_quiz_history(self, user_id: str) -> list[QuizSummaryResponse]:
        """The user's most recent quizzes, newest first, without questions."""
        result = await self.db.execute(
            select(Quiz)
            .where(Quiz.user_id == user_id)
            .order_by(Quiz.created_at.desc())
            .limit(settings.QUIZ_HISTORY_LIMIT)
        )
        return [QuizSummaryResponse.model_validate(q) for q in result.scalars().all()]

    async def submit_quiz(
        self,
        user_id: str,
        quiz_id: str,
        submission: QuizSubmitRequest,
        now: Optional[datetime] = None,
    ) -> QuizResponse:
        """
        Grade a quiz and mark it completed.

        Raises:
            ConflictError: If the quiz was already submitted
        """
        quiz = await self._get_quiz(user_id, quiz_id)
        if quiz.is_completed:
            raise ConflictError("Quiz already completed")

        quiz.score = grade_answers(quiz.questions, submission.answers)
        quiz.is_completed = True
        quiz.completed_at = now or datetime.now(timezone.utc)
        await self.db.commit()

        logger.info(f"Quiz {quiz_id} scored {quiz.score}/{quiz.total_questions}")
        return QuizResponse.model_validate(quiz)

    async def delete_quiz(self, user_id: str, quiz_id: str) -> None:
        """Delete a quiz and its questions."""
        quiz = await self._get_quiz(user_id, quiz_id)
        await self.db.delete(quiz)
        await self.db.commit()
        logger.info(f"Deleted quiz {quiz_id}")
