"""
Quiz API Models (Pydantic)

Schemas for generating multiple-choice quizzes from study notes, saving
them, and scoring submitted answers.

ARCHITECTURE NOTE:
    Saved quizzes have a corresponding SQLAlchemy file: study_tracker/db/models.py
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from study_tracker.models.base import StrictRequest, StrictResponse


class QuizQuestion(BaseModel):
    """
    A single multiple-choice question as produced by the generator.

    Exactly four options; correct_option_index points at the right one.
    """

    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=4, max_length=4)
    correct_option_index: int = Field(..., ge=0, le=3)
    explanation: str = ""

    @field_validator("options")
    @classmethod
    def _strip_options(cls, value: list[str]) -> list[str]:
        return [option.strip() for option in value]


class QuizGenerateRequest(StrictRequest):
    """Request to generate and save a quiz from study notes."""

    content: str = Field(..., min_length=1, description="Study notes to quiz on")
    num_questions: int = Field(5, ge=3, le=10)
    title: Optional[str] = Field(None, max_length=255)
    subject_id: Optional[str] = Field(None, description="Subject to file the quiz under")


class QuizGenerateResponse(StrictResponse):
    """Generator output: questions and which provider produced them."""

    questions: list[QuizQuestion]
    provider: Optional[str] = Field(
        None, description="LiteLLM model that answered, or None for the fallback"
    )
    is_fallback: bool = False


class QuizAnswer(StrictRequest):
    """One submitted answer."""

    question_id: str
    answer_index: int = Field(..., ge=0, le=3)


class QuizSubmitRequest(StrictRequest):
    """
    Answers for a saved quiz.

    Answers for unknown question ids are ignored; unanswered questions
    score as wrong.
    """

    answers: list[QuizAnswer]


class QuizQuestionResponse(StrictResponse):
    """Stored question with the user's answer once submitted."""

    id: str
    position: int = 0
    question: str
    options: list[str]
    correct_option_index: int
    explanation: Optional[str] = None
    user_answer: Optional[int] = None
    is_correct: Optional[bool] = None


class QuizSummaryResponse(StrictResponse):
    """Saved quiz without its questions, as listed in the history."""

    id: str
    title: str
    subject_id: Optional[str] = None
    provider: Optional[str] = None
    is_fallback: bool = False
    total_questions: int = 0
    score: Optional[int] = None
    is_completed: bool = False
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class QuizResponse(QuizSummaryResponse):
    """Saved quiz with its questions."""

    questions: list[QuizQuestionResponse] = Field(default_factory=list)
