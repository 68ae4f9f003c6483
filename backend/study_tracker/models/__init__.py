"""Pydantic models for the application."""

from study_tracker.models.base import (
    PartialUpdate,
    StrictRequest,
    StrictResponse,
    SuccessResponse,
)
from study_tracker.models.assignments import (
    AssignmentCreate,
    AssignmentResponse,
    AssignmentUpdate,
    DashboardStats,
)
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
from study_tracker.models.quiz import (
    QuizAnswer,
    QuizGenerateRequest,
    QuizGenerateResponse,
    QuizQuestion,
    QuizQuestionResponse,
    QuizResponse,
    QuizSubmitRequest,
    QuizSummaryResponse,
)
from study_tracker.models.study import (
    DailyStudyData,
    RecurrenceRule,
    SessionStatusUpdate,
    StreakData,
    StudySessionCreate,
    StudySessionLog,
    StudySessionResponse,
    StudySummary,
    SubjectCreate,
    SubjectResponse,
    SubjectStudyData,
    SubjectStudyTotal,
    SubjectUpdate,
)

__all__ = [
    # Base
    "PartialUpdate",
    "StrictRequest",
    "StrictResponse",
    "SuccessResponse",
    # Assignments
    "AssignmentCreate",
    "AssignmentResponse",
    "AssignmentUpdate",
    "DashboardStats",
    # Flashcards
    "CardCreate",
    "CardReviewRequest",
    "CardUpdate",
    "DeckCreate",
    "DeckDetailResponse",
    "DeckResponse",
    "DeckUpdate",
    "FlashcardResponse",
    # Quiz
    "QuizAnswer",
    "QuizGenerateRequest",
    "QuizGenerateResponse",
    "QuizQuestion",
    "QuizQuestionResponse",
    "QuizResponse",
    "QuizSubmitRequest",
    "QuizSummaryResponse",
    # Study
    "DailyStudyData",
    "RecurrenceRule",
    "SessionStatusUpdate",
    "StreakData",
    "StudySessionCreate",
    "StudySessionLog",
    "StudySessionResponse",
    "StudySummary",
    "SubjectCreate",
    "SubjectResponse",
    "SubjectStudyData",
    "SubjectStudyTotal",
    "SubjectUpdate",
]
