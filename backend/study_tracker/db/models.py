"""
SQLAlchemy Database Models for Study Tracking

Tables:
- subjects: Subjects a user studies, with a cached streak
- study_sessions: Logged, planned and recurring study sessions
- flashcard_decks: Flashcard decks owned by a user
- flashcards: Cards with spaced-repetition review state
- assignments: Coursework with a due date, status and priority
- quizzes, quiz_questions: Saved generated quizzes and their answers

ARCHITECTURE NOTE:
    This file contains SQLALCHEMY models for database persistence.
    There is a corresponding Pydantic file: study_tracker/models/study.py

    Data flows: Service Layer → Pydantic → SQLAlchemy → Database
"""

from datetime import datetime, timezone
from typing import List, Optional
import uuid

from sqlalchemy import JSON, Boolean, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from study_tracker.db.base import Base
from study_tracker.enums.study import (
    AssignmentPriority,
    AssignmentStatus,
    CardDifficulty,
    FocusType,
    SessionStatus,
)


def _utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _new_id() -> str:
    """Generate a new UUID string primary key."""
    return str(uuid.uuid4())


# ===========================================
# Subjects & Study Sessions
# ===========================================


class Subject(Base):
    """
    A subject the user studies.

    Attributes:
        id: UUID string primary key.
        user_id: Identifier of the owning user (issued by the upstream gateway).
        name: Display name.
        color: Hex display color.
        category: Free-form grouping, e.g. "Science".
        difficulty: Free-form self-rated difficulty.
        study_goal_hours: Weekly goal in hours.
        streak: Cached current streak in days. Derived from completed
            sessions and recomputed on read; never authoritative.
        study_sessions: Sessions owned by this subject.
        assignments: Assignments filed under this subject.
    """

    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), index=True)

    name: Mapped[str] = mapped_column(String(255))
    color: Mapped[str] = mapped_column(String(7), default="#3B82F6")
    category: Mapped[Optional[str]] = mapped_column(String(50))
    difficulty: Mapped[Optional[str]] = mapped_column(String(10))
    study_goal_hours: Mapped[float] = mapped_column(Float, default=0.0)

    # Derived cache, see SubjectService
    streak: Mapped[int] = mapped_column(Integer, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )

    study_sessions: Mapped[List["StudySession"]] = relationship(
        back_populates="subject", cascade="all, delete-orphan"
    )
    assignments: Mapped[List["Assignment"]] = relationship(
        back_populates="subject", cascade="all, delete-orphan"
    )


class StudySession(Base):
    """
    A single study session.

    Sessions are created by direct logging (completed immediately), by
    single planning, or in bulk by the recurrence generator. Generated
    siblings share a recurrence_group_id.

    Attributes:
        id: UUID string primary key.
        subject_id: Owning subject.
        duration_minutes: Length of the session in minutes.
        start_time: When the session starts. Null for unscheduled plans.
        end_time: When the session ends. Null for unscheduled plans.
        title: Optional label.
        focus_type: Kind of activity (see FocusType).
        status: Lifecycle status (see SessionStatus).
        recurrence_group_id: Shared identifier of a generated series.
    """

    __tablename__ = "study_sessions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    subject_id: Mapped[str] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"), index=True
    )

    duration_minutes: Mapped[int] = mapped_column(Integer)
    start_time: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), index=True
    )
    end_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    title: Mapped[Optional[str]] = mapped_column(String(255))
    focus_type: Mapped[str] = mapped_column(
        String(20), default=FocusType.DEEP_FOCUS.value
    )
    status: Mapped[str] = mapped_column(
        String(20), default=SessionStatus.COMPLETED.value, index=True
    )
    recurrence_group_id: Mapped[Optional[str]] = mapped_column(String(36), index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )

    subject: Mapped["Subject"] = relationship(back_populates="study_sessions")


# ===========================================
# Flashcards
# ===========================================


class FlashcardDeck(Base):
    """
    A deck of flashcards.

    Attributes:
        id: UUID string primary key.
        user_id: Owning user.
        name: Deck name.
        description: Optional description.
        subject_id: Optional linked subject (unlinked if the subject is deleted).
        color: Hex display color.
        last_studied_at: Set whenever any card in the deck is reviewed.
        cards: Cards in the deck.
    """

    __tablename__ = "flashcard_decks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), index=True)

    name: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text)
    subject_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("subjects.id", ondelete="SET NULL")
    )
    color: Mapped[str] = mapped_column(String(7), default="#6366F1")

    last_studied_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )

    cards: Mapped[List["Flashcard"]] = relationship(
        back_populates="deck", cascade="all, delete-orphan"
    )

    @property
    def card_count(self) -> int:
        """Number of cards (requires `cards` to be loaded)."""
        return len(self.cards)


class Flashcard(Base):
    """
    A flashcard with simple tiered spaced-repetition state.

    Attributes:
        id: UUID string primary key.
        deck_id: Owning deck.
        front: Prompt side.
        back: Answer side.
        difficulty: Last reported difficulty tier (see CardDifficulty).
        times_reviewed: Total review count.
        times_correct: Reviews not explicitly marked incorrect.
        last_reviewed_at: Timestamp of the most recent review.
        next_review_at: When the card is next due. Null means due now.
    """

    __tablename__ = "flashcards"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    deck_id: Mapped[str] = mapped_column(
        ForeignKey("flashcard_decks.id", ondelete="CASCADE"), index=True
    )

    front: Mapped[str] = mapped_column(Text)
    back: Mapped[str] = mapped_column(Text)

    difficulty: Mapped[str] = mapped_column(
        String(10), default=CardDifficulty.MEDIUM.value
    )
    times_reviewed: Mapped[int] = mapped_column(Integer, default=0)
    times_correct: Mapped[int] = mapped_column(Integer, default=0)
    last_reviewed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    next_review_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )

    deck: Mapped["FlashcardDeck"] = relationship(back_populates="cards")


# ===========================================
# Assignments
# ===========================================


class Assignment(Base):
    """
    A piece of coursework due on a given date.

    Owned through its subject; deleting the subject deletes its
    assignments.

    Attributes:
        id: UUID string primary key.
        subject_id: Owning subject.
        title: Short title.
        description: Optional details.
        due_date: When the assignment is due.
        status: Progress (see AssignmentStatus).
        priority: Urgency (see AssignmentPriority).
        attachment_urls: Links to related material.
    """

    __tablename__ = "assignments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    subject_id: Mapped[str] = mapped_column(
        ForeignKey("subjects.id", ondelete="CASCADE"), index=True
    )

    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text)
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True)
    status: Mapped[str] = mapped_column(
        String(20), default=AssignmentStatus.NOT_STARTED.value, index=True
    )
    priority: Mapped[str] = mapped_column(
        String(10), default=AssignmentPriority.MEDIUM.value
    )
    attachment_urls: Mapped[list[str]] = mapped_column(JSON, default=list)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, onupdate=_utc_now
    )

    subject: Mapped["Subject"] = relationship(back_populates="assignments")


# ===========================================
# Quizzes
# ===========================================


class Quiz(Base):
    """
    A generated multiple-choice quiz saved for later attempts.

    Attributes:
        id: UUID string primary key.
        user_id: Owning user.
        subject_id: Optional linked subject (unlinked if the subject is deleted).
        title: Display title.
        provider: LiteLLM model that produced the questions; None for the
            templated fallback.
        is_fallback: Whether the questions came from the fallback template.
        total_questions: Number of questions.
        score: Correct answers after submission; None before.
        is_completed: Set once answers are submitted. A quiz is submitted once.
        completed_at: Submission time.
        questions: The quiz's questions in generation order.
    """

    __tablename__ = "quizzes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    user_id: Mapped[str] = mapped_column(String(36), index=True)
    subject_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("subjects.id", ondelete="SET NULL")
    )

    title: Mapped[str] = mapped_column(String(255))
    provider: Mapped[Optional[str]] = mapped_column(String(100))
    is_fallback: Mapped[bool] = mapped_column(Boolean, default=False)
    total_questions: Mapped[int] = mapped_column(Integer, default=0)
    score: Mapped[Optional[int]] = mapped_column(Integer)
    is_completed: Mapped[bool] = mapped_column(Boolean, default=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utc_now, index=True
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    questions: Mapped[List["QuizQuestionRecord"]] = relationship(
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestionRecord.position",
    )


class QuizQuestionRecord(Base):
    """
    One stored question of a quiz, with the user's answer once submitted.

    Attributes:
        id: UUID string primary key.
        quiz_id: Owning quiz.
        position: Zero-based order within the quiz.
        question: Question text.
        options: Exactly four answer options.
        correct_option_index: Index (0-3) of the right option.
        explanation: Why the right option is right.
        user_answer: Submitted option index; None if unanswered.
        is_correct: Whether user_answer matched; None until submitted.
    """

    __tablename__ = "quiz_questions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    quiz_id: Mapped[str] = mapped_column(
        ForeignKey("quizzes.id", ondelete="CASCADE"), index=True
    )
    position: Mapped[int] = mapped_column(Integer, default=0)

    question: Mapped[str] = mapped_column(Text)
    options: Mapped[list[str]] = mapped_column(JSON)
    correct_option_index: Mapped[int] = mapped_column(Integer)
    explanation: Mapped[Optional[str]] = mapped_column(Text)

    user_answer: Mapped[Optional[int]] = mapped_column(Integer)
    is_correct: Mapped[Optional[bool]] = mapped_column(Boolean)

    quiz: Mapped["Quiz"] = relationship(back_populates="questions")
