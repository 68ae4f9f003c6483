"""
Quiz Services

LLM-backed multiple-choice question generation from study notes, and
storage and grading of the generated quizzes.

Usage:
    from study_tracker.services.quiz import QuizGenerator, QuizService
"""

from study_tracker.services.quiz.generator import (
    QuizGenerator,
    QuizParseError,
    fallback_questions,
    parse_quiz_json,
)
from study_tracker.services.quiz.service import QuizService, grade_answers

__all__ = [
    "QuizGenerator",
    "QuizParseError",
    "QuizService",
    "fallback_questions",
    "grade_answers",
    "parse_quiz_json",
]
