"""API Routers package."""

from study_tracker.routers import analytics as analytics_router
from study_tracker.routers import assignments as assignments_router
from study_tracker.routers import dashboard as dashboard_router
from study_tracker.routers import flashcards as flashcards_router
from study_tracker.routers import health as health_router
from study_tracker.routers import quiz as quiz_router
from study_tracker.routers import study_sessions as study_sessions_router
from study_tracker.routers import subjects as subjects_router

__all__ = [
    "analytics_router",
    "assignments_router",
    "dashboard_router",
    "flashcards_router",
    "health_router",
    "quiz_router",
    "study_sessions_router",
    "subjects_router",
]
