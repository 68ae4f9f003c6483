"""
Application Configuration

This module provides type-safe configuration loading using Pydantic settings.
Environment variables are loaded from .env file and validated.

Usage:
    from study_tracker.config import settings

    # Access settings
    db_url = settings.POSTGRES_URL
    tz = settings.LOCAL_TIMEZONE
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Study Tracker"
    DEBUG: bool = False
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:5173"]

    # PostgreSQL
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "studytracker"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_DB: str = "studytracker"

    @property
    def POSTGRES_URL(self) -> str:
        """Async PostgreSQL connection URL."""
        return f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    @property
    def POSTGRES_URL_SYNC(self) -> str:
        """Sync PostgreSQL connection URL for maintenance scripts."""
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Calendar
    # IANA zone that defines the "local calendar day" for streaks and analytics.
    # Aware timestamps are converted into this zone before taking the date.
    LOCAL_TIMEZONE: str = "UTC"

    # Study sessions
    DEFAULT_SESSION_MINUTES: int = 25
    DEFAULT_SUBJECT_COLOR: str = "#3B82F6"

    # Analytics
    ANALYTICS_DEFAULT_COLOR: str = "#6366F1"  # Used when a subject has no color
    ANALYTICS_DEFAULT_DAILY_WINDOW: int = 7
    ANALYTICS_MAX_DAILY_WINDOW: int = 366
    STREAK_MILESTONES: list[int] = [3, 7, 14, 30, 60, 100, 365]

    # Flashcards
    DEFAULT_DECK_COLOR: str = "#6366F1"
    REVIEW_INTERVAL_EASY_DAYS: int = 7
    REVIEW_INTERVAL_MEDIUM_DAYS: int = 3
    REVIEW_INTERVAL_HARD_DAYS: int = 1

    # Assignments
    DASHBOARD_DUE_SOON_LIMIT: int = 3  # Open assignments listed on the dashboard

    # Saved quizzes
    QUIZ_DEFAULT_TITLE: str = "AI Generated Quiz"
    QUIZ_HISTORY_LIMIT: int = 20

    # LLM providers for quiz generation (LiteLLM "provider/model" format).
    # Tried in order; a provider is skipped when its API key is missing.
    OPENAI_API_KEY: str = ""
    GEMINI_API_KEY: str = ""
    QUIZ_MODELS: list[str] = ["openai/gpt-3.5-turbo", "gemini/gemini-2.5-flash"]
    QUIZ_TEMPERATURE: float = 0.7
    QUIZ_MAX_TOKENS: int = 2048
    QUIZ_MAX_ATTEMPTS: int = 3
    QUIZ_BACKOFF_MIN_SECONDS: float = 3.0
    QUIZ_BACKOFF_MAX_SECONDS: float = 30.0
    QUIZ_FALLBACK_MAX_QUESTIONS: int = 3

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()


@lru_cache()
def load_yaml_config() -> dict[str, Any]:
    """Load application configuration from config/default.yaml."""
    config_path = Path(__file__).parent.parent.parent.parent / "config" / "default.yaml"

    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


yaml_config: dict[str, Any] = load_yaml_config()
