"""
Shared Test Fixtures and Configuration

This module provides pytest fixtures used across the unit tests.
"""

import os
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from dotenv import load_dotenv

# Add the backend directory to the path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env file from project root BEFORE any fixtures run
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / ".env"
if _env_file.exists():
    load_dotenv(_env_file)

from study_tracker.services.analytics import calendar  # noqa: E402
from tests.factories import make_result  # noqa: E402


# ============================================================================
# Environment Configuration
# ============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """
    Set up test environment variables before any tests run.

    Provider API keys are removed so quiz tests decide explicitly which
    providers are configured.
    """
    original_env = os.environ.copy()

    test_env = {
        "POSTGRES_HOST": os.environ.get("POSTGRES_HOST", "localhost"),
        "POSTGRES_PORT": os.environ.get("POSTGRES_PORT", "5432"),
        "POSTGRES_USER": os.environ.get("POSTGRES_TEST_USER", "testuser"),
        "POSTGRES_PASSWORD": os.environ.get("POSTGRES_TEST_PASSWORD", "testpass"),
        "POSTGRES_DB": os.environ.get("POSTGRES_TEST_DB", "testdb"),
        "DEBUG": "true",
    }
    os.environ.update(test_env)
    for key in ("OPENAI_API_KEY", "GEMINI_API_KEY"):
        os.environ.pop(key, None)

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def berlin_zone() -> Generator[None, None, None]:
    """
    Switch the local calendar zone to Europe/Berlin for one test.

    The zone lookup is cached, so the cache is cleared on entry and exit.
    """
    calendar.local_zone.cache_clear()
    with patch.object(calendar.settings, "LOCAL_TIMEZONE", "Europe/Berlin"):
        yield
    calendar.local_zone.cache_clear()


# ============================================================================
# Sample Configuration Data
# ============================================================================


@pytest.fixture
def sample_yaml_config() -> dict[str, Any]:
    """
    Provide a sample YAML configuration for testing.

    This matches the structure of config/default.yaml.
    """
    return {
        "app": {
            "name": "Test Study Tracker",
        },
        "database": {
            "pool_size": 3,
            "max_overflow": 5,
            "pool_timeout": 10,
        },
    }


# ============================================================================
# Mock Fixtures
# ============================================================================


def _assign_defaults(obj: Any) -> None:
    """Mimic the primary key and timestamp defaults applied on flush."""
    if getattr(obj, "id", None) is None:
        obj.id = str(uuid.uuid4())
    if hasattr(obj, "created_at") and obj.created_at is None:
        obj.created_at = datetime.now(timezone.utc)


@pytest.fixture
def mock_db_session() -> MagicMock:
    """
    Create a mock database session for unit testing.

    add/add_all assign ids like a flush would, so services can build
    responses from freshly added rows.
    """
    mock = MagicMock()
    mock.execute = AsyncMock(return_value=make_result())
    mock.commit = AsyncMock()
    mock.rollback = AsyncMock()
    mock.refresh = AsyncMock()
    mock.delete = AsyncMock()
    mock.close = AsyncMock()
    mock.add = MagicMock(side_effect=_assign_defaults)
    mock.add_all = MagicMock(
        side_effect=lambda objs: [_assign_defaults(obj) for obj in objs]
    )
    return mock
