"""
Study Tracker Test Suite

Test Structure:
    tests/
    ├── conftest.py          # Shared fixtures and configuration
    ├── factories.py         # ORM row and query result builders
    └── unit/                # Unit tests (isolated, no external dependencies)
        ├── test_calendar.py, test_recurrence.py, test_streaks.py,
        │   test_aggregation.py, test_flashcard_scheduler.py  # pure core
        ├── test_*_service.py                                 # services, mocked DB
        ├── test_quiz_generator.py                            # LiteLLM mocked
        └── test_routers.py, test_error_handling.py           # HTTP layer

Running Tests:
    # From the repository root
    pytest -v

    # Run with coverage
    pytest --cov=study_tracker --cov-report=html
"""
