"""
Services package.

- analytics: pure calendar, recurrence, streak and aggregation functions
- learning: pure flashcard review scheduling
- quiz: LLM-backed quiz generation with a templated fallback, plus saved
  quizzes and grading
- *_service modules: database-backed services used by the routers
"""
