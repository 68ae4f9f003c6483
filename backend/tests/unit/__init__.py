"""
Unit Tests

Unit tests run in isolation without external dependencies.
The database session and LLM providers are mocked.
"""
