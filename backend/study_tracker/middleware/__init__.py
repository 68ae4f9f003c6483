"""
Middleware Package

Error handling for the API: service exception classes, the
handle_endpoint_errors route decorator and the global middleware.

Usage:
    from study_tracker.middleware import setup_error_handling, NotFoundError
"""

from study_tracker.middleware.error_handling import (
    AuthorizationError,
    ConflictError,
    ErrorHandlingMiddleware,
    LLMError,
    NotFoundError,
    ServiceError,
    ValidationError,
    handle_endpoint_errors,
    setup_error_handling,
)

__all__ = [
    "AuthorizationError",
    "ConflictError",
    "ErrorHandlingMiddleware",
    "LLMError",
    "NotFoundError",
    "ServiceError",
    "ValidationError",
    "handle_endpoint_errors",
    "setup_error_handling",
]
