"""
Error Handling

Consistent error responses for the study tracker API.

Two layers cooperate:

- Services raise ServiceError subclasses (NotFoundError, AuthorizationError,
  ConflictError, ValidationError, LLMError). Each carries an HTTP status
  and error code.
- Routes are wrapped in @handle_endpoint_errors, which turns ServiceError
  into HTTPException and logs anything unexpected before answering 500.
- ErrorHandlingMiddleware is the last line: errors that escape a route
  without the decorator are logged under a short correlation id and
  returned in the standard JSON body.

Standard error body:
    {"error": ..., "message": ..., "error_id": ..., "details": ..., "timestamp": ...}

Usage:
    from study_tracker.middleware.error_handling import (
        NotFoundError,
        handle_endpoint_errors,
        setup_error_handling,
    )

    setup_error_handling(app, debug=settings.DEBUG)

    @router.get("/{deck_id}")
    @handle_endpoint_errors("Get deck")
    async def get_deck(...):
        ...

    raise NotFoundError(f"Deck {deck_id} not found")
"""

import functools
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional, TypeVar
from uuid import uuid4

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Error Response Schema
# =============================================================================


class ErrorResponse(BaseModel):
    """Standardized error response."""

    error: str  # Error code (e.g., "not_found")
    message: str
    error_id: str  # For log correlation
    details: Optional[dict] = None
    timestamp: datetime


# =============================================================================
# Custom Exceptions
# =============================================================================


class ServiceError(Exception):
    """
    Base exception for service errors.

    Carries an HTTP status code, an error code for categorization and
    optional details.

    Example:
        raise ServiceError("Database unavailable", status_code=503)
    """

    status_code: int = 500
    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        status_code: int = None,
        error_code: str = None,
        details: dict = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code:
            self.status_code = status_code
        if error_code:
            self.error_code = error_code
        self.details = details


class LLMError(ServiceError):
    """Raised when every quiz provider fails and no fallback is allowed."""

    status_code = 502
    error_code = "llm_error"


class ValidationError(ServiceError):
    """Raised when input passes schema validation but is semantically invalid."""

    status_code = 422
    error_code = "validation_error"


class NotFoundError(ServiceError):
    """
    Resource not found error.

    Also used when a subject or session belongs to another user, so
    foreign ids are indistinguishable from missing ones.
    """

    status_code = 404
    error_code = "not_found"


class AuthorizationError(ServiceError):
    """Raised when a deck, card or quiz exists but belongs to another user."""

    status_code = 403
    error_code = "forbidden"


class ConflictError(ServiceError):
    """Raised when the resource's state forbids the change, e.g. resubmitting a quiz."""

    status_code = 409
    error_code = "conflict"


# =============================================================================
# Route Decorator
# =============================================================================


def handle_endpoint_errors(
    operation: str,
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Wrap an async route so service errors become HTTP errors.

    - HTTPException passes through untouched
    - ServiceError becomes HTTPException with its status code and message
    - Anything else is logged with the operation name and becomes a 500

    functools.wraps keeps the route signature, so FastAPI still resolves
    the wrapped function's parameters and dependencies.

    Args:
        operation: Human-readable operation name used in log messages.
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except ServiceError as e:
                logger.warning(f"{operation} failed: {e.error_code}: {e.message}")
                raise HTTPException(status_code=e.status_code, detail=e.message)
            except Exception as e:
                logger.error(f"{operation} failed: {type(e).__name__}: {e}")
                raise HTTPException(
                    status_code=500, detail=f"{operation} failed"
                ) from e

        return wrapper

    return decorator


# =============================================================================
# Error Handling Middleware
# =============================================================================


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    - Catches exceptions that escape the routes
    - Logs with correlation ID
    - Returns consistent error format
    - Hides internal details unless debug is on
    """

    def __init__(self, app, debug: bool = False):
        super().__init__(app)
        self.debug = debug

    async def dispatch(self, request: Request, call_next):
        """Process request and handle any errors."""
        error_id = str(uuid4())[:8]

        try:
            return await call_next(request)

        except HTTPException:
            raise

        except ServiceError as e:
            logger.error(
                f"[{error_id}] {e.error_code}: {e.message}",
                extra={
                    "error_id": error_id,
                    "error_code": e.error_code,
                    "path": request.url.path,
                    "method": request.method,
                },
            )
            return create_error_response(
                e.error_code,
                e.message,
                status_code=e.status_code,
                details=e.details if self.debug else None,
                error_id=error_id,
            )

        except Exception as e:
            logger.error(
                f"[{error_id}] Unhandled error: {type(e).__name__}: {e}",
                extra={
                    "error_id": error_id,
                    "path": request.url.path,
                    "method": request.method,
                    "traceback": traceback.format_exc(),
                },
            )

            details = None
            if self.debug:
                details = {
                    "exception": type(e).__name__,
                    "message": str(e),
                    "traceback": traceback.format_exc(),
                }

            return create_error_response(
                "internal_server_error",
                "An unexpected error occurred",
                status_code=500,
                details=details,
                error_id=error_id,
            )


# =============================================================================
# Setup & Helpers
# =============================================================================


def setup_error_handling(app: FastAPI, debug: bool = False) -> None:
    """
    Configure error handling on the FastAPI app.

    Args:
        app: FastAPI application instance
        debug: Whether to include exception details in responses
    """
    app.add_middleware(ErrorHandlingMiddleware, debug=debug)

    @app.exception_handler(ServiceError)
    async def _service_error_handler(request: Request, exc: ServiceError):
        return create_error_response(
            exc.error_code,
            exc.message,
            status_code=exc.status_code,
            details=exc.details if debug else None,
        )

    logger.info(f"Error handling middleware enabled (debug={debug})")


def create_error_response(
    error_code: str,
    message: str,
    status_code: int = 500,
    details: dict = None,
    error_id: str = None,
) -> JSONResponse:
    """
    Create a standardized error response.

    Args:
        error_code: Error code for categorization
        message: Human-readable error message
        status_code: HTTP status code
        details: Optional additional details
        error_id: Correlation id (generated when omitted)

    Returns:
        JSONResponse with standardized error format
    """
    body = ErrorResponse(
        error=error_code,
        message=message,
        error_id=error_id or str(uuid4())[:8],
        details=details,
        timestamp=datetime.now(timezone.utc),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
