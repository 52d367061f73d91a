"""
Notekeeper API - Custom Exception Hierarchy
============================================

What:  Application-specific exceptions for each client and server error case.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with the matching status code.
Who:   Raised by services and the store-facing code; caught by global handlers.
When:  During request processing, whenever a request has to be rejected.

Exception Hierarchy:
    NotekeeperError (base)
    ├── ValidationError          → 400 Bad Request (blank title/content)
    ├── NotFoundError            → 404 Not Found (unknown note id)
    ├── RateLimitExceededError   → 429 Too Many Requests
    └── SearchQueryError         → 400 Bad Request
        ├── MissingQueryError    (no `q` parameter)
        └── InvalidQueryError    (`q` is blank after trimming)

Anything else that escapes a handler is reported as a generic 500.
"""

from typing import Any, Dict, List, Optional


class NotekeeperError(Exception):
    """
    Base exception for all Notekeeper application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info for logs and structured details
    """

    error_code = "server_error"

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(NotekeeperError):
    """
    Raised when note input fails validation.

    `details` holds one human-readable message per offending field, in
    field order (title before content). Create reports every failing field;
    update stops at the first one.

    Example response:
        {
            "error": "validation_error",
            "message": "Validation failed",
            "details": ["Title is required and cannot be empty or just spaces"]
        }
    """

    error_code = "validation_error"

    def __init__(
        self,
        details: Optional[List[str]] = None,
        message: str = "Validation failed",
        fields: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if fields:
            ctx["fields"] = list(fields)
        super().__init__(message=message, context=ctx)
        self.details = list(details or [])
        self.fields = list(fields or [])


class NotFoundError(NotekeeperError):
    """
    Raised when a requested resource does not exist.

    The service layer converts the store's `None` result into this
    exception so the route stays free of status-code logic.
    """

    error_code = "not_found"

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"No {resource} exists with id {resource_id}"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class RateLimitExceededError(NotekeeperError):
    """
    Raised when a client exceeds the per-client note creation limit.

    Response includes:
        - retry_after: Seconds until the oldest request leaves the window
        - Retry-After header for HTTP-compliant clients
    """

    error_code = "rate_limit_exceeded"

    def __init__(
        self,
        limit: int,
        window: int,
        retry_after: int = 1,
        context: Optional[Dict[str, Any]] = None,
    ):
        per = "minute" if window == 60 else f"{window} seconds"
        message = f"Maximum {limit} notes per {per} allowed"
        ctx = context or {}
        ctx.update({"limit": limit, "window_seconds": window, "retry_after": retry_after})
        super().__init__(message=message, context=ctx)
        self.limit = limit
        self.window = window
        self.retry_after = retry_after


class SearchQueryError(NotekeeperError):
    """Base for rejected search queries."""

    error_code = "invalid_query"


class MissingQueryError(SearchQueryError):
    """The `q` parameter was not supplied (or was an empty string)."""

    error_code = "missing_query"

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message='Please provide a search query using the "q" parameter',
            context=context,
        )


class InvalidQueryError(SearchQueryError):
    """The `q` parameter contained only whitespace."""

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Search query cannot be empty or just spaces",
            context=context,
        )
