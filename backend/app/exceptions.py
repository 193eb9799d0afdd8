"""
Atomsmiths Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error scenarios of the club API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and routes; caught by global handlers.

Exception Hierarchy:
    ClubAPIError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── InvalidActionError       → 400 Bad Request (unknown dispatch action)
    ├── NotFoundError            → 404 Not Found
    ├── MethodNotAllowedError    → 405 Method Not Allowed
    ├── ConflictError            → 409 Conflict (duplicate email)
    └── DatabaseError            → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class ClubAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; only some handlers return it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ClubAPIError):
    """
    Raised when client input fails validation.

    When:    Missing required fields, bad email format, past event date,
             malformed ObjectId, non-object request body.
    HTTP:    400 Bad Request

    Example response:
        {
            "ok": false,
            "error": "validation_error",
            "message": "Invalid email format",
            "details": {"field": "email"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidActionError(ClubAPIError):
    """Raised by the dispatch route when `action` names no known resource."""

    def __init__(self, action: Optional[str] = None):
        ctx = {"action": action} if action else {}
        super().__init__(message="Invalid action", context=ctx)
        self.action = action


class NotFoundError(ClubAPIError):
    """
    Raised when a requested document does not exist.

    When:    Lookup, update or delete by an id that matches nothing.
    HTTP:    404 Not Found

    Motor returns None for missing documents (not an exception); services
    convert that None into this error.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource


class MethodNotAllowedError(ClubAPIError):
    """
    Raised when an action does not support the request's HTTP method.

    HTTP:    405 Method Not Allowed
    """

    def __init__(
        self,
        method: Optional[str] = None,
        message: str = "Method not allowed",
        allowed: Optional[list] = None,
    ):
        ctx: Dict[str, Any] = {}
        if method:
            ctx["method"] = method
        if allowed:
            ctx["allowed"] = allowed
        super().__init__(message=message, context=ctx)
        self.allowed = allowed or []


class ConflictError(ClubAPIError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    Registering or updating a member with an email already in use.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ClubAPIError):
    """
    Raised when database operations fail unexpectedly.

    When:    Server selection timeout, network error mid-query, write error.
    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Driver error details
    are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
