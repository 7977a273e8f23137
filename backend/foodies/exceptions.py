"""
Foodies Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for each error scenario.
Why:   Services raise domain errors; global handlers in main.py turn them into
       HTTP responses with the right status code and a consistent body.
How:   Each exception carries a user-facing message and an optional context
       dict. Context is logged server-side and only returned to the client
       where it is safe (validation details, conflicting resource ids).

Exception Hierarchy:
    FoodiesError (base)
    ├── ValidationError   → 400 Bad Request
    ├── AuthError         → 401 Unauthorized
    ├── ForbiddenError    → 403 Forbidden
    ├── NotFoundError     → 404 Not Found
    ├── ConflictError     → 409 Conflict
    ├── FileStorageError  → 500 Internal Server Error
    └── DatabaseError     → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class FoodiesError(Exception):
    """
    Base exception for all Foodies application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(FoodiesError):
    """
    Raised when client input fails validation.

    HTTP:    400 Bad Request

    Schema failures from the validation layer carry the field-level list in
    context["errors"], e.g.:
        {
            "error": "validation_error",
            "message": "Request validation failed",
            "details": {
                "source": "query",
                "errors": [{"field": "page", "message": "Input should be greater than or equal to 1"}]
            }
        }
    Business-rule failures (e.g. following yourself) set a single `field`.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        if errors is not None:
            ctx["errors"] = errors
        super().__init__(message=message, context=ctx)
        self.field = field
        self.errors = errors or []


class AuthError(FoodiesError):
    """
    Raised when the bearer token is missing, malformed, expired, or no longer
    matches the stored token of its user.

    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Not authorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ForbiddenError(FoodiesError):
    """
    Raised when an authenticated user attempts an action on a resource they
    do not own (deleting someone else's recipe).

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You are not allowed to perform this action",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(FoodiesError):
    """
    Raised when a requested resource does not exist.

    HTTP:    404 Not Found

    SQLAlchemy returns None for missing rows; services convert that None
    into this exception so HTTP concerns stay out of the query code.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(FoodiesError):
    """
    Raised when the request collides with existing state.

    HTTP:    409 Conflict

    When:
        - Recipe already in favorites / not in favorites
        - Owner already has a recipe with this title
        - Category name taken
        - Already following / not following a user
        - A unique constraint fired during flush (concurrent insert race)
    """

    def __init__(
        self,
        message: str = "The request conflicts with the current state of the resource",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(FoodiesError):
    """
    Raised when file system operations fail (disk full, permission denied).

    HTTP:    500 Internal Server Error. File paths stay in the server log.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(FoodiesError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The response message is always generic. The original exception type is
        kept in context for the server log only; SQL text and constraint
        names never reach the client.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
