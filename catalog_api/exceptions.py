"""
Product Catalog API: Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for the different failure scenarios.
How:   Each exception carries a message and an optional context dict.
       Global exception handlers (registered in main.py) map each class to
       an HTTP status code and a JSON error body.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    CatalogError (base)
    ├── AuthenticationError  → 401 Unauthorized (missing/invalid/expired token)
    ├── AuthorizationError   → 403 Forbidden (role mismatch)
    ├── ValidationError      → 400 Bad Request (business rules, duplicates)
    ├── NotFoundError        → 404 Not Found
    └── DatabaseError        → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """
    Base exception for all catalog application errors.

    Attributes:
        message:  User-facing error description (returned in the response)
        context:  Additional debug info (logged, not returned by default)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class AuthenticationError(CatalogError):
    """
    Raised when a request cannot be tied to a valid identity.

    When:  No bearer token, malformed header, bad signature, expired token,
           or wrong login credentials.
    HTTP:  401 Unauthorized
    """

    def __init__(
        self,
        message: str = "Unauthorized: Invalid token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(CatalogError):
    """
    Raised when the authenticated identity lacks the required role.

    HTTP:  403 Forbidden
    """

    def __init__(
        self,
        message: str = "You do not have permission to access this resource",
        required_role: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if required_role:
            ctx["required_role"] = required_role
        super().__init__(message=message, context=ctx)
        self.required_role = required_role


class ValidationError(CatalogError):
    """
    Raised when client input breaks a rule the schema layer cannot express.

    When:  Duplicate username/email/category name, minPrice above maxPrice.
    HTTP:  400 Bad Request

    Schema violations never reach this class: FastAPI raises
    RequestValidationError, which main.py also maps to 400.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        details: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.details = details


class NotFoundError(CatalogError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that into
    this exception so the handler can answer 404.

    Message format matches the API contract: "<Resource> not found".
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)
        self.resource = resource


class DatabaseError(CatalogError):
    """
    Raised when database operations fail unexpectedly.

    When:  Connection lost mid-query, store unreachable, unexpected driver error.
    HTTP:  500 Internal Server Error

    The original driver message is kept in context["original_error"] and is
    only echoed to clients when EXPOSE_ERROR_DETAILS is enabled.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
