"""
RouteDemo: Custom Exception Hierarchy
=====================================

What:  Application-specific exceptions for each failure kind the services know about.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by routing helpers and the upload service; caught by global handlers.

Exception Hierarchy:
    RouteDemoError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── PayloadTooLargeError     → 413 Payload Too Large
    ├── UnimplementedRouteError  → 501 Not Implemented (placeholder route)
    ├── FileStorageError         → 500 Internal Server Error
    └── RouteDefinitionError     → raised at registration time, never reaches a client
"""

from typing import Any, Dict, Optional


class RouteDemoError(Exception):
    """
    Base exception for all RouteDemo application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged; returned only by client-error handlers)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(RouteDemoError):
    """
    Raised when client input fails validation.

    When:    Upload field missing, field is not a file, unsafe filename.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Multipart field 'file' is missing",
            "details": {"field": "file", "reason": "missing"}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        if reason:
            ctx["reason"] = reason
        super().__init__(message=message, context=ctx)
        self.field = field
        self.reason = reason


class PayloadTooLargeError(RouteDemoError):
    """Raised when an upload exceeds `settings.max_upload_size`. HTTP 413."""

    def __init__(
        self,
        max_size: int,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["max_size"] = max_size
        super().__init__(
            message=f"Uploaded file exceeds the maximum size of {max_size} bytes",
            context=ctx,
        )
        self.max_size = max_size


class UnimplementedRouteError(RouteDemoError):
    """
    Raised when a request is dispatched to a placeholder route.

    What:    The route was declared without behavior.
    HTTP:    501 Not Implemented, kept apart from the generic 500 so a
             declared-but-empty route is never confused with a crash.
    """

    def __init__(
        self,
        method: str,
        pattern: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["method"] = method
        ctx["route"] = pattern
        super().__init__(
            message=f"Route {method} {pattern} is declared but has no handler",
            context=ctx,
        )
        self.method = method
        self.pattern = pattern


class FileStorageError(RouteDemoError):
    """
    Raised when file system operations fail.

    When:    Disk full, permission denied, directory missing, I/O error.
    HTTP:    500 Internal Server Error

    Recovery:
        - The temporary file is removed before this is raised
        - The client gets a generic message; OS details stay in the log
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RouteDefinitionError(RouteDemoError):
    """
    Raised while building the route table.

    When:    Malformed pattern, missing handler, duplicate (method, pattern).
    Effect:  App construction fails, so the server never starts listening.
    """

    def __init__(
        self,
        message: str = "Invalid route definition",
        pattern: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if pattern is not None:
            ctx["pattern"] = pattern
        super().__init__(message=message, context=ctx)
        self.pattern = pattern
