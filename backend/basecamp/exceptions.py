"""
Basecamp Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific errors carrying an HTTP status code and a message.
How:   Every class derives from APIError. The centralized error responder
       (registered in main.py) turns any APIError into the JSON error envelope:

           {"statusCode": 404, "message": "...", "data": null,
            "success": false, "errors": [...]}

Who:   Raised by routes, services and the database layer.

Exception Hierarchy:
    APIError (base, operational by default)
    ├── BadRequestError          → 400
    ├── NotFoundError            → 404
    ├── PayloadTooLargeError     → 413
    ├── MediaUploadError         → 502 (operational: message is safe to show)
    ├── MediaConfigurationError  → 500 (non-operational)
    ├── DatabaseError            → 500 (non-operational)
    └── DatabaseConnectionError  → 503 (non-operational)

Operational vs non-operational:
    An operational error is one the application raised on purpose, with a
    status code and a message intended for the client. Outside development,
    only operational errors have their status code and message passed through;
    everything else becomes a generic 500.
"""

from typing import Any, Dict, List, Optional


class APIError(Exception):
    """
    Base exception for all Basecamp application errors.

    Attributes:
        status_code:    HTTP status code for the response
        message:        Client-facing error description
        errors:         Optional list of detail entries (field errors, etc.)
        data:           Always None for errors (kept for envelope symmetry)
        context:        Extra metadata, exposed only in development
        is_operational: True when the failure was raised deliberately
    """

    status_code: int = 500
    default_message: str = "Something went wrong"
    is_operational: bool = True

    def __init__(
        self,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
        errors: Optional[List[Any]] = None,
        context: Optional[Dict[str, Any]] = None,
        is_operational: Optional[bool] = None,
    ):
        if status_code is not None:
            self.status_code = status_code
        if is_operational is not None:
            self.is_operational = is_operational
        self.message = message or self.default_message
        self.errors = list(errors) if errors else []
        self.context = context or {}
        self.data = None
        super().__init__(self.message)

    @property
    def success(self) -> bool:
        return self.status_code < 400

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status_code={self.status_code}, "
            f"message={self.message!r}, is_operational={self.is_operational})"
        )


class BadRequestError(APIError):
    """Client sent input that cannot be processed. HTTP 400."""

    status_code = 400
    default_message = "Bad request"

    def __init__(
        self,
        message: Optional[str] = None,
        field: Optional[str] = None,
        errors: Optional[List[Any]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, errors=errors, context=ctx)
        self.field = field


class NotFoundError(APIError):
    """
    Raised when a requested resource does not exist. HTTP 404.

    Example:
        NotFoundError("media", "folder/abc123")
        → "media with ID 'folder/abc123' was not found"
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class PayloadTooLargeError(APIError):
    """Request body exceeds the configured limit. HTTP 413."""

    status_code = 413

    def __init__(self, limit: int, received: Optional[int] = None):
        message = f"Request body exceeds the maximum of {limit} bytes"
        ctx: Dict[str, Any] = {"limit": limit}
        if received is not None:
            ctx["received"] = received
        super().__init__(message=message, context=ctx)
        self.limit = limit


class MediaUploadError(APIError):
    """
    The media host rejected or failed an upload/delete call. HTTP 502.

    The temporary local file has already been removed when this is raised.
    """

    status_code = 502
    default_message = "Failed to upload file to the media host"


class MediaConfigurationError(APIError):
    """Media host credentials are missing. HTTP 500, non-operational."""

    status_code = 500
    default_message = "Media host is not configured"
    is_operational = False


class DatabaseError(APIError):
    """
    A database operation failed. HTTP 500, non-operational.

    The message returned to clients outside development is always generic;
    driver details stay in the server log and in `context`.
    """

    status_code = 500
    default_message = "A database error occurred"
    is_operational = False


class DatabaseConnectionError(DatabaseError):
    """The database could not be reached. HTTP 503."""

    status_code = 503
    default_message = "Database is unavailable"
