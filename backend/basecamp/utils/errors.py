"""
Basecamp Backend — Error Normalization
========================================

What:  Turns any exception into an APIError, then into the JSON error body.
Who:   The exception handlers registered in main.py, and the body size
       middleware (which answers before routing).

Verbosity rules:
    development:
        status code, message, errors, isOperationalError, stack, meta
    any other environment:
        operational error     → its status code, message and errors
        non-operational error → 500 "Something went wrong", no errors
    `stack` is never present outside development.
"""

import traceback
from typing import Any, Dict, Optional

from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException

from basecamp.exceptions import APIError

GENERIC_ERROR_MESSAGE = "Something went wrong"


def normalize_error(exc: BaseException) -> APIError:
    """
    Map an arbitrary exception onto the APIError taxonomy.

    - APIError: returned unchanged
    - RequestValidationError: operational 422 with the field errors
    - Starlette HTTPException (404 route, 405 method, ...): operational
    - anything else: non-operational 500, chained to the original
    """
    if isinstance(exc, APIError):
        return exc

    if isinstance(exc, RequestValidationError):
        error = APIError(
            status_code=422,
            message="Request validation failed",
            errors=jsonable_encoder(exc.errors()),
        )
    elif isinstance(exc, StarletteHTTPException):
        detail = exc.detail
        message = detail if isinstance(detail, str) else "HTTP error"
        errors = [] if isinstance(detail, str) or detail is None else [detail]
        error = APIError(status_code=exc.status_code, message=message, errors=errors)
    else:
        error = APIError(
            status_code=500,
            message=str(exc) or type(exc).__name__,
            context={"exception_type": type(exc).__name__},
            is_operational=False,
        )

    error.__cause__ = exc
    return error


def format_stack(error: BaseException) -> str:
    """Formatted traceback, including chained causes."""
    return "".join(traceback.format_exception(type(error), error, error.__traceback__))


def build_error_body(
    error: APIError,
    development: bool,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Build the error envelope for a normalized error.

    Args:
        error:       Result of normalize_error()
        development: True when ENVIRONMENT=development
        request_id:  Correlation ID added to the body when known

    Returns:
        JSON-serializable dict; its "statusCode" is the HTTP status to send.
    """
    if development:
        body: Dict[str, Any] = {
            "statusCode": error.status_code,
            "message": error.message,
            "data": None,
            "success": error.success,
            "errors": jsonable_encoder(error.errors),
            "isOperationalError": error.is_operational,
            "stack": format_stack(error),
            "meta": jsonable_encoder(error.context),
        }
    elif error.is_operational:
        body = {
            "statusCode": error.status_code,
            "message": error.message,
            "data": None,
            "success": error.success,
            "errors": jsonable_encoder(error.errors),
        }
    else:
        body = {
            "statusCode": 500,
            "message": GENERIC_ERROR_MESSAGE,
            "data": None,
            "success": False,
            "errors": [],
        }

    if request_id:
        body["requestId"] = request_id
    return body
