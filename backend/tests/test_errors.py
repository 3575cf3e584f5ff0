"""
Basecamp Backend — Error Normalization Unit Tests
===================================================

What:  Tests for the exception hierarchy, normalize_error() and build_error_body().
How:   Pure functions; no app, no network.

What we test:
    ✅ success is derived from the status code (< 400)
    ✅ development bodies carry stack and meta
    ✅ non-development bodies never carry stack
    ✅ operational errors pass through outside development
    ✅ non-operational errors become a generic 500 outside development
    ✅ framework errors (HTTPException, RequestValidationError) are normalized
"""

import json

import pytest
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from basecamp.exceptions import (
    APIError,
    BadRequestError,
    DatabaseConnectionError,
    DatabaseError,
    MediaUploadError,
    NotFoundError,
    PayloadTooLargeError,
)
from basecamp.schemas.envelope import APIResponse
from basecamp.utils.errors import GENERIC_ERROR_MESSAGE, build_error_body, normalize_error


def _raised(exc):
    """Raise and catch so the exception carries a real traceback."""
    try:
        raise exc
    except Exception as caught:
        return caught


class TestAPIError:

    def test_defaults(self):
        error = APIError()
        assert error.status_code == 500
        assert error.message == "Something went wrong"
        assert error.errors == []
        assert error.data is None
        assert error.is_operational is True
        assert error.success is False

    @pytest.mark.parametrize("status_code, expected", [(200, True), (302, True), (399, True), (400, False), (503, False)])
    def test_success_derived_from_status(self, status_code, expected):
        assert APIError(status_code=status_code, message="x").success is expected

    def test_subclass_status_codes(self):
        assert BadRequestError().status_code == 400
        assert NotFoundError("user", "42").status_code == 404
        assert PayloadTooLargeError(limit=10).status_code == 413
        assert MediaUploadError().status_code == 502
        assert DatabaseError().status_code == 500
        assert DatabaseConnectionError().status_code == 503

    def test_database_errors_are_not_operational(self):
        assert DatabaseError().is_operational is False
        assert DatabaseConnectionError().is_operational is False
        assert MediaUploadError().is_operational is True

    def test_not_found_message_includes_id(self):
        error = NotFoundError("media", "folder/abc")
        assert error.message == "media with ID 'folder/abc' was not found"
        assert error.context == {"resource": "media", "resource_id": "folder/abc"}

    def test_bad_request_records_field(self):
        error = BadRequestError("Uploaded file is empty", field="file")
        assert error.field == "file"
        assert error.context["field"] == "file"


class TestNormalizeError:

    def test_api_error_passes_through(self):
        error = NotFoundError("media")
        assert normalize_error(error) is error

    def test_http_exception_is_operational(self):
        error = normalize_error(StarletteHTTPException(status_code=405, detail="Method Not Allowed"))
        assert error.status_code == 405
        assert error.message == "Method Not Allowed"
        assert error.is_operational is True

    def test_http_exception_with_structured_detail(self):
        error = normalize_error(StarletteHTTPException(status_code=409, detail={"field": "email"}))
        assert error.status_code == 409
        assert error.errors == [{"field": "email"}]

    def test_validation_error_is_422_with_details(self):
        exc = RequestValidationError(
            [{"type": "missing", "loc": ("body", "file"), "msg": "Field required", "input": None}]
        )
        error = normalize_error(exc)
        assert error.status_code == 422
        assert error.is_operational is True
        assert error.errors[0]["loc"] == ["body", "file"]

    def test_unknown_exception_is_non_operational_500(self):
        original = _raised(KeyError("token"))
        error = normalize_error(original)
        assert error.status_code == 500
        assert error.is_operational is False
        assert error.__cause__ is original
        assert error.context["exception_type"] == "KeyError"


class TestBuildErrorBody:

    def test_development_includes_stack_and_meta(self):
        error = normalize_error(_raised(RuntimeError("disk on fire")))
        body = build_error_body(error, development=True)

        assert body["statusCode"] == 500
        assert body["message"] == "disk on fire"
        assert body["success"] is False
        assert body["data"] is None
        assert body["isOperationalError"] is False
        assert "RuntimeError: disk on fire" in body["stack"]
        assert body["meta"] == {"exception_type": "RuntimeError"}

    def test_development_includes_stack_for_operational_errors(self):
        body = build_error_body(_raised(NotFoundError("media", "a1")), development=True)
        assert body["statusCode"] == 404
        assert "stack" in body
        assert body["meta"]["resource_id"] == "a1"

    def test_production_operational_passes_through(self):
        error = BadRequestError("Name is required", errors=[{"field": "name"}])
        body = build_error_body(error, development=False)

        assert body == {
            "statusCode": 400,
            "message": "Name is required",
            "data": None,
            "success": False,
            "errors": [{"field": "name"}],
        }

    def test_production_hides_non_operational_details(self):
        error = normalize_error(_raised(RuntimeError("password=hunter2")))
        body = build_error_body(error, development=False)

        assert body["statusCode"] == 500
        assert body["message"] == GENERIC_ERROR_MESSAGE
        assert body["errors"] == []
        assert "stack" not in body
        assert "meta" not in body
        assert "hunter2" not in str(body)

    def test_production_hides_database_error_status(self):
        body = build_error_body(DatabaseConnectionError(), development=False)
        assert body["statusCode"] == 500
        assert body["message"] == GENERIC_ERROR_MESSAGE

    @pytest.mark.parametrize("development", [True, False])
    def test_success_follows_status_code(self, development):
        body = build_error_body(APIError(status_code=304, message="Not modified"), development=development)
        assert body["success"] is True

    def test_request_id_added_when_known(self):
        body = build_error_body(NotFoundError(), development=False, request_id="abc123")
        assert body["requestId"] == "abc123"

    def test_request_id_omitted_when_unknown(self):
        body = build_error_body(NotFoundError(), development=False)
        assert "requestId" not in body


class TestAPIResponse:

    @pytest.mark.parametrize("status_code, success", [(200, True), (201, True), (304, True), (400, False)])
    def test_success_follows_status(self, status_code, success):
        assert APIResponse(status_code=status_code).success is success

    def test_to_response(self):
        envelope = APIResponse[dict](status_code=201, message="Created", data={"id": "a1"})

        response = envelope.to_response(headers={"X-Request-ID": "r1"})

        assert response.status_code == 201
        assert response.headers["X-Request-ID"] == "r1"
        assert json.loads(response.body) == {
            "statusCode": 201,
            "message": "Created",
            "data": {"id": "a1"},
            "success": True,
        }
