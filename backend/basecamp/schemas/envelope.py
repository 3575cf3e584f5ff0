"""
Basecamp Backend — Response Envelope Schemas
==============================================

What:  Pydantic models defining the JSON shape of every API response.
How:   Fields are snake_case in Python and camelCase on the wire
       (alias generator), so `status_code` serializes as `statusCode`.
Who:   Route handlers return APIResponse[...]; the error responder builds
       bodies matching ErrorResponse.

Envelope:
    {
        "statusCode": 200,
        "message": "OK",
        "data": {...},
        "success": true          ← always statusCode < 400
    }
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ══════════════════════════════════════════════════════════════════════════
# Envelopes
# ══════════════════════════════════════════════════════════════════════════


class APIResponse(CamelModel, Generic[DataT]):
    """
    Uniform success envelope.

    `success` is derived, never set: a 3xx envelope is still a success,
    anything from 400 up is not.
    """

    status_code: int = Field(default=200, ge=100, le=599, description="HTTP status code")
    message: str = Field(default="Success", description="Human-readable message")
    data: Optional[DataT] = Field(default=None, description="Response payload")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success(self) -> bool:
        return self.status_code < 400

    def to_response(self, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
        """Render as a JSONResponse whose HTTP status matches statusCode."""
        return JSONResponse(
            status_code=self.status_code,
            content=self.model_dump(by_alias=True, mode="json"),
            headers=headers,
        )


class ErrorResponse(CamelModel):
    """
    Error envelope returned by the centralized error responder.

    `stack` and `meta` are present only when ENVIRONMENT=development.
    """

    status_code: int = Field(description="HTTP status code")
    message: str = Field(description="Human-readable error description")
    data: None = Field(default=None, description="Always null for errors")
    success: bool = Field(description="statusCode < 400")
    errors: List[Any] = Field(default_factory=list, description="Detail entries")
    is_operational_error: Optional[bool] = Field(
        default=None,
        alias="isOperationalError",
        description="Whether the error was raised deliberately (development only)",
    )
    stack: Optional[str] = Field(default=None, description="Traceback (development only)")
    meta: Optional[Dict[str, Any]] = Field(default=None, description="Metadata (development only)")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


# ══════════════════════════════════════════════════════════════════════════
# Payloads
# ══════════════════════════════════════════════════════════════════════════


class HealthData(CamelModel):
    """Payload of GET /health."""

    status: str = Field(description="ok | degraded")
    uptime: float = Field(description="Seconds since the process started")
    timestamp: datetime = Field(description="Current server time (UTC)")
    database: str = Field(description="connected | disconnected")
    environment: str = Field(description="Value of ENVIRONMENT")
    version: str = Field(description="Application version")


class MediaData(CamelModel):
    """Subset of the media host's upload result exposed to clients."""

    url: str = Field(description="HTTPS URL of the stored asset")
    public_id: str = Field(description="Media host identifier, used for deletion")
    resource_type: str = Field(default="image", description="image | video | raw")
    format: Optional[str] = None
    bytes: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    original_filename: Optional[str] = None

    @classmethod
    def from_upload_result(cls, result: Dict[str, Any], original_filename: Optional[str] = None) -> "MediaData":
        return cls(
            url=result.get("secure_url") or result["url"],
            public_id=result["public_id"],
            resource_type=result.get("resource_type", "image"),
            format=result.get("format"),
            bytes=result.get("bytes"),
            width=result.get("width"),
            height=result.get("height"),
            original_filename=original_filename or result.get("original_filename"),
        )


class DeletedMediaData(CamelModel):
    public_id: str
    resource_type: str
