"""
Basecamp Backend — Request Body Size Limit Middleware
=======================================================

What:  Rejects requests whose declared body size exceeds the configured limit.
How:   Compares the Content-Length header against:
           multipart/form-data → MAX_UPLOAD_SIZE
           everything else     → MAX_JSON_BODY_SIZE
       and answers 413 with the standard error envelope before the body is read.

Requests without Content-Length (chunked) pass through; FileService checks
the actual size of uploads again after reading.
"""

import logging
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp

from basecamp.config import settings
from basecamp.exceptions import BadRequestError, PayloadTooLargeError
from basecamp.middleware.request_id import request_id_var
from basecamp.utils.errors import build_error_body

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):

    def __init__(
        self,
        app: ASGIApp,
        max_json_body_size: Optional[int] = None,
        max_upload_size: Optional[int] = None,
    ):
        super().__init__(app)
        self.max_json_body_size = max_json_body_size or settings.max_json_body_size
        self.max_upload_size = max_upload_size or settings.max_upload_size

    def limit_for(self, content_type: str) -> int:
        if content_type.lower().startswith("multipart/form-data"):
            return self.max_upload_size
        return self.max_json_body_size

    def _reject(self, error) -> JSONResponse:
        body = build_error_body(
            error,
            development=settings.is_development,
            request_id=request_id_var.get("") or None,
        )
        return JSONResponse(status_code=body["statusCode"], content=body)

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        declared = request.headers.get("content-length")
        if declared is None:
            return await call_next(request)

        try:
            size = int(declared)
        except ValueError:
            return self._reject(BadRequestError(message="Invalid Content-Length header"))

        limit = self.limit_for(request.headers.get("content-type", ""))
        if size > limit:
            logger.warning(
                "Rejected %s %s: body of %d bytes exceeds limit of %d",
                request.method,
                request.url.path,
                size,
                limit,
            )
            return self._reject(PayloadTooLargeError(limit=limit, received=size))

        return await call_next(request)
