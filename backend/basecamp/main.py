"""
Basecamp Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() attaches middleware, the centralized error responder and
       the routers; lifespan() connects the database before traffic arrives.
Who:   uvicorn (`uvicorn basecamp.main:app`) or the `basecamp` console script.

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware Chain (outermost first):                     │
    │  CORS → Request ID → Logging → Security Headers          │
    │       → Body Size Limit → GZip                           │
    │                                                          │
    │  Routes (/api/v1):                                       │
    │  GET /health   POST /media   DELETE /media/{public_id}   │
    │                                                          │
    │  Error responder:                                        │
    │  APIError | HTTPException | RequestValidationError       │
    │  | Exception  →  normalize_error → build_error_body      │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Configure logging
    2. Validate media host credentials (logged, not fatal)
    3. Create the upload temp directory
    4. Connect to MongoDB (fatal on failure: the server never listens)

    Shutdown:
    1. Close the MongoDB client
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from basecamp import __version__
from basecamp.config import settings
from basecamp.database import close_database, connect_database
from basecamp.exceptions import APIError
from basecamp.logging_config import setup_logging
from basecamp.middleware.body_limit import BodySizeLimitMiddleware
from basecamp.middleware.logging import RequestLoggingMiddleware
from basecamp.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware, request_id_var
from basecamp.middleware.security_headers import SecurityHeadersMiddleware
from basecamp.routes import health, media
from basecamp.services.file_service import file_service
from basecamp.utils.errors import build_error_body, normalize_error

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"

# Responses with these statuses must not have a body
BODILESS_STATUSES = frozenset({204, 205, 304})


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Basecamp Backend starting up (environment=%s)...", settings.environment)

    try:
        settings.validate_required()
    except ValueError as e:
        # Media routes answer 500 until this is fixed; everything else works
        logger.warning("%s", str(e))

    temp_dir = file_service.ensure_temp_dir()
    logger.info("Upload temp directory: %s", temp_dir)

    await connect_database()

    logger.info("Server ready at http://%s:%d", settings.host, settings.port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Basecamp Backend shutting down...")
    await close_database()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Centralized Error Responder
# ══════════════════════════════════════════════════════════════════════════

def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "") or request_id_var.get("")


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """
    Single responder for every failure raised while handling a request.

    Verbosity follows ENVIRONMENT: see basecamp.utils.errors.
    """
    error = normalize_error(exc)
    if error.status_code < 200 or error.status_code in BODILESS_STATUSES:
        error = APIError(
            status_code=500,
            message=f"Error raised with bodiless status {error.status_code}",
            context={"original_status": error.status_code},
            is_operational=False,
        )
        error.__cause__ = exc
    rid = _request_id(request)

    if error.status_code >= 500:
        logger.error(
            "[%s] %s %s failed: %s",
            rid,
            request.method,
            request.url.path,
            error.message,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
    else:
        logger.warning(
            "[%s] %s %s → %d: %s",
            rid,
            request.method,
            request.url.path,
            error.status_code,
            error.message,
        )

    body = build_error_body(error, development=settings.is_development, request_id=rid or None)
    headers = {REQUEST_ID_HEADER: rid} if rid else None
    return JSONResponse(status_code=body["statusCode"], content=body, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Route every failure kind through handle_error().

    APIError, HTTPException and RequestValidationError are handled inside
    the middleware stack; the bare Exception handler runs in Starlette's
    outermost server-error layer.
    """
    app.add_exception_handler(APIError, handle_error)
    app.add_exception_handler(StarletteHTTPException, handle_error)
    app.add_exception_handler(RequestValidationError, handle_error)
    app.add_exception_handler(Exception, handle_error)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Basecamp API",
        description="Backend service scaffold: MongoDB, Cloudinary uploads, uniform JSON envelopes.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute.
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(BodySizeLimitMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    # Outermost, so rejections from inner middleware still carry CORS headers
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(health.router, prefix=API_PREFIX)
    app.include_router(health.router, include_in_schema=False)
    app.include_router(media.router, prefix=API_PREFIX)

    return app


# uvicorn expects `basecamp.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: `basecamp`."""
    setup_logging()
    uvicorn.run(
        "basecamp.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
