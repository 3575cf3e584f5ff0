"""
Basecamp Backend — Document Database Connection
=================================================

What:  MongoDB client lifecycle and the FastAPI dependency that hands out the
       database handle.
How:   pymongo's native asyncio client (AsyncMongoClient). The client is
       created once, verified with a `ping` (retried with exponential backoff
       via tenacity), and shared by every request.
When:  connect_database() runs in the lifespan handler BEFORE the server
       accepts traffic; close_database() runs on shutdown.

Failure policy:
    If the server cannot be reached after DB_CONNECT_ATTEMPTS pings,
    DatabaseConnectionError is raised and application startup aborts.

Example usage in a route:
    @router.get("/items")
    async def list_items(db: AsyncDatabase = Depends(get_database)):
        return await db["items"].find().to_list(50)
"""

import logging
import re
from typing import Optional

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from basecamp.config import settings
from basecamp.exceptions import DatabaseConnectionError, DatabaseError

logger = logging.getLogger(__name__)

_CREDENTIALS_RE = re.compile(r"(?<=://)[^@/]+@")


class _DatabaseState:
    """Holds the process-wide client and database handle."""

    def __init__(self) -> None:
        self.client: Optional[AsyncMongoClient] = None
        self.db: Optional[AsyncDatabase] = None


_state = _DatabaseState()


def redact_uri(uri: str) -> str:
    """Replace `user:password@` in a connection string with `***@`."""
    return _CREDENTIALS_RE.sub("***@", uri)


async def connect_database() -> AsyncDatabase:
    """
    Connect to MongoDB and select the configured database.

    Returns:
        The database handle (also stored for get_database()).

    Raises:
        DatabaseConnectionError: malformed URI, or server unreachable after
            all attempts.
    """
    if _state.db is not None:
        return _state.db

    uri = settings.mongodb_uri
    client: Optional[AsyncMongoClient] = None

    try:
        # A malformed URI fails here, before any network I/O
        client = AsyncMongoClient(
            uri,
            serverSelectionTimeoutMS=settings.db_connect_timeout_ms,
            appname="basecamp",
        )
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(PyMongoError),
            stop=stop_after_attempt(settings.db_connect_attempts),
            wait=wait_exponential(
                multiplier=settings.db_retry_min_wait,
                max=settings.db_retry_max_wait,
            ),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                await client.admin.command("ping")
    except (PyMongoError, ValueError) as e:
        logger.error(
            "MongoDB connection to %s failed: %s",
            redact_uri(uri),
            str(e),
        )
        if client is not None:
            await client.close()
        raise DatabaseConnectionError(
            message="Could not connect to the database",
            context={"uri": redact_uri(uri), "error": str(e)},
        ) from e

    _state.client = client
    _state.db = client[settings.db_name]
    logger.info(
        "MongoDB connected: %s (database=%s)",
        redact_uri(uri),
        settings.db_name,
    )
    return _state.db


def get_database() -> AsyncDatabase:
    """
    FastAPI dependency returning the shared database handle.

    Raises:
        DatabaseError if connect_database() has not completed.
    """
    if _state.db is None:
        raise DatabaseError(message="Database is not connected")
    return _state.db


async def ping_database() -> bool:
    """Lightweight liveness probe used by the health route."""
    if _state.client is None:
        return False
    try:
        await _state.client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.warning("Database ping failed: %s", str(e))
        return False


async def close_database() -> None:
    """Close the client and forget the handle. Safe to call twice."""
    client = _state.client
    _state.client = None
    _state.db = None
    if client is not None:
        await client.close()
        logger.info("MongoDB connection closed")
