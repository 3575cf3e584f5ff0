"""
Basecamp Backend — Test Configuration (conftest.py)
=====================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment is overridden BEFORE any basecamp import, so the settings
       singleton never points at a real database or media account.

Fixtures:
    ├── temp_dir:         fresh upload temp directory per test
    ├── sample_bytes:     small fake file content
    ├── mock_mongo_client: AsyncMongoClient stand-in with an awaitable ping
    └── test_client:      HTTPX AsyncClient bound to the ASGI app (no lifespan)
"""

import os
import tempfile
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

os.environ["ENVIRONMENT"] = "test"
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["DB_NAME"] = "basecamp_test"
os.environ["DB_CONNECT_ATTEMPTS"] = "2"
os.environ["DB_RETRY_MIN_WAIT"] = "0"
os.environ["DB_RETRY_MAX_WAIT"] = "0"
os.environ["DB_CONNECT_TIMEOUT_MS"] = "200"
os.environ["UPLOAD_TEMP_DIR"] = tempfile.mkdtemp(prefix="basecamp_test_")
os.environ["CLOUDINARY_CLOUD_NAME"] = ""
os.environ["CLOUDINARY_API_KEY"] = ""
os.environ["CLOUDINARY_API_SECRET"] = ""
os.environ["LOG_LEVEL"] = "WARNING"


@pytest.fixture
def temp_dir(tmp_path):
    directory = tmp_path / "temp"
    directory.mkdir()
    return str(directory)


@pytest.fixture
def sample_bytes():
    # Minimal JPEG: SOI + JFIF header + EOI
    return (
        b'\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01\x01\x00\x00\x01\x00\x01\x00\x00'
        b'\xff\xd9'
    )


@pytest.fixture
def mock_mongo_client():
    """
    A MagicMock shaped like AsyncMongoClient.

    client.admin.command is awaitable; client["name"] returns a database mock.
    """
    client = MagicMock()
    client.admin.command = AsyncMock(return_value={"ok": 1.0})
    client.close = AsyncMock()
    database = MagicMock(name="database")
    client.__getitem__.return_value = database
    return client


@pytest_asyncio.fixture
async def test_client():
    """
    HTTPX AsyncClient talking to the app in-process.

    ASGITransport does not run lifespan events, so no database connection is
    attempted. raise_app_exceptions=False lets tests inspect the 500 response
    Starlette sends for unhandled exceptions.
    """
    from basecamp.main import app
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
