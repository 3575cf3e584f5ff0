"""
Basecamp Backend — File Service Unit Tests
============================================

What:  Tests for FileService size validation, temp storage and cleanup.
How:   Each test gets its own temporary directory.

Test Strategy:
    ✅ Size limits (declared and actual, boundary at MAX_UPLOAD_SIZE)
    ✅ Empty files rejected
    ✅ Stored name is a UUID plus a sanitized extension
    ✅ cleanup_file removes files and tolerates missing ones
"""

import uuid
from pathlib import Path
from unittest.mock import patch

import pytest

from basecamp.config import settings
from basecamp.exceptions import APIError, BadRequestError, PayloadTooLargeError
from basecamp.services.file_service import FileService


class TestFileValidation:
    """Tests for size validation logic in FileService."""

    @pytest.fixture(autouse=True)
    def _service(self, temp_dir):
        self.service = FileService(temp_dir=temp_dir)

    def test_validate_size_within_limit(self):
        self.service.validate_size(None, 1000)

    def test_validate_size_at_limit(self):
        self.service.validate_size(settings.max_upload_size, settings.max_upload_size)

    def test_validate_size_over_limit(self):
        with pytest.raises(PayloadTooLargeError, match="exceeds the maximum"):
            self.service.validate_size(None, settings.max_upload_size + 1)

    def test_validate_declared_size_over_limit(self):
        """Content-Length alone is enough to reject."""
        with pytest.raises(PayloadTooLargeError):
            self.service.validate_size(settings.max_upload_size + 1, 10)

    def test_validate_size_empty_file(self):
        with pytest.raises(BadRequestError, match="empty"):
            self.service.validate_size(0, 0)

    @pytest.mark.parametrize("filename, expected", [
        ("photo.JPG", ".jpg"),
        ("archive.tar.gz", ".gz"),
        ("noextension", ""),
        (None, ""),
        ("../../etc/passwd", ""),
        ("weird.ext with spaces", ""),
    ])
    def test_safe_extension(self, filename, expected):
        assert FileService.safe_extension(filename) == expected


class TestFileStorage:

    @pytest.mark.asyncio
    async def test_save_upload_writes_file(self, temp_dir, sample_bytes):
        service = FileService(temp_dir=temp_dir)

        path = await service.save_upload("photo.JPG", sample_bytes, len(sample_bytes))

        stored = Path(path)
        assert stored.parent == Path(temp_dir).resolve()
        assert stored.suffix == ".jpg"
        uuid.UUID(stored.stem)  # raises if the name is not a UUID
        assert stored.read_bytes() == sample_bytes

    @pytest.mark.asyncio
    async def test_save_upload_creates_missing_directory(self, tmp_path, sample_bytes):
        service = FileService(temp_dir=str(tmp_path / "public" / "temp"))

        path = await service.save_upload("a.png", sample_bytes)

        assert Path(path).exists()

    @pytest.mark.asyncio
    async def test_save_upload_rejects_empty(self, temp_dir):
        service = FileService(temp_dir=temp_dir)

        with pytest.raises(BadRequestError):
            await service.save_upload("a.png", b"")

        assert list(Path(temp_dir).iterdir()) == []

    @pytest.mark.asyncio
    async def test_save_upload_os_error_is_non_operational(self, temp_dir, sample_bytes):
        service = FileService(temp_dir=temp_dir)

        with patch("aiofiles.open", side_effect=OSError("disk full")):
            with pytest.raises(APIError) as info:
                await service.save_upload("a.png", sample_bytes)

        assert info.value.status_code == 500
        assert info.value.is_operational is False
        assert list(Path(temp_dir).iterdir()) == []

    # ── Cleanup ───────────────────────────────────────────────────────────

    @pytest.mark.asyncio
    async def test_cleanup_file_removes_file(self, tmp_path):
        test_file = tmp_path / "test.jpg"
        test_file.write_bytes(b"test content")

        assert await FileService(str(tmp_path)).cleanup_file(str(test_file)) is True
        assert not test_file.exists()

    @pytest.mark.asyncio
    async def test_cleanup_file_nonexistent(self, tmp_path):
        service = FileService(str(tmp_path))
        assert await service.cleanup_file(str(tmp_path / "nonexistent.jpg")) is True

    @pytest.mark.asyncio
    async def test_cleanup_file_reports_os_error(self, tmp_path):
        test_file = tmp_path / "locked.jpg"
        test_file.write_bytes(b"x")

        with patch("basecamp.services.file_service.os.remove", side_effect=PermissionError("denied")):
            assert await FileService(str(tmp_path)).cleanup_file(str(test_file)) is False
