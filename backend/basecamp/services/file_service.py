"""
Basecamp Backend — Temporary File Storage
===========================================

What:  Writes uploaded files to a local temp directory and removes them again.
How:   Size checks first, then an async write (aiofiles) under a UUID name.
Who:   The media route saves here; MediaService deletes after uploading.
When:  Between receiving a multipart upload and handing it to the media host.

Lifecycle of an uploaded file:
    1. Client sends multipart upload → FileService.save_upload()
    2. Size check (declared Content-Length, then actual bytes)
    3. Written to <UPLOAD_TEMP_DIR>/<uuid><ext>
    4. MediaService.upload() sends it to the media host
    5. cleanup_file() removes it, whether the upload worked or not

Filenames never contain client input except the lower-cased extension,
so path traversal through the upload name is not possible.
"""

import logging
import os
import re
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from basecamp.config import settings
from basecamp.exceptions import APIError, BadRequestError, PayloadTooLargeError

logger = logging.getLogger(__name__)

# Extensions are kept only if they look like extensions (".jpg", ".tar", ".mp4")
_EXTENSION_RE = re.compile(r"^\.[a-z0-9]{1,10}$")


class FileService:
    """
    Manages the temp directory for uploads.

    Directory Structure:
        public/temp/
        ├── 3f2b1c7e-....jpg
        └── 9a0d44e1-....pdf
    """

    def __init__(self, temp_dir: Optional[str] = None):
        """
        Args:
            temp_dir: Override the default temp path (used in tests).
                      If None, uses settings.upload_temp_dir.
        """
        self.temp_dir = Path(temp_dir or settings.upload_temp_dir).resolve()

    def ensure_temp_dir(self) -> Path:
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        return self.temp_dir

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Validate upload size against MAX_UPLOAD_SIZE.

        Args:
            content_length: Size reported by the client (may be None or wrong)
            actual_size:    Actual byte count

        Raises:
            BadRequestError for empty files,
            PayloadTooLargeError when either size exceeds the limit.
        """
        limit = settings.max_upload_size

        if content_length and content_length > limit:
            raise PayloadTooLargeError(limit=limit, received=content_length)

        if actual_size > limit:
            raise PayloadTooLargeError(limit=limit, received=actual_size)

        if actual_size == 0:
            raise BadRequestError(message="Uploaded file is empty", field="file")

    @staticmethod
    def safe_extension(filename: Optional[str]) -> str:
        ext = Path(filename or "").suffix.lower()
        return ext if _EXTENSION_RE.match(ext) else ""

    def _generate_temp_path(self, filename: Optional[str]) -> Path:
        return self.temp_dir / f"{uuid.uuid4()}{self.safe_extension(filename)}"

    async def save_upload(
        self,
        filename: Optional[str],
        content: bytes,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Validate and write an uploaded file to the temp directory.

        Returns:
            Absolute path of the temp file.

        Raises:
            BadRequestError / PayloadTooLargeError on invalid input,
            APIError(500, non-operational) if the write fails.
        """
        self.validate_size(content_length, len(content))

        path = self._generate_temp_path(filename)
        try:
            self.ensure_temp_dir()
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to write temp file %s: %s", path, str(e))
            # Partial writes are not left behind
            await self.cleanup_file(str(path))
            raise APIError(
                status_code=500,
                message="Failed to store uploaded file",
                context={"path": str(path), "os_error": str(e)},
                is_operational=False,
            ) from e

        logger.info("Temp file stored: %s (%d bytes)", path.name, len(content))
        return str(path)

    async def cleanup_file(self, file_path: str) -> bool:
        """
        Remove a temp file if it still exists.

        Returns:
            True when the file is gone afterwards (removed now or already absent).
            OS errors are logged and reported as False, never raised.
        """
        path = Path(file_path)
        try:
            if path.exists():
                os.remove(path)
                logger.debug("Removed temp file: %s", path.name)
            return True
        except OSError as e:
            logger.warning("Failed to remove temp file %s: %s", file_path, str(e))
            return False


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
