"""
Basecamp Backend — Media Host Service (Cloudinary)
====================================================

What:  Uploads local files to Cloudinary and deletes hosted assets.
How:   The Cloudinary SDK is synchronous; calls run in the default executor
       so the event loop is not blocked.
Who:   Called by the media route after FileService has written a temp file.

Upload-then-cleanup:
    upload(local_path)
        ├── success → SDK result dict returned
        └── failure → MediaUploadError raised (cause chained)
        in both cases the local temp file is removed first

    There is no retry: a failed upload is reported to the client, who may
    simply send the file again.
"""

import asyncio
import functools
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import cloudinary
import cloudinary.uploader

from basecamp.config import settings
from basecamp.exceptions import MediaConfigurationError, MediaUploadError, NotFoundError
from basecamp.services.file_service import FileService, file_service as default_file_service

logger = logging.getLogger(__name__)


class MediaService:
    """
    Thin wrapper around cloudinary.uploader.

    Credentials default to the CLOUDINARY_* settings; tests pass them
    explicitly. The SDK is configured on first use, so the application
    can start (and answer health checks) without credentials.
    """

    def __init__(
        self,
        cloud_name: Optional[str] = None,
        api_key: Optional[str] = None,
        api_secret: Optional[str] = None,
        folder: Optional[str] = None,
        files: Optional[FileService] = None,
    ):
        self.cloud_name = cloud_name if cloud_name is not None else settings.cloudinary_cloud_name
        self.api_key = api_key if api_key is not None else settings.cloudinary_api_key
        self.api_secret = api_secret if api_secret is not None else settings.cloudinary_api_secret
        self.folder = folder if folder is not None else settings.cloudinary_folder
        self.files = files or default_file_service
        self._configured = False

    def configure(self) -> None:
        """
        Push credentials into the SDK's global config.

        Raises:
            MediaConfigurationError if any credential is missing.
        """
        if self._configured:
            return
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise MediaConfigurationError(
                context={
                    "cloud_name_set": bool(self.cloud_name),
                    "api_key_set": bool(self.api_key),
                    "api_secret_set": bool(self.api_secret),
                },
            )
        cloudinary.config(
            cloud_name=self.cloud_name,
            api_key=self.api_key,
            api_secret=self.api_secret,
            secure=True,
        )
        self._configured = True
        logger.info("Cloudinary configured for cloud '%s'", self.cloud_name)

    async def _run(self, func, *args, **kwargs) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    async def upload(self, local_path: Optional[str]) -> Optional[Dict[str, Any]]:
        """
        Upload a local file and remove it afterwards.

        Args:
            local_path: Path of the temp file. Empty/None → nothing to do.

        Returns:
            The media host's upload result (secure_url, public_id, ...),
            or None when no path was given.

        Raises:
            MediaConfigurationError: credentials missing
            MediaUploadError:        the media host call failed
        """
        if not local_path:
            return None

        try:
            self.configure()
            options: Dict[str, Any] = {"resource_type": "auto"}
            if self.folder:
                options["folder"] = self.folder
            result = await self._run(cloudinary.uploader.upload, local_path, **options)
        except MediaConfigurationError:
            raise
        except Exception as e:
            logger.error(
                "Media upload failed for %s: %s",
                Path(local_path).name,
                str(e),
            )
            raise MediaUploadError(
                context={"file": Path(local_path).name, "error": str(e)},
            ) from e
        finally:
            await self.files.cleanup_file(local_path)

        logger.info(
            "Uploaded %s → %s (%s bytes)",
            Path(local_path).name,
            result.get("public_id"),
            result.get("bytes"),
        )
        return result

    async def delete(self, public_id: str, resource_type: str = "image") -> bool:
        """
        Delete a hosted asset.

        Returns:
            True when the media host confirmed the deletion.

        Raises:
            NotFoundError:    the media host does not know the asset
            MediaUploadError: the media host call failed
        """
        self.configure()
        try:
            result = await self._run(
                cloudinary.uploader.destroy,
                public_id,
                resource_type=resource_type,
                invalidate=True,
            )
        except Exception as e:
            logger.error("Media delete failed for %s: %s", public_id, str(e))
            raise MediaUploadError(
                message="Failed to delete file from the media host",
                context={"public_id": public_id, "error": str(e)},
            ) from e

        outcome = (result or {}).get("result")
        if outcome == "not found":
            raise NotFoundError("media", public_id)
        if outcome != "ok":
            raise MediaUploadError(
                message="Media host did not confirm the deletion",
                context={"public_id": public_id, "result": outcome},
            )

        logger.info("Deleted media %s (%s)", public_id, resource_type)
        return True


# ── Singleton Instance ────────────────────────────────────────────────────
media_service = MediaService()
