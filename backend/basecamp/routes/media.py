"""
Basecamp Backend — Media Routes
=================================

What:  Upload files to the media host and delete hosted assets.

Request Flow (POST /api/v1/media):
    1. Client sends multipart/form-data with a 'file' field
    2. FileService writes it to the temp directory
    3. MediaService uploads it to Cloudinary and removes the temp file
    4. 201 Created with the hosted URL and public ID

Error responses (centralized error responder):
    400  empty file
    413  file larger than MAX_UPLOAD_SIZE
    422  missing 'file' field
    502  media host rejected the upload
"""

import logging

from fastapi import APIRouter, File, Query, UploadFile
from fastapi.responses import JSONResponse

from basecamp.schemas.envelope import APIResponse, DeletedMediaData, ErrorResponse, MediaData
from basecamp.services.file_service import file_service
from basecamp.services.media_service import media_service
from basecamp.utils.async_handler import async_handler

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["Media"])


@router.post(
    "",
    status_code=201,
    response_model=APIResponse[MediaData],
    responses={
        400: {"description": "Empty file", "model": ErrorResponse},
        413: {"description": "File too large", "model": ErrorResponse},
        502: {"description": "Media host failure", "model": ErrorResponse},
    },
    summary="Upload a file to the media host",
)
@async_handler
async def upload_media(
    file: UploadFile = File(..., description="File to upload"),
) -> JSONResponse:
    try:
        content = await file.read()
    finally:
        await file.close()

    logger.info(
        "Received upload: filename=%s, size=%d bytes",
        file.filename or "unknown",
        len(content),
    )

    local_path = await file_service.save_upload(
        filename=file.filename,
        content=content,
        content_length=file.size,
    )
    result = await media_service.upload(local_path)

    envelope = APIResponse[MediaData](
        status_code=201,
        message="File uploaded successfully",
        data=MediaData.from_upload_result(result, original_filename=file.filename),
    )
    return envelope.to_response()


@router.delete(
    "/{public_id:path}",
    response_model=APIResponse[DeletedMediaData],
    responses={
        404: {"description": "Unknown asset", "model": ErrorResponse},
        502: {"description": "Media host failure", "model": ErrorResponse},
    },
    summary="Delete a hosted file",
)
@async_handler
async def delete_media(
    public_id: str,
    resource_type: str = Query(default="image", pattern="^(image|video|raw)$"),
) -> JSONResponse:
    await media_service.delete(public_id, resource_type=resource_type)
    envelope = APIResponse[DeletedMediaData](
        status_code=200,
        message="File deleted successfully",
        data=DeletedMediaData(public_id=public_id, resource_type=resource_type),
    )
    return envelope.to_response()
