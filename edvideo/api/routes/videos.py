"""
Video listing and upload endpoints.

Both handlers make exactly one call to the object store. Failures are
logged here with the underlying error and turned into terse plain-text
500s; nothing is retried and no partial listing is shown.
"""

import logging

from fastapi import APIRouter, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

from ...infrastructure.storage.client import StorageError
from ..dependencies import UploadedFileDep, VideoCatalogDep
from ..templating import templates

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/videos",
    response_class=HTMLResponse,
    summary="List uploaded videos",
    responses={500: {"description": "Object store query failed"}},
)
async def list_videos(request: Request, catalog: VideoCatalogDep) -> Response:
    """Render every video stored under the catalog prefix."""
    try:
        videos = await catalog.list_videos()
    except StorageError as e:
        logger.error("Error fetching videos", extra={"error": str(e)})
        return PlainTextResponse(
            "Error fetching videos",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.debug("Listed videos", extra={"count": len(videos)})

    return templates.TemplateResponse(request, "videos.html", {"videos": videos})


@router.post(
    "/upload",
    status_code=status.HTTP_302_FOUND,
    summary="Upload a video",
    responses={
        400: {"description": "No file uploaded"},
        413: {"description": "File too large"},
        500: {"description": "Object store write failed"},
    },
)
async def upload_video(upload: UploadedFileDep, catalog: VideoCatalogDep) -> Response:
    """
    Store one uploaded file and redirect to the listing.

    Non-idempotent: every successful call creates a new object.
    """
    if upload is None:
        return PlainTextResponse(
            "No file uploaded",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    try:
        key = await catalog.store_upload(upload)
    except StorageError as e:
        logger.error(
            "Upload error",
            extra={"upload_filename": upload.original_name, "error": str(e)}
        )
        return PlainTextResponse(
            "Upload failed",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(
        "Video uploaded",
        extra={"key": key, "size_bytes": upload.size, "content_type": upload.mime_type}
    )

    return RedirectResponse(url="/videos", status_code=status.HTTP_302_FOUND)
