"""
FastAPI dependency injection.

Dependencies provide configuration, the object store and the catalog
service to route handlers. Routes never build their own clients, so tests
can swap any of them through app.dependency_overrides or create_app().

The object store is created once per application and kept on app.state;
boto3 clients are safe to share between threads and the mock store must
keep its contents between requests.
"""

import logging
from typing import Annotated, Callable, Optional

from fastapi import Depends, Request

from ..config.settings import Settings, get_settings
from ..core.catalog import UploadedFile, VideoCatalog, current_time_ms
from ..infrastructure.storage.client import ObjectStore, StorageConfig, create_object_store
from .uploads import UploadTooLargeError, read_multipart_files

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

def build_object_store(settings: Settings) -> ObjectStore:
    """Create the store described by settings (S3 or in-memory mock)."""
    if settings.storage_mock_mode:
        return create_object_store(mock_mode=True)

    config = StorageConfig(
        bucket_name=settings.s3_bucket,
        region=settings.aws_region,
        endpoint_url=settings.s3_endpoint_url,
        access_key_id=settings.aws_access_key_id,
        secret_access_key=settings.aws_secret_access_key,
        list_all_pages=settings.list_all_pages,
    )
    return create_object_store(config=config)


def get_object_store(request: Request) -> ObjectStore:
    """Provide the application's shared object store."""
    return request.app.state.object_store


def get_clock() -> Callable[[], int]:
    """Millisecond clock used to build upload keys."""
    return current_time_ms


def get_video_catalog(
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[ObjectStore, Depends(get_object_store)],
    clock: Annotated[Callable[[], int], Depends(get_clock)],
) -> VideoCatalog:
    """
    Provide a VideoCatalog bound to the configured bucket.

    The catalog is stateless, so a new instance per request is fine.
    """
    return VideoCatalog(
        store=store,
        bucket=settings.s3_bucket,
        region=settings.aws_region,
        prefix=settings.video_prefix,
        acl=settings.upload_acl,
        clock=clock,
    )


# ---------------------------------------------------------------------------
# Upload ingestion
# ---------------------------------------------------------------------------

async def read_uploaded_file(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
) -> Optional[UploadedFile]:
    """
    Buffer the single file posted under the upload field, in memory.

    Returns None when the field is missing, empty, or carries more than
    one file. Raises UploadTooLargeError before the route handler runs
    when the file is over the size limit.
    """
    size_limit = settings.max_upload_size_bytes

    try:
        files = await read_multipart_files(
            content_type=request.headers.get("content-type", ""),
            content_length=request.headers.get("content-length"),
            body=request.stream(),
            field_name=settings.upload_field_name,
            size_limit=size_limit,
        )
    except UploadTooLargeError:
        logger.warning(
            "Upload rejected, file too large",
            extra={"size_limit": size_limit}
        )
        raise

    if len(files) != 1:
        logger.debug(
            "No single file in upload",
            extra={"field": settings.upload_field_name, "count": len(files)}
        )
        return None

    upload = files[0]
    return UploadedFile(
        original_name=upload.filename,
        mime_type=upload.content_type,
        data=upload.data,
    )


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

SettingsDep = Annotated[Settings, Depends(get_settings)]
VideoCatalogDep = Annotated[VideoCatalog, Depends(get_video_catalog)]
UploadedFileDep = Annotated[Optional[UploadedFile], Depends(read_uploaded_file)]
