"""
Video catalog service.

Reads the list of stored videos and writes new uploads. Each operation is
one round trip to the object store; there is no caching, retrying or
cross-request state. Store failures propagate to the caller untouched.
"""

import time
from datetime import datetime
from typing import Callable, Protocol

from .models import VIDEO_PREFIX, UploadedFile, VideoRecord, build_public_url, build_video_key


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class ListedObject(Protocol):
    key: str
    size: int
    last_modified: datetime


class VideoStore(Protocol):
    """
    Interface for the object store backing the catalog.

    The catalog doesn't know whether this is S3, an S3-compatible
    service or an in-memory mock.
    """

    async def list_objects(self, prefix: str) -> list[ListedObject]:
        ...

    async def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str,
        acl: str,
    ) -> None:
        ...


def current_time_ms() -> int:
    """Milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000


class VideoCatalog:
    """Lists and stores videos under a single key prefix."""

    def __init__(
        self,
        store: VideoStore,
        bucket: str,
        region: str,
        prefix: str = VIDEO_PREFIX,
        acl: str = "public-read",
        clock: Callable[[], int] = current_time_ms,
    ) -> None:
        self._store = store
        self._bucket = bucket
        self._region = region
        self._prefix = prefix
        self._acl = acl
        self._clock = clock

    async def list_videos(self) -> list[VideoRecord]:
        """One record per object under the prefix, in store order."""
        objects = await self._store.list_objects(self._prefix)
        return [
            VideoRecord(
                key=obj.key,
                url=build_public_url(self._bucket, self._region, obj.key),
                size=obj.size,
                last_modified=obj.last_modified,
            )
            for obj in objects
        ]

    async def store_upload(self, upload: UploadedFile) -> str:
        """Write the upload to the store and return its key."""
        key = build_video_key(upload.original_name, self._clock(), self._prefix)
        await self._store.put_object(
            key=key,
            data=upload.data,
            content_type=upload.mime_type,
            acl=self._acl,
        )
        return key
