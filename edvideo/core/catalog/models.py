"""
Domain models for the video catalog.

These models have no dependencies on FastAPI, boto3 or Jinja2. The object
store is the system of record; everything here is rebuilt per request and
thrown away once the response is sent.
"""

from dataclasses import dataclass
from datetime import datetime

VIDEO_PREFIX = "videos/"


@dataclass(frozen=True)
class VideoRecord:
    """
    One stored video as shown on the listing page.

    Frozen because a record is a snapshot of what the store reported.
    """
    key: str
    url: str
    size: int
    last_modified: datetime

    @property
    def size_display(self) -> str:
        """Human-readable size: 2048 -> '2.0 KB'"""
        size = float(self.size)
        for unit in ("B", "KB", "MB"):
            if size < 1024:
                return f"{size:.0f} B" if unit == "B" else f"{size:.1f} {unit}"
            size /= 1024
        return f"{size:.1f} GB"


@dataclass(frozen=True)
class UploadedFile:
    """
    A file received from a multipart upload, fully buffered in memory.

    Owned by a single upload request; no reference survives the response.
    """
    original_name: str
    mime_type: str
    data: bytes

    def __post_init__(self) -> None:
        if not self.original_name:
            raise ValueError("Uploaded file must have a name")

    @property
    def size(self) -> int:
        return len(self.data)


def build_video_key(original_name: str, now_ms: int, prefix: str = VIDEO_PREFIX) -> str:
    """
    Storage key for a new upload: videos/<unix-millis>-<original-name>.

    Two uploads with the same name in the same millisecond get the same
    key and the later one wins.
    """
    return f"{prefix}{now_ms}-{original_name}"


def build_public_url(bucket: str, region: str, key: str) -> str:
    """Public URL of an object; a pure template, the store is not asked."""
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"
