"""
Video catalog logic.

Contains the catalog service and its domain models.
"""

from .models import (
    VIDEO_PREFIX,
    UploadedFile,
    VideoRecord,
    build_public_url,
    build_video_key,
)
from .catalog import VideoCatalog, VideoStore, current_time_ms

__all__ = [
    "VIDEO_PREFIX",
    "UploadedFile",
    "VideoRecord",
    "build_public_url",
    "build_video_key",
    "VideoCatalog",
    "VideoStore",
    "current_time_ms",
]
