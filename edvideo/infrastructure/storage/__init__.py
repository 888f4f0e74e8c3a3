"""
Object storage integration for uploaded videos.

Supports AWS S3 and S3-compatible endpoints.
Includes mock mode for local development without credentials.
"""

from .client import (
    MockObjectStore,
    ObjectMeta,
    ObjectStore,
    S3ObjectStore,
    StorageConfig,
    StorageError,
    create_object_store,
)

__all__ = [
    "MockObjectStore",
    "ObjectMeta",
    "ObjectStore",
    "S3ObjectStore",
    "StorageConfig",
    "StorageError",
    "create_object_store",
]
