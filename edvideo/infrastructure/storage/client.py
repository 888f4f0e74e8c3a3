"""
Object storage client for uploaded videos.

Talks to AWS S3 (or any S3-compatible endpoint) through boto3, with a mock
mode for local development.

boto3 is synchronous, so every call is pushed onto a worker thread with
asyncio.to_thread. From a route handler's point of view each operation is a
single awaitable that either completes or raises StorageError. Failures are
logged once, by the route handler that catches them.

Mock mode keeps objects in memory, enabling API testing without
provisioning a bucket.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when storage operations fail."""
    pass


@dataclass
class StorageConfig:
    """Configuration for S3-compatible storage."""
    bucket_name: str
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    list_all_pages: bool = False


@dataclass(frozen=True)
class ObjectMeta:
    """What a listing call tells us about one stored object."""
    key: str
    size: int
    last_modified: datetime


class ObjectStore(Protocol):
    """
    Protocol for object storage operations.

    Route handlers depend on this, so tests can hand in a spy
    and we can swap backends without touching the handlers.
    """

    async def list_objects(self, prefix: str) -> list[ObjectMeta]:
        """List objects whose key starts with prefix."""
        ...

    async def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str,
        acl: str,
    ) -> None:
        """Store data under key."""
        ...


class S3ObjectStore:
    """
    AWS S3 object storage client.

    Listing returns a single page (up to 1000 keys) unless list_all_pages
    is set, in which case the boto3 paginator follows continuation tokens.
    Nothing is retried here beyond botocore's own defaults.
    """

    def __init__(self, config: StorageConfig, s3_client=None) -> None:
        self._config = config

        if s3_client is None:
            import boto3
            from botocore.config import Config

            s3_client = boto3.client(
                's3',
                region_name=config.region,
                endpoint_url=config.endpoint_url,
                aws_access_key_id=config.access_key_id,
                aws_secret_access_key=config.secret_access_key,
                config=Config(signature_version='s3v4'),
            )

        self._s3_client = s3_client

        logger.info(
            "Initialized S3 storage client",
            extra={
                "bucket": config.bucket_name,
                "region": config.region,
                "endpoint": config.endpoint_url,
            }
        )

    async def list_objects(self, prefix: str) -> list[ObjectMeta]:
        try:
            if self._config.list_all_pages:
                contents = await asyncio.to_thread(self._list_all_pages, prefix)
            else:
                response = await asyncio.to_thread(
                    self._s3_client.list_objects_v2,
                    Bucket=self._config.bucket_name,
                    Prefix=prefix,
                )
                # Contents is absent, not empty, when nothing matches
                contents = response.get('Contents', [])
                if response.get('IsTruncated'):
                    logger.warning(
                        "Listing truncated, showing first page only",
                        extra={"prefix": prefix, "count": len(contents)}
                    )
        except Exception as e:
            raise StorageError(f"List failed: {e}")

        return [
            ObjectMeta(
                key=obj['Key'],
                size=obj['Size'],
                last_modified=obj['LastModified'],
            )
            for obj in contents
        ]

    def _list_all_pages(self, prefix: str) -> list[dict]:
        paginator = self._s3_client.get_paginator('list_objects_v2')
        contents: list[dict] = []
        for page in paginator.paginate(Bucket=self._config.bucket_name, Prefix=prefix):
            contents.extend(page.get('Contents', []))
        return contents

    async def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str,
        acl: str,
    ) -> None:
        """
        Upload a whole in-memory buffer as one object.

        A failure part way through leaves whatever the store decided to
        keep; no cleanup is attempted.
        """
        try:
            await asyncio.to_thread(
                self._s3_client.put_object,
                Bucket=self._config.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
                ACL=acl,
            )
        except Exception as e:
            raise StorageError(f"Upload failed: {e}")

        logger.info(
            "Uploaded object",
            extra={"key": key, "size_bytes": len(data), "content_type": content_type}
        )


# ---------------------------------------------------------------------------
# Mock Storage for Local Development
# ---------------------------------------------------------------------------

@dataclass
class StoredObject:
    """An object held by the mock store."""
    data: bytes
    content_type: str
    acl: str
    last_modified: datetime


class MockObjectStore:
    """
    In-memory storage for local development and tests.

    Every put is recorded in `puts` so tests can assert on exactly what
    reached the store (or that nothing did).
    """

    def __init__(self) -> None:
        self.objects: dict[str, StoredObject] = {}
        self.puts: list[tuple[str, str, str]] = []
        self.list_calls: list[str] = []
        logger.info("Initialized mock storage client (in-memory)")

    async def list_objects(self, prefix: str) -> list[ObjectMeta]:
        self.list_calls.append(prefix)
        return [
            ObjectMeta(key=key, size=len(obj.data), last_modified=obj.last_modified)
            for key, obj in sorted(self.objects.items())
            if key.startswith(prefix)
        ]

    async def put_object(
        self,
        key: str,
        data: bytes,
        content_type: str,
        acl: str,
    ) -> None:
        self.puts.append((key, content_type, acl))
        self.objects[key] = StoredObject(
            data=data,
            content_type=content_type,
            acl=acl,
            last_modified=datetime.now(timezone.utc),
        )

        logger.debug(
            "Stored object in mock storage",
            extra={"key": key, "size_bytes": len(data)}
        )


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_object_store(
    config: Optional[StorageConfig] = None,
    mock_mode: bool = False,
) -> ObjectStore:
    """
    Create storage client based on configuration.

    Args:
        config: Storage configuration (required if not mock_mode)
        mock_mode: If True, return in-memory client

    Returns:
        ObjectStore implementation (S3 or Mock)
    """
    if mock_mode:
        return MockObjectStore()

    if config is None:
        raise ValueError("config is required when not in mock mode")

    return S3ObjectStore(config)
