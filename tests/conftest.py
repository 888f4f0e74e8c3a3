"""
Shared fixtures.

Importing edvideo.main builds a module-level app from the environment,
so mock storage mode is switched on before any test module imports it.
"""

import os

os.environ.setdefault("STORAGE_MOCK_MODE", "true")

import pytest

from edvideo.config.settings import Settings
from edvideo.infrastructure.storage.client import MockObjectStore, StorageError


class FailingObjectStore:
    """Store whose every call fails, as if S3 were unreachable."""

    def __init__(self) -> None:
        self.put_calls = 0

    async def list_objects(self, prefix):
        raise StorageError("List failed: connection timed out")

    async def put_object(self, key, data, content_type, acl):
        self.put_calls += 1
        raise StorageError("Upload failed: access denied")


@pytest.fixture
def settings() -> Settings:
    """Settings for tests, independent of any .env file."""
    return Settings(
        _env_file=None,
        s3_bucket="edu-videos",
        aws_region="eu-west-1",
        storage_mock_mode=True,
    )


@pytest.fixture
def mock_store() -> MockObjectStore:
    return MockObjectStore()


@pytest.fixture
def failing_store() -> FailingObjectStore:
    return FailingObjectStore()
