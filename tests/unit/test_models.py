"""
Unit tests for the catalog domain logic.

These tests verify the core business logic without touching
external services (no HTTP, no S3, no file system).
"""

import asyncio
from datetime import datetime, timezone

import pytest

from edvideo.core.catalog import (
    UploadedFile,
    VideoCatalog,
    VideoRecord,
    build_public_url,
    build_video_key,
    current_time_ms,
)
from edvideo.infrastructure.storage.client import MockObjectStore, ObjectMeta, StoredObject


MODIFIED = datetime(2024, 3, 1, 12, 30, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Key and URL Tests
# ---------------------------------------------------------------------------

class TestBuildVideoKey:
    """Tests for storage key construction."""

    def test_key_is_prefix_millis_and_name(self):
        assert build_video_key("lecture1.mp4", 1700000000123) == "videos/1700000000123-lecture1.mp4"

    def test_custom_prefix(self):
        assert build_video_key("a.mp4", 5, prefix="uploads/") == "uploads/5-a.mp4"

    def test_same_name_same_millisecond_collides(self):
        """No uniqueness beyond timestamp and name."""
        assert build_video_key("a.mp4", 42) == build_video_key("a.mp4", 42)


class TestBuildPublicUrl:
    """Tests for the public URL template."""

    def test_url_follows_virtual_hosted_template(self):
        url = build_public_url("edu-videos", "eu-west-1", "videos/1000-a.mp4")
        assert url == "https://edu-videos.s3.eu-west-1.amazonaws.com/videos/1000-a.mp4"


def test_current_time_ms_is_milliseconds():
    """Sanity check the clock is in ms, not seconds or ns."""
    now = current_time_ms()
    assert 1_600_000_000_000 < now < 10_000_000_000_000


# ---------------------------------------------------------------------------
# Value Object Tests
# ---------------------------------------------------------------------------

class TestVideoRecord:
    """Tests for the VideoRecord value object."""

    @pytest.mark.parametrize(
        "size, expected",
        [
            (0, "0 B"),
            (512, "512 B"),
            (2048, "2.0 KB"),
            (5 * 1024 * 1024, "5.0 MB"),
            (3 * 1024 ** 3, "3.0 GB"),
        ],
    )
    def test_size_display(self, size, expected):
        record = VideoRecord(key="videos/k", url="u", size=size, last_modified=MODIFIED)
        assert record.size_display == expected

    def test_records_are_immutable(self):
        record = VideoRecord(key="videos/k", url="u", size=1, last_modified=MODIFIED)
        with pytest.raises(AttributeError):
            record.size = 2


class TestUploadedFile:
    """Tests for the UploadedFile value object."""

    def test_size_is_byte_length(self):
        upload = UploadedFile(original_name="a.mp4", mime_type="video/mp4", data=b"abc")
        assert upload.size == 3

    def test_rejects_empty_name(self):
        with pytest.raises(ValueError, match="must have a name"):
            UploadedFile(original_name="", mime_type="video/mp4", data=b"abc")


# ---------------------------------------------------------------------------
# Catalog Service Tests
# ---------------------------------------------------------------------------

class TestVideoCatalog:
    """Tests for listing and storing through the catalog."""

    @pytest.fixture
    def store(self) -> MockObjectStore:
        return MockObjectStore()

    @pytest.fixture
    def catalog(self, store) -> VideoCatalog:
        return VideoCatalog(
            store=store,
            bucket="edu-videos",
            region="eu-west-1",
            clock=lambda: 1700000000000,
        )

    def test_store_upload_builds_key_and_uses_public_read(self, catalog, store):
        upload = UploadedFile(original_name="lecture1.mp4", mime_type="video/mp4", data=b"data")

        key = asyncio.run(catalog.store_upload(upload))

        assert key == "videos/1700000000000-lecture1.mp4"
        assert store.puts == [("videos/1700000000000-lecture1.mp4", "video/mp4", "public-read")]
        assert store.objects[key].data == b"data"

    def test_list_maps_one_record_per_object(self, catalog, store):
        store.objects["videos/1000-a.mp4"] = StoredObject(
            data=b"x" * 2048, content_type="video/mp4", acl="public-read", last_modified=MODIFIED
        )
        store.objects["videos/2000-b.mp4"] = StoredObject(
            data=b"y" * 10, content_type="video/mp4", acl="public-read", last_modified=MODIFIED
        )

        records = asyncio.run(catalog.list_videos())

        assert [r.key for r in records] == ["videos/1000-a.mp4", "videos/2000-b.mp4"]
        assert records[0].size == 2048
        assert records[0].last_modified == MODIFIED
        assert records[0].url == "https://edu-videos.s3.eu-west-1.amazonaws.com/videos/1000-a.mp4"

    def test_list_only_queries_video_prefix(self, catalog, store):
        store.objects["thumbs/a.png"] = StoredObject(
            data=b"p", content_type="image/png", acl="private", last_modified=MODIFIED
        )

        records = asyncio.run(catalog.list_videos())

        assert records == []
        assert store.list_calls == ["videos/"]

    def test_list_keeps_store_order(self):
        """The catalog doesn't sort; it shows what the store returns."""

        class FixedStore:
            async def list_objects(self, prefix):
                return [
                    ObjectMeta(key="videos/2-b.mp4", size=1, last_modified=MODIFIED),
                    ObjectMeta(key="videos/1-a.mp4", size=1, last_modified=MODIFIED),
                ]

            async def put_object(self, key, data, content_type, acl):
                raise AssertionError("not expected")

        catalog = VideoCatalog(store=FixedStore(), bucket="b", region="r")

        records = asyncio.run(catalog.list_videos())

        assert [r.key for r in records] == ["videos/2-b.mp4", "videos/1-a.mp4"]
