"""
Unit tests for in-memory multipart ingestion.

Bodies are fed as async chunk streams, the way Starlette hands them over.
"""

import asyncio

import pytest

from edvideo.api.uploads import (
    MULTIPART_OVERHEAD_BYTES,
    UploadTooLargeError,
    read_multipart_files,
)


BOUNDARY = "testboundary"
CONTENT_TYPE = f"multipart/form-data; boundary={BOUNDARY}"


def file_part(name: str, filename: str, data: bytes, content_type: str = "video/mp4") -> bytes:
    return (
        f"--{BOUNDARY}\r\n"
        f'Content-Disposition: form-data; name="{name}"; filename="{filename}"\r\n'
        f"Content-Type: {content_type}\r\n\r\n"
    ).encode() + data + b"\r\n"


def field_part(name: str, value: str) -> bytes:
    return (
        f"--{BOUNDARY}\r\n"
        f'Content-Disposition: form-data; name="{name}"\r\n\r\n'
        f"{value}\r\n"
    ).encode()


def closing() -> bytes:
    return f"--{BOUNDARY}--\r\n".encode()


def chunked(body: bytes, size: int):
    async def stream():
        for i in range(0, len(body), size):
            yield body[i:i + size]
    return stream()


def read(body: bytes, size_limit: int = 1024, chunk_size: int = 7, content_type: str = CONTENT_TYPE,
         content_length=None):
    return asyncio.run(read_multipart_files(
        content_type=content_type,
        content_length=content_length,
        body=chunked(body, chunk_size),
        field_name="video",
        size_limit=size_limit,
    ))


class TestReadMultipartFiles:

    def test_collects_file_across_small_chunks(self):
        body = file_part("video", "lecture1.mp4", b"0123456789" * 5) + closing()

        files = read(body, chunk_size=3)

        assert len(files) == 1
        assert files[0].filename == "lecture1.mp4"
        assert files[0].content_type == "video/mp4"
        assert files[0].data == b"0123456789" * 5

    def test_ignores_other_fields(self):
        body = (
            field_part("title", "Week 1")
            + file_part("attachment", "notes.pdf", b"pdf", "application/pdf")
            + file_part("video", "a.mp4", b"abc")
            + closing()
        )

        files = read(body)

        assert [f.filename for f in files] == ["a.mp4"]

    def test_empty_filename_is_not_a_file(self):
        body = file_part("video", "", b"") + closing()

        assert read(body) == []

    def test_returns_every_file_under_the_field(self):
        body = file_part("video", "a.mp4", b"a") + file_part("video", "b.mp4", b"b") + closing()

        assert [f.filename for f in read(body)] == ["a.mp4", "b.mp4"]

    def test_exactly_at_limit_is_accepted(self):
        body = file_part("video", "a.mp4", b"x" * 1024) + closing()

        files = read(body, size_limit=1024)

        assert len(files[0].data) == 1024

    def test_one_byte_over_limit_raises(self):
        body = file_part("video", "a.mp4", b"x" * 1025) + closing()

        with pytest.raises(UploadTooLargeError):
            read(body, size_limit=1024)

    def test_declared_length_over_limit_raises_before_reading(self):
        consumed = []

        async def stream():
            consumed.append(True)
            yield b""

        with pytest.raises(UploadTooLargeError):
            asyncio.run(read_multipart_files(
                content_type=CONTENT_TYPE,
                content_length=str(1024 + MULTIPART_OVERHEAD_BYTES + 1),
                body=stream(),
                field_name="video",
                size_limit=1024,
            ))

        assert consumed == []

    def test_stream_is_cut_off_once_body_exceeds_limit(self):
        """Bytes outside the upload field still count towards the body limit."""
        pulled = []

        async def stream():
            yield field_part("title", "")[:-2]
            while True:
                pulled.append(1)
                yield b"y" * 4096

        with pytest.raises(UploadTooLargeError):
            asyncio.run(read_multipart_files(
                content_type=CONTENT_TYPE,
                content_length=None,
                body=stream(),
                field_name="video",
                size_limit=1024,
            ))

        assert len(pulled) * 4096 <= 1024 + MULTIPART_OVERHEAD_BYTES + 4096

    def test_not_multipart_returns_nothing(self):
        assert read(b"video=abc", content_type="application/x-www-form-urlencoded") == []
        assert read(b"", content_type="") == []

    def test_malformed_body_returns_nothing(self):
        assert read(b"this is not a multipart body at all") == []
