"""
Multipart upload ingestion, buffered in memory.

Starlette's request.form() spools every file part larger than 1 MiB to a
temporary file on disk, and only afterwards could we look at its size. This
module parses the request stream itself with python-multipart and keeps the
bytes of the upload field in memory, counting as it goes:

- a declared Content-Length above the limit (plus room for boundaries and
  part headers) is rejected before a single body byte is read;
- the streamed body and the buffered file bytes are both counted, so a
  chunked or lying client is cut off as soon as it crosses the limit.

Nothing is ever written to local disk.
"""

import logging
from dataclasses import dataclass, field
from typing import AsyncIterator, Optional

from python_multipart.exceptions import MultipartParseError
from python_multipart.multipart import MultipartParser, parse_options_header

logger = logging.getLogger(__name__)

# Room for boundaries, part headers and small form fields on top of the file
MULTIPART_OVERHEAD_BYTES = 64 * 1024


class UploadTooLargeError(Exception):
    """Raised when an uploaded file exceeds the configured size limit."""

    def __init__(self, size_limit: int) -> None:
        super().__init__(f"Upload exceeds {size_limit} bytes")
        self.size_limit = size_limit


@dataclass
class FilePart:
    """One file part of the upload field, as received."""
    filename: str
    content_type: str
    chunks: list[bytes] = field(default_factory=list)

    @property
    def data(self) -> bytes:
        return b"".join(self.chunks)


class MultipartFileReader:
    """
    Collect the file parts posted under one form field.

    Feed it body chunks with write() and call finish() at the end. Parts
    under other fields and non-file parts are parsed but not kept.
    """

    def __init__(self, boundary: bytes, field_name: str, size_limit: int) -> None:
        self.field_name = field_name
        self.size_limit = size_limit
        self.files: list[FilePart] = []

        self._buffered = 0
        self._header_field = b""
        self._header_value = b""
        self._headers: dict[bytes, bytes] = {}
        self._current: Optional[FilePart] = None

        self._parser = MultipartParser(
            boundary,
            callbacks={
                "on_part_begin": self._on_part_begin,
                "on_part_data": self._on_part_data,
                "on_header_field": self._on_header_field,
                "on_header_value": self._on_header_value,
                "on_header_end": self._on_header_end,
                "on_headers_finished": self._on_headers_finished,
            },
        )

    def write(self, chunk: bytes) -> None:
        self._parser.write(chunk)

    def finish(self) -> None:
        self._parser.finalize()

    def _on_part_begin(self) -> None:
        self._headers = {}
        self._current = None

    def _on_header_field(self, data: bytes, start: int, end: int) -> None:
        self._header_field += data[start:end]

    def _on_header_value(self, data: bytes, start: int, end: int) -> None:
        self._header_value += data[start:end]

    def _on_header_end(self) -> None:
        self._headers[self._header_field.lower()] = self._header_value
        self._header_field = b""
        self._header_value = b""

    def _on_headers_finished(self) -> None:
        _, options = parse_options_header(self._headers.get(b"content-disposition", b""))
        name = options.get(b"name", b"").decode("utf-8", errors="replace")
        filename = options.get(b"filename")

        # empty filename is what browsers send for an untouched file input
        if name != self.field_name or not filename:
            return

        content_type = self._headers.get(b"content-type", b"application/octet-stream")
        self._current = FilePart(
            filename=filename.decode("utf-8", errors="replace"),
            content_type=content_type.decode("latin-1").strip(),
        )
        self.files.append(self._current)

    def _on_part_data(self, data: bytes, start: int, end: int) -> None:
        if self._current is None:
            return

        self._buffered += end - start
        if self._buffered > self.size_limit:
            raise UploadTooLargeError(self.size_limit)

        self._current.chunks.append(data[start:end])


async def read_multipart_files(
    content_type: str,
    content_length: Optional[str],
    body: AsyncIterator[bytes],
    field_name: str,
    size_limit: int,
) -> list[FilePart]:
    """
    Read every file part posted under field_name into memory.

    Returns an empty list when the request is not multipart or is malformed.
    Raises UploadTooLargeError once the limit is crossed.
    """
    media_type, params = parse_options_header(content_type)
    if media_type != b"multipart/form-data" or b"boundary" not in params:
        return []

    body_limit = size_limit + MULTIPART_OVERHEAD_BYTES

    # size can be missing for chunked uploads; the streaming count covers those
    if content_length and content_length.isdigit() and int(content_length) > body_limit:
        raise UploadTooLargeError(size_limit)

    reader = MultipartFileReader(params[b"boundary"], field_name, size_limit)
    received = 0

    try:
        async for chunk in body:
            received += len(chunk)
            if received > body_limit:
                raise UploadTooLargeError(size_limit)
            reader.write(chunk)

        reader.finish()
    except MultipartParseError as e:
        logger.warning("Malformed multipart body", extra={"error": str(e)})
        return []

    logger.debug(
        "Parsed multipart body",
        extra={"field": field_name, "files": len(reader.files), "body_bytes": received}
    )

    return reader.files
