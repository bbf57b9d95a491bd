"""Handle for an object downloaded from storage."""

import threading
from typing import Any

from s3_client.domain.models import FileInfo
from s3_client.exceptions import StreamConsumedError


class File:
    """
    A downloaded object: a readable stream plus its FileInfo.

    The stream is either a live backend response or an in-memory buffer when
    the content had to be read for checksum verification. Closing the file
    releases the underlying connection.
    """

    def __init__(self, stream: Any, info: FileInfo):
        self._stream = stream
        self._info = info
        self._consumed = False
        self._closed = False
        self._lock = threading.Lock()

    @property
    def info(self) -> FileInfo:
        return self._info

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, size: int = -1) -> bytes:
        """Reads up to size bytes from the stream (everything by default)."""
        if self._consumed:
            raise StreamConsumedError(self._info.path)
        if size is None or size < 0:
            return self._stream.read()
        return self._stream.read(size)

    def bytes(self) -> bytes:
        """
        Reads the entire content and closes the file.

        Returns:
            The remaining content of the stream.

        Raises:
            StreamConsumedError: If the stream was already drained by a
                previous call.
        """
        with self._lock:
            if self._consumed:
                raise StreamConsumedError(self._info.path)
            self._consumed = True
        try:
            return self._stream.read()
        finally:
            self.close()

    def close(self) -> None:
        """Closes the stream and releases its connection exactly once."""
        if self._closed:
            return
        self._closed = True
        try:
            self._stream.close()
        finally:
            release_conn = getattr(self._stream, "release_conn", None)
            if release_conn is not None:
                release_conn()

    def __enter__(self) -> "File":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"File(path={self._info.path!r}, size={self._info.size})"
