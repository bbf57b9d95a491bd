"""Provides CRC32C and MD5 checksum calculation over binary streams."""

import hashlib
from typing import BinaryIO

import google_crc32c

from s3_client.exceptions import ChecksumComputationError

CHUNK_SIZE = 64 * 1024

CRC32C = "crc32c"
MD5 = "md5"

# Closed or detached streams raise ValueError rather than OSError.
STREAM_ERRORS = (OSError, ValueError)


class _CRC32CHasher:
    """hashlib-style wrapper around google_crc32c.Checksum."""

    def __init__(self):
        self._checksum = google_crc32c.Checksum()

    def update(self, data: bytes) -> None:
        self._checksum.update(data)

    def hexdigest(self) -> str:
        return self._checksum.digest().hex()


def _new_hasher(kind: str):
    if kind == CRC32C:
        return _CRC32CHasher()
    if kind == MD5:
        return hashlib.md5(usedforsecurity=False)
    raise ValueError(f"unsupported checksum kind '{kind}'")


def compute_checksum(kind: str, stream: BinaryIO) -> str:
    """
    Consumes the stream from its current position and returns its hex digest.

    Args:
        kind: Either CRC32C or MD5.
        stream: Readable binary stream.

    Returns:
        Lowercase hexadecimal digest.

    Raises:
        ChecksumComputationError: If reading the stream fails.
    """
    hasher = _new_hasher(kind)
    try:
        while chunk := stream.read(CHUNK_SIZE):
            hasher.update(chunk)
    except STREAM_ERRORS as e:
        raise ChecksumComputationError(kind, cause=e) from e
    return hasher.hexdigest()


def compute_checksum_bytes(kind: str, data: bytes) -> str:
    """Returns the hex digest of an in-memory buffer."""
    hasher = _new_hasher(kind)
    hasher.update(data)
    return hasher.hexdigest()


def compute_seekable_checksum(kind: str, stream: BinaryIO) -> str:
    """
    Digests a seekable stream from its start and rewinds it afterwards.

    The stream is left at offset 0 so that the next consumer reads the full
    content.

    Raises:
        ChecksumComputationError: If seeking or reading the stream fails.
    """
    try:
        stream.seek(0)
    except STREAM_ERRORS as e:
        raise ChecksumComputationError(kind, cause=e) from e

    checksum = compute_checksum(kind, stream)

    try:
        stream.seek(0)
    except STREAM_ERRORS as e:
        raise ChecksumComputationError(kind, cause=e) from e
    return checksum


def generate_checksum_crc32c(stream: BinaryIO) -> str:
    """Returns the CRC32C hex digest of everything left in the stream."""
    return compute_checksum(CRC32C, stream)


def generate_checksum_md5(stream: BinaryIO) -> str:
    """Returns the MD5 hex digest of everything left in the stream."""
    return compute_checksum(MD5, stream)
