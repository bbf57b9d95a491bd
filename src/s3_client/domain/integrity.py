"""Decides which checksums to compute, embed, surface and verify."""

import logging
from collections.abc import Callable
from typing import BinaryIO

from s3_client.config import IntegrityConfig
from s3_client.domain.checksum import (
    CRC32C,
    MD5,
    compute_checksum_bytes,
    compute_seekable_checksum,
)
from s3_client.domain.models import Integrity
from s3_client.exceptions import ChecksumMismatchError

logger = logging.getLogger(__name__)

KEY_CRC32C_CHECKSUM = "checksum-crc32c"
KEY_MD5_CHECKSUM = "checksum-md5"

RESERVED_KEYS = {CRC32C: KEY_CRC32C_CHECKSUM, MD5: KEY_MD5_CHECKSUM}


def checksum_matches(expected: str, actual: str) -> bool:
    """An empty expectation means no verification was requested."""
    return expected == "" or expected == actual


def _build_integrity(values: dict[str, str]) -> Integrity:
    return Integrity(
        checksum_crc32c=values.get(CRC32C, ""),
        checksum_md5=values.get(MD5, ""),
    )


class IntegrityReconciler:
    """Applies the client's integrity configuration to uploads and downloads."""

    def __init__(self, config: IntegrityConfig):
        self._config = config

    @property
    def config(self) -> IntegrityConfig:
        return self._config

    def _enabled(self, kind: str) -> bool:
        if kind == CRC32C:
            return self._config.use_crc32c
        return self._config.use_md5

    def prepare_upload(
        self, stream: BinaryIO, metadata: dict[str, str]
    ) -> tuple[dict[str, str], Integrity]:
        """
        Computes the enabled checksums of an upload stream.

        The stream is digested from its start and rewound to offset 0 for the
        storage backend. Reserved keys override caller metadata with the same
        name.

        Args:
            stream: The seekable upload stream.
            metadata: Caller supplied metadata.

        Returns:
            The metadata to store and the Integrity of the upload.

        Raises:
            ChecksumComputationError: If the stream cannot be read or rewound.
        """
        computed = {}
        for kind in (CRC32C, MD5):
            if self._enabled(kind):
                computed[kind] = compute_seekable_checksum(kind, stream)

        stored_metadata = dict(metadata)
        for kind, checksum in computed.items():
            reserved = RESERVED_KEYS[kind]
            for key in [k for k in stored_metadata if k.lower() == reserved]:
                del stored_metadata[key]
            stored_metadata[reserved] = checksum

        return stored_metadata, _build_integrity(computed)

    def split_metadata(
        self, metadata: dict[str, str]
    ) -> tuple[dict[str, str], dict[str, str]]:
        """
        Separates embedded checksums from caller visible metadata.

        Returns:
            The metadata without reserved keys and the embedded checksums by kind.
        """
        by_key = {key: kind for kind, key in RESERVED_KEYS.items()}
        user_metadata = {}
        embedded = {}
        for key, value in metadata.items():
            kind = by_key.get(key.lower())
            if kind is None:
                user_metadata[key] = value
            elif value:
                embedded[kind] = value
        return user_metadata, embedded

    def info_integrity(self, embedded: dict[str, str]) -> Integrity:
        """Integrity surfaced without reading content: embedded values of enabled kinds."""
        return _build_integrity(
            {kind: value for kind, value in embedded.items() if self._enabled(kind)}
        )

    def verify_download(
        self,
        object_name: str,
        embedded: dict[str, str],
        read_content: Callable[[], bytes],
        expected_crc32c: str = "",
        expected_md5: str = "",
    ) -> Integrity:
        """
        Reconciles embedded checksums with explicit expectations.

        Content is only read, through read_content, when an expectation exists
        for a kind that has no embedded value. read_content must return the same
        buffer on every call.

        Raises:
            ChecksumMismatchError: If an expectation differs from the actual checksum.
        """
        expectations = {CRC32C: expected_crc32c or "", MD5: expected_md5 or ""}
        result = {}

        for kind, expected in expectations.items():
            known = embedded.get(kind, "")
            if expected:
                actual = known or compute_checksum_bytes(kind, read_content())
                if not checksum_matches(expected, actual):
                    logger.warning(
                        "Checksum mismatch",
                        extra={
                            "object_name": object_name,
                            "kind": kind,
                            "expected": expected,
                            "actual": actual,
                        },
                    )
                    raise ChecksumMismatchError(object_name, kind, expected, actual)
                result[kind] = actual
            elif self._enabled(kind) and known:
                result[kind] = known

        return _build_integrity(result)
