"""Domain layer exports."""

from s3_client.domain.checksum import (
    CRC32C,
    MD5,
    generate_checksum_crc32c,
    generate_checksum_md5,
)
from s3_client.domain.file import File
from s3_client.domain.integrity import (
    KEY_CRC32C_CHECKSUM,
    KEY_MD5_CHECKSUM,
    IntegrityReconciler,
)
from s3_client.domain.models import (
    UNKNOWN_SIZE,
    DeclaredSize,
    FileInfo,
    Integrity,
    KnownSize,
    ListedObject,
    ObjectStat,
    UnknownSize,
    Upload,
    UploadInfo,
)
from s3_client.domain.transfer import TransferEngine

__all__ = [
    "CRC32C",
    "MD5",
    "generate_checksum_crc32c",
    "generate_checksum_md5",
    "File",
    "KEY_CRC32C_CHECKSUM",
    "KEY_MD5_CHECKSUM",
    "IntegrityReconciler",
    "UNKNOWN_SIZE",
    "DeclaredSize",
    "FileInfo",
    "Integrity",
    "KnownSize",
    "ListedObject",
    "ObjectStat",
    "UnknownSize",
    "Upload",
    "UploadInfo",
    "TransferEngine",
]
