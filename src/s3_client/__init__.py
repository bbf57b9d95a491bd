from s3_client.config import ClientConfig, IntegrityConfig, MinioConfig, load_config
from s3_client.exceptions import (
    BucketDoesNotExistError,
    ChecksumComputationError,
    ChecksumMismatchError,
    ConfigurationError,
    DownloadingFilesFailedError,
    InvalidObjectKeyError,
    EmptyAccessKeyError,
    EmptyAccessSecretError,
    EmptyBucketNameError,
    EmptyHostError,
    NotFoundError,
    OperationCancelledError,
    S3ClientError,
    StorageOperationError,
    StreamConsumedError,
)
from s3_client.logging import setup_logging
from s3_client.domain import (
    UNKNOWN_SIZE,
    File,
    FileInfo,
    Integrity,
    KnownSize,
    UnknownSize,
    Upload,
    UploadInfo,
    generate_checksum_crc32c,
    generate_checksum_md5,
)
from s3_client.options import (
    DownloadOptions,
    GetDirectoryOptions,
    GetOptions,
    RemoveOptions,
    UploadOptions,
)
from s3_client.client import S3Client
from s3_client.dependencies import create_client

__all__ = [
    "setup_logging",
    "ClientConfig",
    "IntegrityConfig",
    "MinioConfig",
    "load_config",
    "S3Client",
    "create_client",
    "File",
    "FileInfo",
    "Integrity",
    "KnownSize",
    "UnknownSize",
    "UNKNOWN_SIZE",
    "Upload",
    "UploadInfo",
    "generate_checksum_crc32c",
    "generate_checksum_md5",
    "UploadOptions",
    "GetOptions",
    "GetDirectoryOptions",
    "DownloadOptions",
    "RemoveOptions",
    "S3ClientError",
    "ConfigurationError",
    "EmptyHostError",
    "EmptyAccessKeyError",
    "EmptyAccessSecretError",
    "EmptyBucketNameError",
    "BucketDoesNotExistError",
    "NotFoundError",
    "ChecksumMismatchError",
    "ChecksumComputationError",
    "StreamConsumedError",
    "OperationCancelledError",
    "StorageOperationError",
    "DownloadingFilesFailedError",
    "InvalidObjectKeyError",
]
