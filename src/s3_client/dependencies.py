"""Builds a ready-to-use S3Client from configuration."""

import logging

from s3_client.client import S3Client
from s3_client.config import ClientConfig, load_config
from s3_client.infrastructure import MinioStorageBackend
from s3_client.minio import get_minio_client

logger = logging.getLogger(__name__)


def create_client(config: ClientConfig | None = None) -> S3Client:
    """
    Returns an S3Client backed by MinIO.

    Args:
        config: Client configuration; loaded from environment variables when None.

    Raises:
        ConfigurationError: If connection details are missing or the bucket
            does not exist.
    """
    config = config or load_config()

    minio_client = get_minio_client(config.minio)
    client = S3Client(
        MinioStorageBackend(minio_client),
        config.minio.bucket_name,
        integrity=config.integrity,
        max_workers=config.max_workers,
        health_check_interval=config.health_check_interval,
    )
    logger.info(
        "S3 client created",
        extra={
            "endpoint": config.minio.endpoint,
            "bucket_name": config.minio.bucket_name,
            "use_crc32c": config.integrity.use_crc32c,
            "use_md5": config.integrity.use_md5,
        },
    )
    return client
