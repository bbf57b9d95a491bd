import logging

from minio import Minio

from s3_client.config import MinioConfig
from s3_client.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def get_minio_client(config: MinioConfig) -> Minio:
    """
    Initialize and return a MinIO client from connection details.

    Args:
        config: Connection details. Every field except secure is required.

    Returns:
        Minio: Configured MinIO client

    Raises:
        ConfigurationError: If a connection parameter is missing or the client
            cannot be created.
    """
    config.validate_details()

    try:
        client = Minio(
            endpoint=config.endpoint,
            access_key=config.user,
            secret_key=config.password,
            secure=config.secure,
        )
        return client
    except Exception as e:
        logger.exception(
            "MinIO Client Initialization Failed",
            extra={
                "endpoint": config.endpoint,
                "user": config.user,
            },
        )
        raise ConfigurationError("failed to create s3 client", cause=e) from e
