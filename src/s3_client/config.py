"""Configuration models for the s3 client, loaded from environment variables."""

import os

from pydantic import BaseModel, Field

from s3_client.exceptions import (
    EmptyAccessKeyError,
    EmptyAccessSecretError,
    EmptyBucketNameError,
    EmptyHostError,
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


class MinioConfig(BaseModel, frozen=True):
    """MinIO connection configuration."""

    endpoint: str
    user: str
    password: str
    bucket_name: str
    secure: bool = False

    def validate_details(self) -> None:
        """
        Checks that every connection parameter is present.

        Raises:
            ConfigurationError: The subclass naming the first missing parameter.
        """
        if not self.endpoint:
            raise EmptyHostError()
        if not self.user:
            raise EmptyAccessKeyError()
        if not self.password:
            raise EmptyAccessSecretError()
        if not self.bucket_name:
            raise EmptyBucketNameError()


class IntegrityConfig(BaseModel, frozen=True):
    """Which checksum kinds are computed on upload and surfaced on download."""

    use_crc32c: bool = True
    use_md5: bool = False


class ClientConfig(BaseModel, frozen=True):
    """Root client configuration."""

    minio: MinioConfig
    integrity: IntegrityConfig = IntegrityConfig()
    health_check_interval: float | None = Field(default=None, gt=0)
    max_workers: int | None = Field(default=None, gt=0)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _env_number(name: str, cast):
    value = os.getenv(name)
    if not value:
        return None
    return cast(value)


def load_config() -> ClientConfig:
    """Loads configuration from environment variables."""
    return ClientConfig(
        minio=MinioConfig(
            endpoint=os.getenv("MINIO_ENDPOINT", "minio:9000"),
            user=os.getenv("MINIO_USER", ""),
            password=os.getenv("MINIO_PASSWORD", ""),
            bucket_name=os.getenv("MINIO_BUCKET", ""),
            secure=_env_flag("MINIO_SECURE", False),
        ),
        integrity=IntegrityConfig(
            use_crc32c=_env_flag("S3_USE_CRC32C", True),
            use_md5=_env_flag("S3_USE_MD5", False),
        ),
        health_check_interval=_env_number("S3_HEALTH_CHECK_INTERVAL", float),
        max_workers=_env_number("S3_MAX_WORKERS", int),
    )
