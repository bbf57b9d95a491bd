"""Concrete implementations of infrastructure interfaces."""

from .minio_storage import MinioStorageBackend

__all__ = ["MinioStorageBackend"]
