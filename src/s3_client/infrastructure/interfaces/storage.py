"""Abstract interface for single-object storage operations."""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from datetime import timedelta
from typing import Any, BinaryIO

from s3_client.domain.models import DeclaredSize, ListedObject, ObjectStat


class StorageBackend(ABC):
    """
    Abstract base class for object storage backends.

    Implementations raise the transport's own exceptions; translating them is
    the caller's concern.
    """

    @abstractmethod
    def bucket_exists(self, bucket_name: str) -> bool:
        """Reports whether the bucket exists."""

    @abstractmethod
    def put_object(
        self,
        bucket_name: str,
        object_name: str,
        data: BinaryIO,
        size: DeclaredSize,
        content_type: str,
        metadata: dict[str, str],
        **options: Any,
    ) -> int:
        """
        Uploads an object.

        Args:
            bucket_name: The storage bucket name.
            object_name: The destination key.
            data: Stream positioned at the start of the content.
            size: Declared content size, possibly unknown.
            content_type: MIME type of the object.
            metadata: User metadata stored with the object.
            **options: Backend specific passthrough options.

        Returns:
            The number of bytes stored.
        """

    @abstractmethod
    def get_object(
        self, bucket_name: str, object_name: str, **options: Any
    ) -> tuple[Any, ObjectStat]:
        """
        Opens an object for reading.

        Returns:
            A readable response stream and the object's attributes. The caller
            closes the stream.
        """

    @abstractmethod
    def stat_object(self, bucket_name: str, object_name: str) -> ObjectStat:
        """Returns the object's attributes without fetching content."""

    @abstractmethod
    def fget_object(
        self, bucket_name: str, object_name: str, file_path: str, **options: Any
    ) -> None:
        """Downloads an object to a local file."""

    @abstractmethod
    def remove_object(self, bucket_name: str, object_name: str, **options: Any) -> None:
        """Deletes an object."""

    @abstractmethod
    def list_objects(
        self, bucket_name: str, prefix: str, recursive: bool
    ) -> Iterator[ListedObject]:
        """Lazily lists objects whose key starts with prefix."""

    @abstractmethod
    def presigned_get_object(
        self,
        bucket_name: str,
        object_name: str,
        expires: timedelta,
        response_headers: dict[str, str],
    ) -> str:
        """Returns a time limited download URL for an object."""

    @abstractmethod
    def set_lifecycle_rule(
        self, bucket_name: str, rule_id: str, prefix: str, expiry_days: int
    ) -> None:
        """Expires objects under prefix after expiry_days."""
