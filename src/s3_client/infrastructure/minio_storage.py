"""MinIO implementation of the StorageBackend interface."""

import logging
from collections.abc import Iterator, Mapping
from datetime import timedelta
from typing import Any, BinaryIO

from minio import Minio
from minio.commonconfig import ENABLED, Filter
from minio.lifecycleconfig import Expiration, LifecycleConfig, Rule
from minio.time import from_http_header

from s3_client.domain.models import DeclaredSize, KnownSize, ListedObject, ObjectStat
from s3_client.infrastructure.interfaces import StorageBackend

logger = logging.getLogger(__name__)

USER_METADATA_PREFIX = "x-amz-meta-"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
# minio requires an explicit part size when the length is unknown
UNKNOWN_SIZE_PART_SIZE = 10 * 1024 * 1024


def extract_user_metadata(headers: Mapping[str, str] | None) -> dict[str, str]:
    """Returns the x-amz-meta-* headers with their prefix removed."""
    metadata = {}
    if not headers:
        return metadata
    for key, value in headers.items():
        if key.lower().startswith(USER_METADATA_PREFIX):
            metadata[key[len(USER_METADATA_PREFIX) :]] = value
    return metadata


def stat_from_headers(object_name: str, headers: Mapping[str, str]) -> ObjectStat:
    """Builds an ObjectStat from the headers of a GET response."""
    last_modified = headers.get("last-modified")
    return ObjectStat(
        key=object_name,
        size=int(headers.get("content-length") or 0),
        content_type=headers.get("content-type") or "",
        metadata=extract_user_metadata(headers),
        last_modified=from_http_header(last_modified) if last_modified else None,
    )


class _CountingReader:
    """Counts the bytes minio pulls out of the upload stream."""

    def __init__(self, stream: BinaryIO):
        self._stream = stream
        self.count = 0

    def read(self, size: int = -1) -> bytes:
        chunk = self._stream.read(size)
        self.count += len(chunk)
        return chunk


class MinioStorageBackend(StorageBackend):
    """Handles single-object operations using the MinIO SDK."""

    def __init__(self, client: Minio):
        self._client = client

    @property
    def client(self) -> Minio:
        return self._client

    def bucket_exists(self, bucket_name: str) -> bool:
        return self._client.bucket_exists(bucket_name)

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
        reader = _CountingReader(data)
        if isinstance(size, KnownSize):
            length = size.bytes
        else:
            length = -1
            options.setdefault("part_size", UNKNOWN_SIZE_PART_SIZE)

        self._client.put_object(
            bucket_name=bucket_name,
            object_name=object_name,
            data=reader,
            length=length,
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            metadata=metadata or None,
            **options,
        )
        logger.debug(
            "Object stored",
            extra={
                "bucket_name": bucket_name,
                "object_name": object_name,
                "size": reader.count,
            },
        )
        return length if length >= 0 else reader.count

    def get_object(
        self, bucket_name: str, object_name: str, **options: Any
    ) -> tuple[Any, ObjectStat]:
        response = self._client.get_object(
            bucket_name=bucket_name, object_name=object_name, **options
        )
        try:
            stat = stat_from_headers(object_name, response.headers)
        except Exception:
            response.close()
            response.release_conn()
            raise
        return response, stat

    def stat_object(self, bucket_name: str, object_name: str) -> ObjectStat:
        result = self._client.stat_object(
            bucket_name=bucket_name, object_name=object_name
        )
        return ObjectStat(
            key=result.object_name,
            size=result.size or 0,
            content_type=result.content_type or "",
            metadata=extract_user_metadata(result.metadata),
            last_modified=result.last_modified,
        )

    def fget_object(
        self, bucket_name: str, object_name: str, file_path: str, **options: Any
    ) -> None:
        self._client.fget_object(
            bucket_name=bucket_name,
            object_name=object_name,
            file_path=file_path,
            **options,
        )

    def remove_object(self, bucket_name: str, object_name: str, **options: Any) -> None:
        self._client.remove_object(
            bucket_name=bucket_name, object_name=object_name, **options
        )

    def list_objects(
        self, bucket_name: str, prefix: str, recursive: bool
    ) -> Iterator[ListedObject]:
        for obj in self._client.list_objects(
            bucket_name=bucket_name, prefix=prefix, recursive=recursive
        ):
            if obj.is_dir:
                continue
            yield ListedObject(key=obj.object_name, size=obj.size or 0)

    def presigned_get_object(
        self,
        bucket_name: str,
        object_name: str,
        expires: timedelta,
        response_headers: dict[str, str],
    ) -> str:
        return self._client.presigned_get_object(
            bucket_name=bucket_name,
            object_name=object_name,
            expires=expires,
            response_headers=response_headers,
        )

    def set_lifecycle_rule(
        self, bucket_name: str, rule_id: str, prefix: str, expiry_days: int
    ) -> None:
        config = LifecycleConfig(
            [
                Rule(
                    ENABLED,
                    rule_filter=Filter(prefix=prefix),
                    rule_id=rule_id,
                    expiration=Expiration(days=expiry_days),
                ),
            ],
        )
        self._client.set_bucket_lifecycle(bucket_name=bucket_name, config=config)
