"""Shared pytest fixtures for all tests."""

import io
import os
import threading
from datetime import datetime, timezone

import pytest
from minio.error import S3Error

from s3_client import IntegrityConfig, S3Client
from s3_client.domain.models import KnownSize, ListedObject, ObjectStat
from s3_client.infrastructure.interfaces import StorageBackend

BUCKET_NAME = "test-bucket"
CONTENT_TYPE = "text/plain"
HEADER_FILE_NAME = "Filename"


def s3_error(code: str, object_name: str) -> S3Error:
    """Builds the error minio raises for a failed object request."""
    return S3Error(
        response=None,
        code=code,
        message="operation failed",
        resource=f"/{BUCKET_NAME}/{object_name}",
        request_id="request-id",
        host_id="host-id",
        bucket_name=BUCKET_NAME,
        object_name=object_name,
    )


class FakeResponse(io.BytesIO):
    """In-memory stand-in for a urllib3 response."""

    def __init__(self, data: bytes):
        super().__init__(data)
        self.released = False

    def release_conn(self) -> None:
        self.released = True


class InMemoryBackend(StorageBackend):
    """Thread-safe in-memory StorageBackend used by the tests."""

    def __init__(self, buckets=(BUCKET_NAME,)):
        self.buckets = set(buckets)
        self.objects: dict[str, dict] = {}
        self.failing_keys: dict[str, Exception] = {}
        self.list_error: Exception | None = None
        self.extra_listed_keys: list[str] = []
        self.responses: list[FakeResponse] = []
        self.put_calls: list[dict] = []
        self.lifecycle_rules: list[tuple] = []
        self.presign_calls: list[tuple] = []
        self.removed: list[tuple] = []
        self.get_started = threading.Event()
        self._lock = threading.Lock()

    def add_object(self, key, content: bytes, content_type=CONTENT_TYPE, metadata=None):
        with self._lock:
            self.objects[key] = {
                "content": content,
                "content_type": content_type,
                "metadata": dict(metadata or {}),
                "last_modified": datetime.now(timezone.utc),
            }

    def _lookup(self, object_name):
        if object_name in self.failing_keys:
            raise self.failing_keys[object_name]
        with self._lock:
            stored = self.objects.get(object_name)
        if stored is None:
            raise s3_error("NoSuchKey", object_name)
        return stored

    def _stat(self, object_name, stored) -> ObjectStat:
        return ObjectStat(
            key=object_name,
            size=len(stored["content"]),
            content_type=stored["content_type"],
            metadata=stored["metadata"],
            last_modified=stored["last_modified"],
        )

    def bucket_exists(self, bucket_name):
        return bucket_name in self.buckets

    def put_object(self, bucket_name, object_name, data, size, content_type, metadata, **options):
        if isinstance(size, KnownSize):
            content = data.read(size.bytes)
        else:
            content = data.read()
        with self._lock:
            self.put_calls.append(
                {"object_name": object_name, "metadata": dict(metadata), "options": options}
            )
        self.add_object(object_name, content, content_type, metadata)
        return len(content)

    def get_object(self, bucket_name, object_name, **options):
        self.get_started.set()
        stored = self._lookup(object_name)
        response = FakeResponse(stored["content"])
        with self._lock:
            self.responses.append(response)
        return response, self._stat(object_name, stored)

    def stat_object(self, bucket_name, object_name):
        return self._stat(object_name, self._lookup(object_name))

    def fget_object(self, bucket_name, object_name, file_path, **options):
        stored = self._lookup(object_name)
        os.makedirs(os.path.dirname(file_path) or ".", exist_ok=True)
        with open(file_path, "wb") as f:
            f.write(stored["content"])

    def remove_object(self, bucket_name, object_name, **options):
        with self._lock:
            self.removed.append((object_name, options))
            self.objects.pop(object_name, None)

    def list_objects(self, bucket_name, prefix, recursive):
        if self.list_error is not None:
            raise self.list_error
        with self._lock:
            keys = sorted(set(self.objects) | set(self.extra_listed_keys))
        for key in keys:
            if not key.startswith(prefix):
                continue
            # Delimited listings group anything past the next "/" into a common
            # prefix, which the MinIO backend drops as a directory entry.
            if not recursive and "/" in key[len(prefix) :]:
                continue
            yield ListedObject(key=key, size=0)

    def presigned_get_object(self, bucket_name, object_name, expires, response_headers):
        self.presign_calls.append((object_name, expires, response_headers))
        return f"http://localhost:9000/{bucket_name}/{object_name}?X-Amz-Expires={int(expires.total_seconds())}"

    def set_lifecycle_rule(self, bucket_name, rule_id, prefix, expiry_days):
        self.lifecycle_rules.append((rule_id, prefix, expiry_days))


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def make_client(backend):
    """
    Factory for clients sharing the in-memory backend.

    Returns:
        Callable taking use_crc32c and use_md5 flags.
    """
    clients = []

    def factory(use_crc32c=True, use_md5=False, **kwargs):
        client = S3Client(
            backend,
            BUCKET_NAME,
            integrity=IntegrityConfig(use_crc32c=use_crc32c, use_md5=use_md5),
            **kwargs,
        )
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def test_content():
    return b"asdfqweryxcv"
