"""S3 client combining single-object transfers, directory fan-out and integrity checks."""

import io
import logging
import os
import posixpath
import threading
from datetime import timedelta
from typing import Any

from s3_client.config import IntegrityConfig
from s3_client.domain import (
    File,
    FileInfo,
    IntegrityReconciler,
    TransferEngine,
    Upload,
    UploadInfo,
)
from s3_client.exceptions import (
    BucketDoesNotExistError,
    ConfigurationError,
    InvalidObjectKeyError,
    NotFoundError,
    S3ClientError,
    handle_client_error,
)
from s3_client.infrastructure.interfaces import StorageBackend
from s3_client.options import (
    DownloadOptions,
    GetDirectoryOptions,
    GetOptions,
    RemoveOptions,
    UploadOptions,
)

logger = logging.getLogger(__name__)

LINK_RESPONSE_HEADERS = {"response-content-disposition": "inline"}


def _release(stream: Any) -> None:
    try:
        stream.close()
    finally:
        release_conn = getattr(stream, "release_conn", None)
        if release_conn is not None:
            release_conn()


def _log_failure(message: str, error: S3ClientError, extra: dict) -> None:
    """Logs a failed backend call; missing objects are routine and get no traceback."""
    if isinstance(error, NotFoundError):
        logger.info(message, extra={**extra, "reason": "not found"})
    else:
        logger.exception(message, extra=extra)


def _folder_prefix(path: str) -> str:
    path = path.rstrip("/")
    return path + "/" if path else ""


class S3Client:
    """Handles file and directory operations against one bucket."""

    def __init__(
        self,
        backend: StorageBackend,
        bucket_name: str,
        integrity: IntegrityConfig | None = None,
        max_workers: int | None = None,
        health_check_interval: float | None = None,
    ):
        """
        Args:
            backend: Single-object storage backend.
            bucket_name: Bucket every operation targets. Must already exist.
            integrity: Which checksum kinds are computed and surfaced.
            max_workers: Optional bound on concurrent transfers per batch.
            health_check_interval: Seconds between background reachability
                checks. Disabled when None.

        Raises:
            ConfigurationError: If the bucket does not exist or cannot be checked.
        """
        self._backend = backend
        self._bucket_name = bucket_name
        self._integrity = IntegrityReconciler(integrity or IntegrityConfig())
        self._engine = TransferEngine(max_workers)

        try:
            exists = backend.bucket_exists(bucket_name)
        except Exception as e:
            logger.exception(
                "Bucket check failed", extra={"bucket_name": bucket_name}
            )
            raise ConfigurationError("failed to create s3 client", cause=e) from e
        if not exists:
            raise BucketDoesNotExistError(bucket_name)

        self._online = True
        self._closed = False
        self._close_lock = threading.Lock()
        self._stop_health_check = threading.Event()
        self._health_thread = None
        if health_check_interval is not None:
            self._start_health_check(health_check_interval)

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    @property
    def integrity_config(self) -> IntegrityConfig:
        return self._integrity.config

    # Lifecycle

    def _start_health_check(self, interval: float) -> None:
        if interval <= 0:
            raise ConfigurationError("health check interval must be positive")
        self._health_thread = threading.Thread(
            target=self._health_check_loop,
            args=(interval,),
            name="s3-health-check",
            daemon=True,
        )
        self._health_thread.start()

    def _health_check_loop(self, interval: float) -> None:
        while not self._stop_health_check.wait(interval):
            try:
                online = self._backend.bucket_exists(self._bucket_name)
            except Exception:
                logger.warning(
                    "Health check failed",
                    exc_info=True,
                    extra={"bucket_name": self._bucket_name},
                )
                online = False
            if online != self._online:
                logger.info(
                    "Storage availability changed",
                    extra={"bucket_name": self._bucket_name, "online": online},
                )
            self._online = online

    def is_online(self) -> bool:
        """Reports the last health check result; always True when disabled."""
        if self._health_thread is None:
            return True
        return self._online

    def close(self) -> None:
        """Stops the health check. Safe to call more than once."""
        with self._close_lock:
            if self._closed:
                return
            self._closed = True
        self._stop_health_check.set()
        if self._health_thread is not None:
            self._health_thread.join()
        logger.info("S3 client closed", extra={"bucket_name": self._bucket_name})

    def __enter__(self) -> "S3Client":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # Single objects

    def upload_file(
        self, upload: Upload, options: UploadOptions | None = None
    ) -> UploadInfo:
        """
        Uploads data under the upload's path.

        Enabled checksums are computed from the upload stream first and stored
        as object metadata.

        Returns:
            UploadInfo with the stored size and the computed checksums.

        Raises:
            ChecksumComputationError: If the stream cannot be digested.
            StorageOperationError: If the backend call fails.
        """
        options = options or UploadOptions()
        client_options = dict(options.client_options)
        metadata = dict(client_options.pop("metadata", None) or {})
        metadata.update(upload.metadata)

        metadata, integrity = self._integrity.prepare_upload(upload.data, metadata)

        try:
            size = self._backend.put_object(
                self._bucket_name,
                upload.path,
                upload.data,
                upload.size,
                upload.content_type,
                metadata,
                **client_options,
            )
        except Exception as e:
            logger.exception(
                "Upload failed",
                extra={"bucket_name": self._bucket_name, "object_name": upload.path},
            )
            raise handle_client_error(e, "upload", upload.path) from e

        logger.info(
            "File uploaded",
            extra={
                "bucket_name": self._bucket_name,
                "object_name": upload.path,
                "size": size,
            },
        )
        return UploadInfo(size=size, integrity=integrity)

    def get_file(self, path: str, options: GetOptions | None = None) -> File:
        """
        Returns the file under the given path with lazily read content.

        Content is only read up front when an explicit checksum check needs it;
        the returned file then serves the buffered content.

        Raises:
            NotFoundError: If no object exists under path.
            ChecksumMismatchError: If a requested checksum does not match.
            StorageOperationError: If the backend call fails.
        """
        options = options or GetOptions()

        try:
            stream, stat = self._backend.get_object(
                self._bucket_name, path, **options.client_options
            )
        except Exception as e:
            error = handle_client_error(e, "get", path)
            _log_failure(
                "Get failed",
                error,
                {"bucket_name": self._bucket_name, "object_name": path},
            )
            raise error from e

        buffered: list[bytes] = []

        def read_content() -> bytes:
            if not buffered:
                buffered.append(stream.read())
            return buffered[0]

        try:
            metadata, embedded = self._integrity.split_metadata(stat.metadata)
            integrity = self._integrity.verify_download(
                path,
                embedded,
                read_content,
                expected_crc32c=options.checksum_crc32c,
                expected_md5=options.checksum_md5,
            )
        except S3ClientError:
            _release(stream)
            raise
        except Exception as e:
            _release(stream)
            logger.exception(
                "Reading file failed",
                extra={"bucket_name": self._bucket_name, "object_name": path},
            )
            raise handle_client_error(e, "get", path) from e

        if buffered:
            _release(stream)
            stream = io.BytesIO(buffered[0])

        info = FileInfo(
            name=posixpath.basename(path),
            path=stat.key,
            size=stat.size,
            content_type=stat.content_type,
            metadata=metadata,
            modified_date=stat.last_modified,
            integrity=integrity,
        )
        logger.info(
            "File fetched",
            extra={"bucket_name": self._bucket_name, "object_name": path},
        )
        return File(stream, info)

    def get_file_info(self, path: str) -> FileInfo:
        """
        Returns the attributes of the file under the given path without its content.

        Only checksums embedded at upload time can be surfaced here.

        Raises:
            NotFoundError: If no object exists under path.
            StorageOperationError: If the backend call fails.
        """
        try:
            stat = self._backend.stat_object(self._bucket_name, path)
        except Exception as e:
            error = handle_client_error(e, "get info of", path)
            _log_failure(
                "Stat failed",
                error,
                {"bucket_name": self._bucket_name, "object_name": path},
            )
            raise error from e

        metadata, embedded = self._integrity.split_metadata(stat.metadata)
        return FileInfo(
            name=posixpath.basename(path),
            path=stat.key,
            size=stat.size,
            content_type=stat.content_type,
            metadata=metadata,
            modified_date=stat.last_modified,
            integrity=self._integrity.info_integrity(embedded),
        )

    def download_file(
        self, path: str, local_path: str, options: DownloadOptions | None = None
    ) -> None:
        """Downloads the file under path to local_path, creating parent directories."""
        options = options or DownloadOptions()

        parent = os.path.dirname(local_path)
        if parent:
            os.makedirs(parent, exist_ok=True)

        try:
            self._backend.fget_object(
                self._bucket_name, path, local_path, **options.client_options
            )
        except Exception as e:
            error = handle_client_error(e, "download", path)
            _log_failure(
                "Download failed",
                error,
                {
                    "bucket_name": self._bucket_name,
                    "object_name": path,
                    "local_path": local_path,
                },
            )
            raise error from e

        logger.info(
            "File downloaded",
            extra={"object_name": path, "local_path": local_path},
        )

    def remove_file(self, path: str, options: RemoveOptions | None = None) -> None:
        """Deletes the file under the given path."""
        options = options or RemoveOptions()
        try:
            self._backend.remove_object(
                self._bucket_name, path, **options.client_options
            )
        except Exception as e:
            error = handle_client_error(e, "remove", path)
            _log_failure(
                "Remove failed",
                error,
                {"bucket_name": self._bucket_name, "object_name": path},
            )
            raise error from e

        logger.info(
            "File removed",
            extra={"bucket_name": self._bucket_name, "object_name": path},
        )

    def create_file_link(self, path: str, expiration: timedelta) -> str:
        """Creates a presigned link to the file that expires after expiration."""
        try:
            return self._backend.presigned_get_object(
                self._bucket_name, path, expiration, dict(LINK_RESPONSE_HEADERS)
            )
        except Exception as e:
            logger.exception(
                "Creating file link failed",
                extra={"bucket_name": self._bucket_name, "object_name": path},
            )
            raise handle_client_error(e, "create link for", path) from e

    def add_lifecycle_rule(
        self, rule_id: str, folder_path: str, days_to_expiry: int
    ) -> None:
        """Expires every file under folder_path after days_to_expiry days."""
        if not folder_path.endswith("/"):
            folder_path += "/"
        try:
            self._backend.set_lifecycle_rule(
                self._bucket_name, rule_id, folder_path, days_to_expiry
            )
        except Exception as e:
            logger.exception(
                "Adding lifecycle rule failed",
                extra={"bucket_name": self._bucket_name, "rule_id": rule_id},
            )
            raise handle_client_error(e, "add lifecycle rule for", folder_path) from e

        logger.info(
            "Lifecycle rule added",
            extra={
                "rule_id": rule_id,
                "folder_path": folder_path,
                "days_to_expiry": days_to_expiry,
            },
        )

    # Directories

    def _list_keys(self, path: str, recursive: bool) -> list[str]:
        try:
            return [
                obj.key
                for obj in self._backend.list_objects(
                    self._bucket_name, path, recursive
                )
            ]
        except Exception as e:
            logger.exception(
                "Listing failed",
                extra={"bucket_name": self._bucket_name, "path": path},
            )
            raise handle_client_error(e, "list", path) from e

    def get_file_names_in_path(self, path: str, recursive: bool = False) -> list[str]:
        """Returns the names of all files under path, including subfolders if recursive."""
        return [
            posixpath.basename(key)
            for key in self._list_keys(_folder_prefix(path), recursive)
        ]

    def get_directory(
        self,
        path: str,
        options: GetDirectoryOptions | None = None,
        cancel: threading.Event | None = None,
    ) -> list[File]:
        """
        Returns every file under path, fetched concurrently.

        Raises:
            DownloadingFilesFailedError: If any file could not be fetched. Files
                fetched successfully are closed and dropped.
        """
        options = options or GetDirectoryOptions()
        get_options = GetOptions(client_options=options.client_options)
        keys = self._list_keys(path, recursive=True)

        return self._engine.transfer_batch(
            path,
            keys,
            lambda key: self.get_file(key, get_options),
            cancel=cancel,
            discard=File.close,
        )

    def get_directory_infos(
        self, path: str, cancel: threading.Event | None = None
    ) -> list[FileInfo]:
        """
        Returns the attributes of every file under path, fetched concurrently.

        Raises:
            DownloadingFilesFailedError: If any info could not be fetched.
        """
        keys = self._list_keys(path, recursive=True)
        return self._engine.transfer_batch(
            path, keys, self.get_file_info, cancel=cancel
        )

    def download_directory(
        self,
        path: str,
        local_path: str,
        recursive: bool = True,
        options: DownloadOptions | None = None,
        cancel: threading.Event | None = None,
    ) -> list[str]:
        """
        Downloads every file under path into local_path concurrently.

        The key below path becomes the relative location under local_path, so
        a recursive download mirrors the remote folder structure.

        Returns:
            The local paths written, in no particular order.

        Raises:
            DownloadingFilesFailedError: If any file could not be downloaded,
                including keys that would resolve outside local_path.
        """
        prefix = _folder_prefix(path)
        keys = [
            key
            for key in self._list_keys(prefix, recursive)
            if not key.endswith("/")
        ]
        root = os.path.realpath(local_path)

        def download(key: str) -> str:
            relative = key.removeprefix(prefix)
            destination = os.path.join(local_path, *relative.split("/"))
            resolved = os.path.realpath(destination)
            if resolved == root or os.path.commonpath([root, resolved]) != root:
                raise InvalidObjectKeyError(key, local_path)
            self.download_file(key, destination, options)
            return destination

        return self._engine.transfer_batch(path, keys, download, cancel=cancel)
