"""Custom exceptions for the s3 client."""

from minio.error import S3Error

NOT_FOUND_CODES = frozenset({"NoSuchKey", "NoSuchObject"})


class S3ClientError(Exception):
    """Base class for every error raised by the s3 client."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class ConfigurationError(S3ClientError):
    """Raised when the client cannot be constructed from the given configuration."""


class EmptyHostError(ConfigurationError):
    """Raised when the host is not specified."""

    def __init__(self):
        super().__init__("host not specified")


class EmptyAccessKeyError(ConfigurationError):
    """Raised when the access key is not specified."""

    def __init__(self):
        super().__init__("access key not specified")


class EmptyAccessSecretError(ConfigurationError):
    """Raised when the access secret is not specified."""

    def __init__(self):
        super().__init__("access secret not specified")


class EmptyBucketNameError(ConfigurationError):
    """Raised when the bucket name is not specified."""

    def __init__(self):
        super().__init__("bucket name not specified")


class BucketDoesNotExistError(ConfigurationError):
    """Raised when the configured bucket does not exist."""

    def __init__(self, bucket_name: str):
        self.bucket_name = bucket_name
        super().__init__(f"bucket '{bucket_name}' does not exist")


class NotFoundError(S3ClientError):
    """Raised when the requested object does not exist."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        super().__init__(
            f"file under '{object_name}' does not exist", cause=cause
        )


class ChecksumMismatchError(S3ClientError):
    """Raised when a downloaded object does not match the expected checksum."""

    def __init__(self, object_name: str, kind: str, expected: str, actual: str):
        self.object_name = object_name
        self.kind = kind
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"checksum mismatch for '{object_name}' ({kind}): "
            f"expected '{expected}', got '{actual}'"
        )


class ChecksumComputationError(S3ClientError):
    """Raised when reading a stream to compute a checksum fails."""

    def __init__(self, kind: str, cause: Exception | None = None):
        self.kind = kind
        super().__init__(f"failed to compute {kind} checksum", cause=cause)


class StreamConsumedError(S3ClientError):
    """Raised when a file stream is read after it has been drained and closed."""

    def __init__(self, object_name: str):
        self.object_name = object_name
        super().__init__(f"stream of '{object_name}' has already been consumed")


class OperationCancelledError(S3ClientError):
    """Raised when a batch unit observes cancellation before its backend call."""

    def __init__(self, object_name: str):
        self.object_name = object_name
        super().__init__(f"operation on '{object_name}' was cancelled")


class InvalidObjectKeyError(S3ClientError):
    """Raised when an object key cannot be mapped to a path inside the destination folder."""

    def __init__(self, object_name: str, destination: str):
        self.object_name = object_name
        self.destination = destination
        super().__init__(
            f"key '{object_name}' resolves outside of '{destination}'"
        )


class StorageOperationError(S3ClientError):
    """Raised when a storage backend call fails for any other reason."""

    def __init__(self, operation: str, object_name: str, cause: Exception | None = None):
        self.operation = operation
        self.object_name = object_name
        super().__init__(f"failed to {operation} '{object_name}'", cause=cause)


class DownloadingFilesFailedError(S3ClientError):
    """Raised when one or more per-object operations of a batch failed."""

    def __init__(self, path: str, errors: list[Exception]):
        self.path = path
        self.errors = list(errors)
        super().__init__(
            f"failed to download files under '{path}': "
            f"{len(self.errors)} error(s): {[str(e) for e in self.errors]}"
        )


def handle_client_error(
    error: Exception, operation: str, object_name: str
) -> S3ClientError:
    """
    Translates a backend exception into the client's error taxonomy.

    Args:
        error: The exception raised by the storage backend.
        operation: Short description of the failed call, used for context.
        object_name: The object key the call was made for.

    Returns:
        NotFoundError for a missing key, the error itself if it already belongs
        to the taxonomy, StorageOperationError otherwise.
    """
    if isinstance(error, S3ClientError):
        return error
    if isinstance(error, S3Error) and error.code in NOT_FOUND_CODES:
        return NotFoundError(object_name, cause=error)
    return StorageOperationError(operation, object_name, cause=error)
