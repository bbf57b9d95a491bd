from s3_client.infrastructure.interfaces.storage import StorageBackend

__all__ = [
    "StorageBackend",
]
