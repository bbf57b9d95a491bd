"""Domain models for uploads, downloads and integrity checksums."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Integrity(BaseModel, frozen=True):
    """
    Checksums of an object as lowercase hex digests.

    An empty string means the checksum was neither computed nor requested.
    """

    checksum_crc32c: str = ""
    checksum_md5: str = ""


class KnownSize(BaseModel, frozen=True):
    """Declared size of an upload in bytes."""

    bytes: int = Field(ge=0)


class UnknownSize(BaseModel, frozen=True):
    """Upload size is unknown; the backend determines it while streaming."""


UNKNOWN_SIZE = UnknownSize()

DeclaredSize = KnownSize | UnknownSize


class Upload(BaseModel):
    """Describes one object to upload: a seekable stream plus its attributes."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    data: Any
    path: str
    content_type: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)
    size: DeclaredSize = UNKNOWN_SIZE

    @field_validator("data")
    @classmethod
    def _require_seekable(cls, value: Any) -> Any:
        if not (hasattr(value, "read") and hasattr(value, "seek")):
            raise ValueError("upload data must be a seekable binary stream")
        return value


class UploadInfo(BaseModel, frozen=True):
    """Result of a successful upload."""

    size: int
    integrity: Integrity = Integrity()


class FileInfo(BaseModel, frozen=True):
    """Snapshot of a stored object's attributes."""

    name: str
    path: str
    size: int
    content_type: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)
    modified_date: datetime | None = None
    integrity: Integrity = Integrity()


class ObjectStat(BaseModel, frozen=True):
    """Object attributes as reported by the storage backend."""

    key: str
    size: int
    content_type: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)
    last_modified: datetime | None = None


class ListedObject(BaseModel, frozen=True):
    """One entry of a prefix listing."""

    key: str
    size: int = 0
