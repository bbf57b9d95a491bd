"""Per-call options. client_options are passed through to the storage backend."""

from typing import Any

from pydantic import BaseModel, Field


class UploadOptions(BaseModel, frozen=True):
    """Options for uploading a file, e.g. sse, tags or part_size."""

    client_options: dict[str, Any] = Field(default_factory=dict)


class GetOptions(BaseModel, frozen=True):
    """
    Options for getting a file.

    checksum_crc32c and checksum_md5 request explicit verification against
    the given hex digest. An empty string requests nothing.
    """

    client_options: dict[str, Any] = Field(default_factory=dict)
    checksum_crc32c: str = ""
    checksum_md5: str = ""


class GetDirectoryOptions(BaseModel, frozen=True):
    """Options applied to every file of a directory get."""

    client_options: dict[str, Any] = Field(default_factory=dict)


class DownloadOptions(BaseModel, frozen=True):
    """Options for downloading a file to the local file system."""

    client_options: dict[str, Any] = Field(default_factory=dict)


class RemoveOptions(BaseModel, frozen=True):
    """Options for removing a file, e.g. version_id."""

    client_options: dict[str, Any] = Field(default_factory=dict)
