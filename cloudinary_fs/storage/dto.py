# storage/dto.py
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ResourceMetadata(BaseModel):
    """
    Normalized metadata for a remote resource. Every field of the raw
    Cloudinary resource is preserved alongside the normalized ones.
    """

    model_config = ConfigDict(extra="allow")

    type: str = "file"
    path: str
    size: int
    timestamp: int
    mimetype: str


class FileContents(BaseModel):
    contents: bytes
    path: str


class FileStream(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    stream: Any
    path: str


class DirectoryEntry(BaseModel):
    """A "directory" is only ever a prefix of public identifiers."""

    type: str = "dir"
    path: str


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UPLOAD_FAILED = "upload_failed"
    RENAME_FAILED = "rename_failed"
    COPY_FAILED = "copy_failed"
    DELETE_FAILED = "delete_failed"
    READ_FAILED = "read_failed"
    INVALID_METADATA = "invalid_metadata"
    REMOTE_ERROR = "remote_error"
    UNSUPPORTED = "unsupported"


class Result(BaseModel):
    """
    Outcome of an adapter operation: either a success value or a tagged failure.
    Truthiness follows `ok`, so callers can write `if adapter.delete(path):`.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    ok: bool
    value: Any = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, value: Any = True) -> "Result":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: Optional[str] = None) -> "Result":
        return cls(ok=False, error=error, message=message)

    def __bool__(self) -> bool:
        return self.ok
