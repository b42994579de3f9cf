"""
Models for chunk_uploader module.

Immutable dataclasses for results and configuration.
"""
import os
from dataclasses import dataclass
from typing import Optional
from enum import Enum

from .utils.progress import fraction


DEFAULT_CHUNK_SIZE = 512 * 1024  # 512 KiB per request


class UploadStatus(Enum):
    """Terminal status of an upload operation."""
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadOutcome:
    """Immutable result of an upload operation."""
    filename: str
    status: UploadStatus = UploadStatus.COMPLETED
    handle: Optional[str] = None
    bytes_transferred: int = 0
    total_size: int = 0
    error: Optional[str] = None
    error_kind: Optional[str] = None  # exception class name on FAILED

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.COMPLETED

    @property
    def was_cancelled(self) -> bool:
        return self.status == UploadStatus.CANCELLED

    @property
    def progress(self) -> float:
        return fraction(self.bytes_transferred, self.total_size)

    @classmethod
    def completed(cls, filename: str, total_size: int, handle: Optional[str] = None):
        return cls(
            filename=filename,
            status=UploadStatus.COMPLETED,
            handle=handle,
            bytes_transferred=total_size,
            total_size=total_size,
        )

    @classmethod
    def cancelled(
        cls,
        filename: str,
        bytes_transferred: int,
        total_size: int,
        handle: Optional[str] = None,
    ):
        return cls(
            filename=filename,
            status=UploadStatus.CANCELLED,
            handle=handle,
            bytes_transferred=bytes_transferred,
            total_size=total_size,
        )

    @classmethod
    def fail(
        cls,
        filename: str,
        error: str,
        error_kind: Optional[str] = None,
        bytes_transferred: int = 0,
        total_size: int = 0,
        handle: Optional[str] = None,
    ):
        return cls(
            filename=filename,
            status=UploadStatus.FAILED,
            handle=handle,
            bytes_transferred=bytes_transferred,
            total_size=total_size,
            error=error,
            error_kind=error_kind,
        )


@dataclass(frozen=True)
class Chunk:
    """
    One segment of the source.

    ``data`` is a view over the sequencer's reusable buffer and stays valid
    only until the next chunk is requested.
    """
    offset: int
    data: memoryview
    is_final: bool = False

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def end(self) -> int:
        return self.offset + len(self.data)


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration for upload operations."""
    base_url: Optional[str] = None
    chunk_size: int = DEFAULT_CHUNK_SIZE
    timeout: float = 60.0
    whole_upload_field: str = "file"  # multipart field for the single-request path

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls, **overrides) -> "UploadConfig":
        """
        Build config from CHUNK_UPLOAD_* environment variables.

        Keyword overrides that are not None win over the environment.
        """
        values = {}

        base_url = os.getenv("CHUNK_UPLOAD_API_URL")
        if base_url:
            values["base_url"] = base_url

        chunk_size = os.getenv("CHUNK_UPLOAD_CHUNK_SIZE")
        if chunk_size:
            try:
                values["chunk_size"] = int(chunk_size)
            except ValueError as exc:
                raise ValueError(f"CHUNK_UPLOAD_CHUNK_SIZE is not an integer: {chunk_size!r}") from exc

        timeout = os.getenv("CHUNK_UPLOAD_TIMEOUT")
        if timeout:
            try:
                values["timeout"] = float(timeout)
            except ValueError as exc:
                raise ValueError(f"CHUNK_UPLOAD_TIMEOUT is not a number: {timeout!r}") from exc

        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)
