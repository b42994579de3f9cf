"""Local byte source handed to the orchestrator."""
from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union

from ..exceptions import SourceReadError

logger = logging.getLogger(__name__)


class UploadSource:
    """
    A readable binary stream with a display name and a known total size.

    The orchestrator owns the source for the duration of one upload and
    closes it on every exit path. Use as a context manager when driving it
    by hand.
    """

    def __init__(self, stream: BinaryIO, name: str, total_size: Optional[int] = None):
        self._stream = stream
        self.name = name
        self.total_size = total_size if total_size is not None else _measure(stream)
        if self.total_size < 0:
            raise ValueError(f"total_size must be >= 0, got {self.total_size}")

    @classmethod
    def from_path(cls, path: Union[str, Path], name: Optional[str] = None) -> "UploadSource":
        """Open a local file for upload."""
        path = Path(path)
        try:
            stream = open(path, "rb")
            total_size = os.fstat(stream.fileno()).st_size
        except OSError as exc:
            raise SourceReadError(f"cannot open {path}: {exc}") from exc
        return cls(stream, name or path.name, total_size)

    @classmethod
    def from_bytes(cls, data: bytes, name: str) -> "UploadSource":
        """Wrap an in-memory payload."""
        return cls(io.BytesIO(data), name, len(data))

    @property
    def closed(self) -> bool:
        return self._stream.closed

    def readinto(self, buffer) -> int:
        return self._stream.readinto(buffer)

    def read_all(self) -> bytes:
        """Read the remaining stream into memory."""
        try:
            data = self._stream.read()
        except OSError as exc:
            raise SourceReadError(f"read failed for {self.name}: {exc}") from exc
        if len(data) > self.total_size:
            raise SourceReadError(
                f"{self.name} is longer than the expected {self.total_size} bytes"
            )
        if len(data) < self.total_size:
            raise SourceReadError(
                f"{self.name} ended at offset {len(data)}, expected {self.total_size} bytes"
            )
        return data

    def close(self) -> None:
        if not self._stream.closed:
            self._stream.close()
            logger.debug("[source] Closed %s", self.name)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self) -> str:
        return f"UploadSource(name={self.name!r}, total_size={self.total_size})"


def _measure(stream: BinaryIO) -> int:
    """Remaining length of a seekable stream, leaving its position unchanged."""
    try:
        position = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(position)
    except (OSError, ValueError) as exc:
        raise ValueError("total_size is required for non-seekable streams") from exc
    return end - position
