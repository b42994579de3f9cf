"""
Protocols (Interfaces) for Dependency Inversion.

The orchestrator only depends on these; concrete transports and progress
renderers are injected.
"""
from typing import Awaitable, Optional, Protocol, runtime_checkable


@runtime_checkable
class ITransport(Protocol):
    """Interface for the remote upload endpoint."""

    async def begin(self, file_name: str) -> str:
        """Open an upload and return the server-issued handle."""
        ...

    async def send_chunk(self, handle: str, data: bytes, offset: int) -> None:
        """Append one chunk at ``offset``; ``data`` is only valid during the call."""
        ...

    async def end(self, handle: str, total_size: int, cancelled: bool) -> bool:
        """Close the upload; True when the server acknowledged success."""
        ...

    async def upload_whole(self, name: str, data: bytes) -> bool:
        """Send an entire file in a single request."""
        ...


@runtime_checkable
class IProgressSink(Protocol):
    """Receives (bytes_transferred, total_size) after each chunk."""

    def __call__(self, bytes_transferred: int, total_size: int) -> Optional[Awaitable[None]]:
        ...


@runtime_checkable
class ICancellationSignal(Protocol):
    """Readable cancellation flag."""

    @property
    def cancelled(self) -> bool:
        ...

