"""Orchestrator data models."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..exceptions import HandshakeError, SessionStateError


class SessionState(Enum):
    """Lifecycle of one transfer session."""
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (SessionState.COMPLETED, SessionState.CANCELLED, SessionState.FAILED)


_ALLOWED = {
    SessionState.NOT_STARTED: {SessionState.IN_PROGRESS, SessionState.FAILED},
    SessionState.IN_PROGRESS: {
        SessionState.COMPLETED,
        SessionState.CANCELLED,
        SessionState.FAILED,
    },
}


@dataclass
class TransferSession:
    """State of one in-flight chunked upload."""
    filename: str
    total_size: int
    handle: Optional[str] = None
    bytes_transferred: int = 0
    cancel_requested: bool = False
    state: SessionState = field(default=SessionState.NOT_STARTED)

    def __post_init__(self):
        if self.total_size < 0:
            raise ValueError(f"total_size must be >= 0, got {self.total_size}")

    def _move(self, target: SessionState) -> None:
        if target not in _ALLOWED.get(self.state, set()):
            raise SessionStateError(
                f"{self.filename}: illegal transition {self.state.name} -> {target.name}"
            )
        self.state = target

    def start(self, handle: str) -> None:
        """Enter IN_PROGRESS with the handle issued by the begin handshake."""
        if not handle:
            raise HandshakeError(f"{self.filename}: begin returned an empty handle")
        self._move(SessionState.IN_PROGRESS)
        self.handle = handle

    def record(self, size: int) -> int:
        """Count ``size`` more bytes as sent and return the new total."""
        if self.state is not SessionState.IN_PROGRESS:
            raise SessionStateError(f"{self.filename}: cannot record bytes in state {self.state.name}")
        if size < 0:
            raise SessionStateError(f"{self.filename}: negative chunk size {size}")
        if self.bytes_transferred + size > self.total_size:
            raise SessionStateError(
                f"{self.filename}: {self.bytes_transferred + size} bytes exceeds total {self.total_size}"
            )
        self.bytes_transferred += size
        return self.bytes_transferred

    def request_cancel(self) -> None:
        self.cancel_requested = True

    def complete(self) -> None:
        if self.bytes_transferred != self.total_size:
            raise SessionStateError(
                f"{self.filename}: completed with {self.bytes_transferred}/{self.total_size} bytes"
            )
        self._move(SessionState.COMPLETED)

    def cancel(self) -> None:
        self._move(SessionState.CANCELLED)

    def fail(self) -> None:
        """Mark failed; a session already in a terminal state is left alone."""
        if self.state.terminal:
            return
        self._move(SessionState.FAILED)
