"""Cooperative cancellation token."""
import threading


class CancellationToken:
    """
    Cancellation signal shared between the caller and one upload call.

    The caller sets it (from any thread or a signal handler); the upload only
    reads it between chunks. Setting it more than once has no further effect.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"
