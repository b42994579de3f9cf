"""Small helpers shared by the orchestrator and the CLI."""
from .cancellation import CancellationToken
from .progress import TransferProgress, fraction

__all__ = ["CancellationToken", "TransferProgress", "fraction"]
