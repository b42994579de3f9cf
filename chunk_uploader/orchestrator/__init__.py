"""Orchestrator package - coordinates upload workflows."""
from .core import UploadOrchestrator
from .models import SessionState, TransferSession

__all__ = ["UploadOrchestrator", "SessionState", "TransferSession"]
