"""
chunk_uploader - Chunked file uploads over a begin/chunk/end handshake.

Usage:
    from chunk_uploader import UploadOrchestrator, UploadConfig, CancellationToken

    token = CancellationToken()
    config = UploadConfig(base_url="https://files.example.com")

    # Chunked upload (512 KiB per request by default)
    async with UploadOrchestrator(config) as uploader:
        outcome = await uploader.upload_chunked(path, progress_callback, token)

    # Whole file in one request (small files only)
    outcome = await uploader.upload_whole(path)

    if outcome.was_cancelled:
        ...
    elif not outcome.success:
        print(outcome.error_kind, outcome.error)
"""
from .orchestrator import UploadOrchestrator, SessionState, TransferSession
from .models import Chunk, UploadConfig, UploadOutcome, UploadStatus, DEFAULT_CHUNK_SIZE
from .exceptions import (
    HandshakeError,
    SessionStateError,
    SourceReadError,
    TransportError,
    UploadError,
)
from .services import ChunkSequencer, HTTPTransport, UploadSource
from .utils import CancellationToken, TransferProgress, fraction

__version__ = "0.1.0"
__all__ = [
    # Main
    "UploadOrchestrator",
    "SessionState",
    "TransferSession",
    # Models
    "Chunk",
    "UploadConfig",
    "UploadOutcome",
    "UploadStatus",
    "DEFAULT_CHUNK_SIZE",
    # Errors
    "UploadError",
    "HandshakeError",
    "TransportError",
    "SourceReadError",
    "SessionStateError",
    # Services
    "ChunkSequencer",
    "HTTPTransport",
    "UploadSource",
    # Utils
    "CancellationToken",
    "TransferProgress",
    "fraction",
]
