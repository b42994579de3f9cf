"""Services for chunk_uploader module."""
from .api_client import HTTPTransport
from .chunker import ChunkSequencer
from .source import UploadSource

__all__ = [
    "HTTPTransport",
    "ChunkSequencer",
    "UploadSource",
]
