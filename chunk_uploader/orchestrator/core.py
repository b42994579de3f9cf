"""Core orchestrator - coordinates chunked and whole-file uploads."""
import logging
from pathlib import Path
from typing import Optional, Union

from ..exceptions import SourceReadError
from ..models import UploadConfig, UploadOutcome
from ..protocols import ITransport
from ..services.api_client import HTTPTransport
from ..services.source import UploadSource

from .chunked_upload import ChunkedUploadHandler
from .whole_upload import WholeFileUploadHandler

logger = logging.getLogger(__name__)

SourceLike = Union[UploadSource, str, Path]


class UploadOrchestrator:
    """
    Orchestrates uploads using an injected transport.

    Usage:
        # HTTP transport built from config
        config = UploadConfig(base_url="https://files.example.com")
        async with UploadOrchestrator(config) as uploader:
            outcome = await uploader.upload_chunked(Path("video.mp4"), on_progress, token)

        # Custom transport
        async with UploadOrchestrator(transport=my_transport) as uploader:
            outcome = await uploader.upload_whole(Path("small.jpg"))
    """

    def __init__(
        self,
        config: Optional[UploadConfig] = None,
        transport: Optional[ITransport] = None,
    ):
        """
        Initialize orchestrator with dependencies.

        Args:
            config: Upload configuration (base_url is required when no transport is given)
            transport: Pre-built transport; the orchestrator does not close it
        """
        self._config = config or UploadConfig()
        self._external_transport = transport

        # Initialized in __aenter__
        self._http_transport: Optional[HTTPTransport] = None
        self._transport: Optional[ITransport] = None
        self._chunked_handler: Optional[ChunkedUploadHandler] = None
        self._whole_handler: Optional[WholeFileUploadHandler] = None

    @property
    def config(self) -> UploadConfig:
        return self._config

    async def __aenter__(self):
        """Initialize transport and handlers."""
        if self._external_transport is not None:
            self._transport = self._external_transport
        elif self._config.base_url:
            self._http_transport = HTTPTransport(
                self._config.base_url,
                timeout=self._config.timeout,
                upload_field=self._config.whole_upload_field,
            )
            await self._http_transport.__aenter__()
            self._transport = self._http_transport
        else:
            raise ValueError("Either transport or config.base_url must be provided")

        self._chunked_handler = ChunkedUploadHandler(self._transport, self._config)
        self._whole_handler = WholeFileUploadHandler(self._transport)
        return self

    async def __aexit__(self, *args):
        """Cleanup resources."""
        if self._http_transport:
            await self._http_transport.__aexit__(*args)
            self._http_transport = None

    async def upload_chunked(
        self,
        source: SourceLike,
        progress_callback=None,
        cancel_token=None,
    ) -> UploadOutcome:
        """Upload in chunks through the begin/chunk/end handshake."""
        assert self._chunked_handler is not None, "use 'async with UploadOrchestrator(...)'"
        try:
            upload_source = _as_source(source)
        except SourceReadError as e:
            return _open_failed(source, e)
        return await self._chunked_handler.upload(upload_source, progress_callback, cancel_token)

    async def upload_whole(
        self,
        source: SourceLike,
        progress_callback=None,
        cancel_token=None,
    ) -> UploadOutcome:
        """Upload the entire file in a single request."""
        assert self._whole_handler is not None, "use 'async with UploadOrchestrator(...)'"
        try:
            upload_source = _as_source(source)
        except SourceReadError as e:
            return _open_failed(source, e)
        return await self._whole_handler.upload(upload_source, progress_callback, cancel_token)


def _as_source(source: SourceLike) -> UploadSource:
    if isinstance(source, UploadSource):
        return source
    return UploadSource.from_path(source)


def _open_failed(source: SourceLike, error: SourceReadError) -> UploadOutcome:
    logger.error(f"[orchestrator] Cannot open {source}: {error}")
    return UploadOutcome.fail(Path(source).name, str(error), error_kind=type(error).__name__)
