"""Chunked upload handler: begin, sequential chunks, end."""
import inspect
import logging
from contextlib import aclosing
from typing import Optional

from ..exceptions import HandshakeError, UploadError
from ..models import UploadConfig, UploadOutcome
from ..protocols import ICancellationSignal, IProgressSink, ITransport
from ..services.chunker import ChunkSequencer
from ..services.source import UploadSource
from .models import TransferSession

logger = logging.getLogger(__name__)


async def notify_progress(progress_callback, bytes_transferred: int, total_size: int) -> None:
    """Call a sync or async progress sink."""
    if progress_callback is None:
        return
    result = progress_callback(bytes_transferred, total_size)
    if inspect.isawaitable(result):
        await result


def _observe_cancel(session: TransferSession, cancel_token) -> bool:
    if cancel_token is not None and cancel_token.cancelled:
        session.request_cancel()
    return session.cancel_requested


class ChunkedUploadHandler:
    """
    Drives one chunked upload over an injected transport.

    Chunks are sent strictly in order, one request at a time. Cancellation is
    polled after each chunk, so the in-flight request always completes. A
    failed chunk aborts the upload without calling end.
    """

    def __init__(self, transport: ITransport, config: Optional[UploadConfig] = None):
        self._transport = transport
        self._config = config or UploadConfig()

    async def upload(
        self,
        source: UploadSource,
        progress_callback: Optional[IProgressSink] = None,
        cancel_token: Optional[ICancellationSignal] = None,
    ) -> UploadOutcome:
        session = TransferSession(filename=source.name, total_size=source.total_size)

        try:
            return await self._run(session, source, progress_callback, cancel_token)
        except UploadError as e:
            session.fail()
            logger.error(f"[chunked] {source.name} failed ({type(e).__name__}): {e}")
            return self._failed(session, e)
        except Exception as e:
            session.fail()
            logger.exception(f"[chunked] {source.name} failed unexpectedly")
            return self._failed(session, e)
        finally:
            source.close()

    async def _run(
        self,
        session: TransferSession,
        source: UploadSource,
        progress_callback,
        cancel_token,
    ) -> UploadOutcome:
        handle = await self._transport.begin(source.name)
        session.start(handle)
        logger.info(
            f"[chunked] Started {source.name}: handle={handle}, size={session.total_size}, "
            f"chunk_size={self._config.chunk_size}"
        )

        cancelled = _observe_cancel(session, cancel_token)
        if not cancelled:
            sequencer = ChunkSequencer(source, self._config.chunk_size)
            async with aclosing(aiter(sequencer)) as chunks:
                async for chunk in chunks:
                    await self._transport.send_chunk(handle, chunk.data, chunk.offset)
                    sent = session.record(chunk.size)
                    logger.debug(
                        f"[chunked] Sent {chunk.size} bytes at offset {chunk.offset} "
                        f"({sent}/{session.total_size})"
                    )
                    await notify_progress(progress_callback, sent, session.total_size)

                    if _observe_cancel(session, cancel_token):
                        cancelled = True
                        break

        acknowledged = await self._transport.end(handle, session.total_size, cancelled)

        if cancelled:
            session.cancel()
            logger.info(
                f"[chunked] Cancelled {source.name} after {session.bytes_transferred} bytes"
            )
            return UploadOutcome.cancelled(
                filename=source.name,
                bytes_transferred=session.bytes_transferred,
                total_size=session.total_size,
                handle=handle,
            )

        if not acknowledged:
            session.fail()
            logger.error(f"[chunked] End handshake for {source.name} was not acknowledged")
            return UploadOutcome.fail(
                filename=source.name,
                error="end handshake was not acknowledged",
                error_kind=HandshakeError.__name__,
                bytes_transferred=session.bytes_transferred,
                total_size=session.total_size,
                handle=handle,
            )

        session.complete()
        logger.info(f"[chunked] Completed {source.name} ({session.total_size} bytes)")
        return UploadOutcome.completed(source.name, session.total_size, handle=handle)

    @staticmethod
    def _failed(session: TransferSession, error: Exception) -> UploadOutcome:
        message = str(error).strip() or repr(error)
        return UploadOutcome.fail(
            filename=session.filename,
            error=message,
            error_kind=type(error).__name__,
            bytes_transferred=session.bytes_transferred,
            total_size=session.total_size,
            handle=session.handle,
        )
