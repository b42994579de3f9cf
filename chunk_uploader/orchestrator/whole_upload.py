"""Single-request upload handler."""
import asyncio
import logging

from ..exceptions import TransportError, UploadError
from ..models import UploadOutcome
from ..services.source import UploadSource
from .chunked_upload import notify_progress

logger = logging.getLogger(__name__)


class WholeFileUploadHandler:
    """
    Uploads a file in one request.

    The whole payload is held in memory, so this only suits small files:
    large ones hit the endpoint's request-size or timeout limits and fail
    outright. Cancellation is honoured only before the request goes out.
    """

    def __init__(self, transport):
        self._transport = transport

    async def upload(
        self,
        source: UploadSource,
        progress_callback=None,
        cancel_token=None,
    ) -> UploadOutcome:
        total = source.total_size

        try:
            if cancel_token is not None and cancel_token.cancelled:
                logger.info(f"[whole] Cancelled {source.name} before sending")
                return UploadOutcome.cancelled(source.name, 0, total)

            await notify_progress(progress_callback, 0, total)
            data = await asyncio.to_thread(source.read_all)
            acknowledged = await self._transport.upload_whole(source.name, data)

            if not acknowledged:
                logger.error(f"[whole] Upload of {source.name} was not acknowledged")
                return UploadOutcome.fail(
                    source.name,
                    "upload was not acknowledged",
                    error_kind=TransportError.__name__,
                    total_size=total,
                )

            await notify_progress(progress_callback, total, total)
            logger.info(f"[whole] Completed {source.name} ({total} bytes)")
            return UploadOutcome.completed(source.name, total)

        except UploadError as e:
            logger.error(f"[whole] {source.name} failed ({type(e).__name__}): {e}")
            return UploadOutcome.fail(
                source.name, str(e), error_kind=type(e).__name__, total_size=total
            )
        except Exception as e:
            logger.exception(f"[whole] {source.name} failed unexpectedly")
            return UploadOutcome.fail(
                source.name, str(e) or repr(e), error_kind=type(e).__name__, total_size=total
            )
        finally:
            source.close()
