"""Tests for the single-request upload handler."""
import io
from unittest.mock import AsyncMock

import pytest

from chunk_uploader.exceptions import TransportError
from chunk_uploader.models import UploadStatus
from chunk_uploader.orchestrator.whole_upload import WholeFileUploadHandler
from chunk_uploader.services.source import UploadSource
from chunk_uploader.utils.cancellation import CancellationToken


def _build_handler():
    transport = AsyncMock()
    transport.upload_whole.return_value = True
    return WholeFileUploadHandler(transport), transport


@pytest.mark.asyncio
async def test_upload_whole_success():
    handler, transport = _build_handler()
    source = UploadSource.from_bytes(b"payload", "note.txt")
    calls = []

    outcome = await handler.upload(source, lambda done, total: calls.append((done, total)))

    assert outcome.status == UploadStatus.COMPLETED
    assert outcome.bytes_transferred == 7
    transport.upload_whole.assert_awaited_once_with("note.txt", b"payload")
    assert calls == [(0, 7), (7, 7)]
    assert source.closed is True


@pytest.mark.asyncio
async def test_upload_whole_rejected():
    handler, transport = _build_handler()
    transport.upload_whole.return_value = False
    source = UploadSource.from_bytes(b"payload", "note.txt")
    calls = []

    outcome = await handler.upload(source, lambda done, total: calls.append((done, total)))

    assert outcome.status == UploadStatus.FAILED
    assert outcome.error_kind == "TransportError"
    assert outcome.bytes_transferred == 0
    assert calls == [(0, 7)]
    assert source.closed is True


@pytest.mark.asyncio
async def test_upload_whole_cancelled_before_request():
    handler, transport = _build_handler()
    token = CancellationToken()
    token.cancel()
    source = UploadSource.from_bytes(b"payload", "note.txt")

    outcome = await handler.upload(source, cancel_token=token)

    assert outcome.status == UploadStatus.CANCELLED
    transport.upload_whole.assert_not_awaited()
    assert source.closed is True


@pytest.mark.asyncio
async def test_upload_whole_transport_error():
    handler, transport = _build_handler()
    transport.upload_whole.side_effect = TransportError("API error 413")
    source = UploadSource.from_bytes(b"payload", "note.txt")

    outcome = await handler.upload(source)

    assert outcome.status == UploadStatus.FAILED
    assert outcome.error_kind == "TransportError"
    assert "413" in outcome.error
    assert source.closed is True


@pytest.mark.asyncio
async def test_upload_whole_source_longer_than_declared():
    handler, transport = _build_handler()
    source = UploadSource(io.BytesIO(b"0123456789EXTRA"), "grown.bin", total_size=10)

    outcome = await handler.upload(source)

    assert outcome.status == UploadStatus.FAILED
    assert outcome.error_kind == "SourceReadError"
    assert "longer than" in outcome.error
    transport.upload_whole.assert_not_awaited()
    assert source.closed is True
