"""
Chunk Sequencer - Single Responsibility: split a source into ordered chunks.

Chunks are views over one reusable buffer, so memory stays bounded by the
chunk size no matter how large the source is.
"""
import asyncio
import logging
from typing import AsyncIterator

from ..exceptions import SourceReadError
from ..models import Chunk, DEFAULT_CHUNK_SIZE
from .source import UploadSource

logger = logging.getLogger(__name__)


class ChunkSequencer:
    """
    Lazy, single-pass sequence of chunks over an UploadSource.

    Usage:
        sequencer = ChunkSequencer(source, chunk_size=512 * 1024)
        async for chunk in sequencer:
            await send(chunk.data, chunk.offset)

    Each yielded ``chunk.data`` is overwritten by the next read; copy it with
    ``bytes(chunk.data)`` if it must outlive the iteration step.
    """

    def __init__(self, source: UploadSource, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self._source = source
        self._chunk_size = chunk_size
        self._consumed = False

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def total_size(self) -> int:
        return self._source.total_size

    def __aiter__(self) -> AsyncIterator[Chunk]:
        if self._consumed:
            raise RuntimeError("ChunkSequencer is single-pass and was already iterated")
        self._consumed = True
        return self._chunks()

    async def _chunks(self) -> AsyncIterator[Chunk]:
        total = self.total_size
        if total == 0:
            await self._ensure_exhausted()
            return

        buffer = bytearray(min(self._chunk_size, total))
        view = memoryview(buffer)
        offset = 0

        while offset < total:
            wanted = min(self._chunk_size, total - offset)
            filled = await self._fill(view[:wanted], offset)
            offset_end = offset + filled
            is_final = offset_end >= total
            if is_final:
                await self._ensure_exhausted()
            yield Chunk(offset=offset, data=view[:filled], is_final=is_final)
            offset = offset_end

    async def _fill(self, target: memoryview, offset: int) -> int:
        """Read until ``target`` is full; a short stream is a read failure."""
        filled = 0
        while filled < len(target):
            try:
                read = await asyncio.to_thread(self._source.readinto, target[filled:])
            except OSError as exc:
                raise SourceReadError(
                    f"read failed for {self._source.name} at offset {offset + filled}: {exc}"
                ) from exc
            if not read:
                raise SourceReadError(
                    f"{self._source.name} ended at offset {offset + filled}, "
                    f"expected {self.total_size} bytes"
                )
            filled += read
        logger.debug("[chunker] Read %d bytes at offset %d", filled, offset)
        return filled

    async def _ensure_exhausted(self) -> None:
        """A stream longer than its declared size is a read failure."""
        spare = bytearray(1)
        try:
            extra = await asyncio.to_thread(self._source.readinto, spare)
        except OSError as exc:
            raise SourceReadError(
                f"read failed for {self._source.name} at offset {self.total_size}: {exc}"
            ) from exc
        if extra:
            raise SourceReadError(
                f"{self._source.name} is longer than the expected {self.total_size} bytes"
            )
