"""HTTP adapter for the chunked upload endpoint."""
from __future__ import annotations

import base64
import logging
from typing import Any, Dict, Optional

import httpx

from ..exceptions import HandshakeError, TransportError

logger = logging.getLogger(__name__)

BEGIN_ENDPOINT = "/UploadFile/BeginFileUpload"
CHUNK_ENDPOINT = "/UploadFile/UploadChunk"
END_ENDPOINT = "/UploadFile/EndFileUpload"
WHOLE_ENDPOINT = "/UploadFile"


def _error_detail(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def build_chunk_payload(handle: str, data: bytes, offset: int) -> Dict[str, str]:
    """JSON body for one chunk: base64 data and the offset as a string."""
    return {
        "FileHandle": handle,
        "Data": base64.b64encode(data).decode("ascii"),
        "StartAt": str(offset),
    }


def parse_handle(response: httpx.Response) -> str:
    """Begin returns the handle either as a JSON string or as plain text."""
    try:
        value = response.json()
    except ValueError:
        value = response.text
    if not isinstance(value, str):
        value = "" if value is None else str(value)
    return value.strip()


def parse_acknowledgement(response: httpx.Response) -> bool:
    """A JSON boolean body is the answer; any other successful body means True."""
    if response.status_code >= 400:
        return False
    try:
        value = response.json()
    except ValueError:
        return True
    if isinstance(value, bool):
        return value
    return True


class HTTPTransport:
    """
    HTTP transport for the begin/chunk/end handshake.

    Implements ITransport protocol. No request is retried: any failure is
    surfaced to the orchestrator as HandshakeError or TransportError.

    Usage:
        async with HTTPTransport("https://files.example.com") as transport:
            handle = await transport.begin("video.mp4")
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60,
        upload_field: str = "file",
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._base_url = base_url
        self._timeout = timeout
        self._upload_field = upload_field
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self):
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
            self._owns_client = True
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self) -> None:
        if self._client and self._owns_client:
            await self._client.aclose()
            self._client = None

    def _require_client(self) -> httpx.AsyncClient:
        if not self._client:
            raise RuntimeError("HTTPTransport not initialized. Use 'async with' context.")
        return self._client

    async def begin(self, file_name: str) -> str:
        client = self._require_client()
        try:
            response = await client.get(BEGIN_ENDPOINT, params={"fileName": file_name})
        except httpx.HTTPError as exc:
            raise HandshakeError(f"begin failed for {file_name}: {exc}") from exc

        if response.status_code >= 400:
            raise HandshakeError(
                f"API error {response.status_code} on GET {BEGIN_ENDPOINT}: {_error_detail(response)}"
            )

        handle = parse_handle(response)
        if not handle:
            raise HandshakeError(f"begin for {file_name} returned an empty handle")

        logger.debug("[transport] Began %s -> handle=%s", file_name, handle)
        return handle

    async def send_chunk(self, handle: str, data: bytes, offset: int) -> None:
        client = self._require_client()
        try:
            response = await client.post(
                CHUNK_ENDPOINT, json=build_chunk_payload(handle, data, offset)
            )
        except httpx.HTTPError as exc:
            raise TransportError(f"chunk at offset {offset} failed: {exc}") from exc

        if response.status_code >= 400:
            raise TransportError(
                f"API error {response.status_code} on POST {CHUNK_ENDPOINT} "
                f"(offset {offset}): {_error_detail(response)}"
            )

    async def end(self, handle: str, total_size: int, cancelled: bool) -> bool:
        client = self._require_client()
        params = {
            "fileHandle": handle,
            "quitUpload": "true" if cancelled else "false",
            "fileSize": str(total_size),
        }
        try:
            response = await client.get(END_ENDPOINT, params=params)
        except httpx.HTTPError as exc:
            raise HandshakeError(f"end failed for handle {handle}: {exc}") from exc

        acknowledged = parse_acknowledgement(response)
        if not acknowledged:
            logger.warning(
                "[transport] End rejected for handle=%s (status %s)", handle, response.status_code
            )
        return acknowledged

    async def upload_whole(self, name: str, data: bytes) -> bool:
        client = self._require_client()
        files = {self._upload_field: (name, data, "application/octet-stream")}
        try:
            response = await client.post(WHOLE_ENDPOINT, files=files)
        except httpx.HTTPError as exc:
            raise TransportError(f"whole-file upload of {name} failed: {exc}") from exc

        if response.status_code >= 400:
            logger.warning(
                "[transport] Whole-file upload of %s rejected: %s %s",
                name,
                response.status_code,
                _error_detail(response),
            )
            return False
        return True
