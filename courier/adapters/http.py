"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

HTTP request executor (default).
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from typing import TYPE_CHECKING, AsyncIterator, Dict, Optional
from urllib.parse import urlencode

import httpx

from courier.adapters.base import RequestExecutor
from courier.exceptions import ExecutorTimeoutError, InvalidRequestBodyError, TransportError
from courier.logging_config import get_logger
from courier.models import MultipartBody, ProgressCallback, RawRequest, RawResponse, Request

if TYPE_CHECKING:
    from courier.config.settings import ExecutorConfig

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 300.0
DEFAULT_UPLOAD_CHUNK_SIZE = 64 * 1024


async def _progress_stream(
    payload: bytes, chunk_size: int, on_progress: ProgressCallback
) -> AsyncIterator[bytes]:
    total = len(payload)
    sent = 0
    for start in range(0, total, chunk_size):
        chunk = payload[start:start + chunk_size]
        sent += len(chunk)
        on_progress(sent, total)
        yield chunk


def _parse_content_length(headers: httpx.Headers) -> Optional[int]:
    value = headers.get("Content-Length")
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


class HttpRequestExecutor(RequestExecutor):
    """Default executor using ``httpx.AsyncClient``.

    Every call is bounded by a wall-clock ``timeout``; when it elapses the
    call fails with :class:`ExecutorTimeoutError`. Any other httpx failure
    is raised as :class:`TransportError`. HTTP error statuses are not
    failures here: a 404 is a normal :class:`RawResponse`.

    Args:
        client: Optional preconfigured ``httpx.AsyncClient``. When omitted
            the executor creates (and later closes) its own.
        timeout: Wall-clock limit for one call, in seconds.
        upload_chunk_size: Chunk size used when a request reports upload
            progress and does not set its own ``upload_chunk_size``.
        follow_redirects: Passed to the client the executor creates.
        verify: TLS verification setting for the client the executor creates.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        upload_chunk_size: int = DEFAULT_UPLOAD_CHUNK_SIZE,
        follow_redirects: bool = False,
        verify: bool = True,
    ) -> None:
        if timeout <= 0:
            raise ValueError("timeout must be positive")
        if upload_chunk_size <= 0:
            raise ValueError("upload_chunk_size must be positive")
        self._client = client
        self._owns_client = client is None
        self._timeout = float(timeout)
        self._upload_chunk_size = upload_chunk_size
        self._follow_redirects = follow_redirects
        self._verify = verify

    @classmethod
    def from_config(cls, config: ExecutorConfig) -> HttpRequestExecutor:
        return cls(
            timeout=config.timeout_seconds,
            upload_chunk_size=config.upload_chunk_size,
            follow_redirects=config.follow_redirects,
            verify=config.verify_tls,
        )

    @property
    def timeout(self) -> float:
        return self._timeout

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                follow_redirects=self._follow_redirects,
                verify=self._verify,
            )
        return self._client

    async def execute(self, raw_request: RawRequest) -> RawResponse:
        request = raw_request.request
        start = time.monotonic()
        try:
            raw_response = await asyncio.wait_for(
                self._send(raw_request), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            raise ExecutorTimeoutError(self._timeout, url=request.url) from None
        except httpx.TimeoutException as exc:
            raise ExecutorTimeoutError(self._timeout, url=request.url) from exc
        except httpx.HTTPError as exc:
            raise TransportError(
                f"{request.method.value} {request.url} failed: {str(exc) or type(exc).__name__}",
                url=request.url,
            ) from exc

        logger.debug(
            "http_call_completed",
            method=request.method.value,
            url=request.url,
            status_code=raw_response.status_code,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
        return raw_response

    async def _send(self, raw_request: RawRequest) -> RawResponse:
        client = self._ensure_client()
        request = raw_request.request

        if isinstance(request.body, MultipartBody):
            http_request = self._build_multipart_request(client, request, request.body)
        else:
            http_request = self._build_request(client, raw_request)

        response = await client.send(http_request, stream=True)
        try:
            body = await self._read_body(response, request.on_download_progress)
        finally:
            await response.aclose()

        return RawResponse(
            request=request,
            status_code=response.status_code,
            body=body,
            headers=dict(response.headers.items()),
            content_length=_parse_content_length(response.headers),
            is_redirect=response.is_redirect,
            persistent_connection=response.headers.get("Connection", "").lower() != "close",
            reason_phrase=response.reason_phrase,
        )

    def _build_request(
        self, client: httpx.AsyncClient, raw_request: RawRequest
    ) -> httpx.Request:
        request = raw_request.request
        headers: Dict[str, str] = dict(request.headers)
        payload = None
        if request.method.allows_body:
            payload = self._encode_body(raw_request.body, request, headers)

        if payload is None:
            return client.build_request(request.method.value, request.url, headers=headers)

        if request.on_upload_progress is not None:
            headers["Content-Length"] = str(len(payload))
            return client.build_request(
                request.method.value,
                request.url,
                headers=headers,
                content=_progress_stream(
                    payload,
                    request.upload_chunk_size or self._upload_chunk_size,
                    request.on_upload_progress,
                ),
            )

        return client.build_request(
            request.method.value, request.url, headers=headers, content=payload
        )

    def _build_multipart_request(
        self, client: httpx.AsyncClient, request: Request, body: MultipartBody
    ) -> httpx.Request:
        files = [
            (part.name, (part.filename, part.content, part.content_type))
            for part in body.files
        ]
        encoded = httpx.Request(
            request.method.value, request.url, data=dict(body.fields), files=files or None
        )
        payload = encoded.read()

        headers = {
            key: value
            for key, value in request.headers.items()
            if key.lower() not in ("content-type", "content-length")
        }
        headers["Content-Type"] = encoded.headers["Content-Type"]
        headers["Content-Length"] = str(len(payload))

        on_progress = body.on_progress or request.on_upload_progress
        if on_progress is None:
            return client.build_request(
                request.method.value, request.url, headers=headers, content=payload
            )
        return client.build_request(
            request.method.value,
            request.url,
            headers=headers,
            content=_progress_stream(
                payload, request.upload_chunk_size or self._upload_chunk_size, on_progress
            ),
        )

    @staticmethod
    def _encode_body(body: object, request: Request, headers: Dict[str, str]) -> Optional[bytes]:
        if body is None:
            return None
        if isinstance(body, str):
            return body.encode(request.encoding or "utf-8")
        if isinstance(body, (bytes, bytearray, memoryview)):
            return bytes(body)
        if isinstance(body, Mapping):
            if not any(key.lower() == "content-type" for key in headers):
                headers["Content-Type"] = "application/x-www-form-urlencoded"
            return urlencode(body, doseq=True).encode(request.encoding or "utf-8")
        raise InvalidRequestBodyError(
            f"Invalid request body of type {type(body).__name__}; "
            "expected str, bytes or a mapping of form fields"
        )

    @staticmethod
    async def _read_body(
        response: httpx.Response, on_progress: Optional[ProgressCallback]
    ) -> bytes:
        if on_progress is None:
            return await response.aread()

        # Content-Length counts encoded bytes; aiter_bytes yields decoded ones.
        total = 0
        if response.headers.get("Content-Encoding", "identity").lower() == "identity":
            total = _parse_content_length(response.headers) or 0
        received = 0
        chunks = []
        async for chunk in response.aiter_bytes():
            if not chunk:
                continue
            received += len(chunk)
            on_progress(received, total)
            chunks.append(chunk)
        return b"".join(chunks)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
