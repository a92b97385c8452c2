"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Request and response envelope types.

A call moves through four representations:

- ``Request``: what the caller asked for (method, url, headers, body,
  converter selectors).
- ``RawRequest``: the request after its body went through a request
  converter; this is what middlewares and executors see.
- ``RawResponse``: what the executor got back from the network.
- ``Response``: the raw response plus the body produced by the selected
  response converter.

All four are frozen dataclasses. Middlewares rewrite them by returning
replacements (``with_headers`` / ``with_body``), never by mutation.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional

ProgressCallback = Callable[[int, int], None]
"""``callback(bytes_so_far, total_bytes)``; ``total_bytes`` is 0 when unknown."""


class Method(str, Enum):
    """HTTP methods supported by the pipeline."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"

    @property
    def allows_body(self) -> bool:
        return self not in (Method.GET, Method.HEAD)


@dataclass(frozen=True)
class FilePart:
    """A single file inside a multipart body."""

    name: str
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


@dataclass(frozen=True)
class MultipartBody:
    """Multipart/form-data payload.

    Bodies of this type skip request conversion and are encoded by the
    executor itself. ``on_progress`` is called while the encoded body is
    uploaded.
    """

    fields: Mapping[str, str] = field(default_factory=dict)
    files: List[FilePart] = field(default_factory=list)
    on_progress: Optional[ProgressCallback] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", dict(self.fields))
        object.__setattr__(self, "files", list(self.files))


@dataclass(frozen=True)
class Request:
    """Declarative description of a single HTTP call.

    Args:
        method: HTTP method.
        url: Absolute URL (see :class:`courier.url_builder.UrlBuilder`).
        headers: Request headers; copied at construction.
        body: Opaque payload handed to the request converter, or a
            :class:`MultipartBody`.
        encoding: Text encoding the executor uses for ``str`` bodies.
        request_converter: Key of the request converter to apply, ``None``
            for the identity converter.
        response_converter: Key of the response converter to apply, ``None``
            for the identity converter.
        on_upload_progress: Upload progress callback.
        on_download_progress: Download progress callback.
        upload_chunk_size: Chunk size used to report upload progress.
    """

    method: Method
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    encoding: Optional[str] = None
    request_converter: Optional[str] = None
    response_converter: Optional[str] = None
    on_upload_progress: Optional[ProgressCallback] = None
    on_download_progress: Optional[ProgressCallback] = None
    upload_chunk_size: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", Method(self.method))
        object.__setattr__(self, "headers", dict(self.headers or {}))

    @property
    def is_multipart(self) -> bool:
        return isinstance(self.body, MultipartBody)

    def with_headers(self, headers: Mapping[str, str]) -> Request:
        """Return a copy with ``headers`` merged over the current ones."""
        return dataclasses.replace(self, headers={**self.headers, **headers})


@dataclass(frozen=True)
class RawRequest:
    """A request whose body has been converted to its wire form."""

    request: Request
    body: Any = None

    @property
    def headers(self) -> Dict[str, str]:
        return self.request.headers

    def with_headers(self, headers: Mapping[str, str]) -> RawRequest:
        """Return a copy whose request carries ``headers`` merged in."""
        return dataclasses.replace(self, request=self.request.with_headers(headers))

    def with_body(self, body: Any) -> RawRequest:
        return dataclasses.replace(self, body=body)


@dataclass(frozen=True)
class RawResponse:
    """Unconverted result of a completed network call.

    Executors that fail to obtain a response raise
    :class:`courier.exceptions.TransportError` instead of returning one of
    these, so ``status_code`` is always set. A successful response without
    a payload carries ``body == b""``.
    """

    request: Request
    status_code: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)
    content_length: Optional[int] = None
    is_redirect: bool = False
    persistent_connection: bool = True
    reason_phrase: Optional[str] = None

    def __post_init__(self) -> None:
        body = b"" if self.body is None else self.body
        if not isinstance(body, (bytes, bytearray, memoryview)):
            raise TypeError(f"RawResponse.body must be bytes, got {type(body).__name__}")
        object.__setattr__(self, "body", bytes(body))
        object.__setattr__(self, "headers", dict(self.headers or {}))

    @property
    def charset(self) -> Optional[str]:
        """Charset declared in the Content-Type header, if any."""
        for name, value in self.headers.items():
            if name.lower() != "content-type":
                continue
            for param in value.split(";")[1:]:
                key, _, charset = param.strip().partition("=")
                if key.lower() == "charset" and charset:
                    return charset.strip('"')
        return None

    def with_body(self, body: bytes) -> RawResponse:
        """Return a copy carrying ``body``; text must be encoded first."""
        return dataclasses.replace(self, body=body)


@dataclass(frozen=True)
class Response:
    """Final result of :meth:`courier.client.CourierClient.execute`."""

    request: Request
    raw: RawResponse
    body: Any = None

    @property
    def status_code(self) -> int:
        return self.raw.status_code

    @property
    def headers(self) -> Dict[str, str]:
        return self.raw.headers

    @property
    def is_success(self) -> bool:
        return 200 <= self.raw.status_code < 300
