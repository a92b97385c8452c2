"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Request and response converters.

A request converter turns a :class:`Request` into a :class:`RawRequest`
(``to_raw``); a response converter turns a :class:`RawResponse` into a
:class:`Response` (``from_raw``). Each converter declares a ``key``; the
builder registers it under that key and a request selects it by setting
``request_converter`` / ``response_converter`` to the same key. A request
that selects nothing gets the identity converters, which are never
registered.

Shipped converters:

- ``JsonRequestConverter`` (``"json"``) and ``JsonResponseConverter`` (``"json"``)
- ``FormRequestConverter`` (``"form"``)
- ``StringResponseConverter`` (``"string"``)
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from types import MappingProxyType
from typing import Dict, Generic, Optional, Protocol, TypeVar, runtime_checkable
from urllib.parse import urlencode

from courier.exceptions import ConverterNotRegisteredError
from courier.models import RawRequest, RawResponse, Request, Response


@runtime_checkable
class RequestConverter(Protocol):
    """Converts a declarative request into its wire form."""

    key: str

    def to_raw(self, request: Request) -> RawRequest:
        ...


@runtime_checkable
class ResponseConverter(Protocol):
    """Converts a raw network response into the caller's result."""

    key: str

    def from_raw(self, raw: RawResponse) -> Response:
        ...


# ---------------------------------------------------------------------------
# Identity converters
# ---------------------------------------------------------------------------

class IdentityRequestConverter:
    """Hands the request body to the executor as-is."""

    key = "identity"

    def to_raw(self, request: Request) -> RawRequest:
        return RawRequest(request, request.body)


class IdentityResponseConverter:
    """Returns the raw body bytes as the converted body."""

    key = "identity"

    def from_raw(self, raw: RawResponse) -> Response:
        return Response(raw.request, raw, raw.body)


IDENTITY_REQUEST_CONVERTER = IdentityRequestConverter()
IDENTITY_RESPONSE_CONVERTER = IdentityResponseConverter()


# ---------------------------------------------------------------------------
# Request converters
# ---------------------------------------------------------------------------

def _has_header(request: Request, name: str) -> bool:
    return any(key.lower() == name.lower() for key in request.headers)


class JsonRequestConverter:
    """Serializes mapping (and list) bodies to compact JSON.

    ``None`` becomes an empty string and any other body its ``str()``.
    Key order follows the mapping's insertion order.
    """

    key = "json"
    content_type = "application/json"

    def __init__(self, ensure_ascii: bool = False) -> None:
        self._ensure_ascii = ensure_ascii

    def to_raw(self, request: Request) -> RawRequest:
        body = request.body
        if body is None:
            return RawRequest(request, "")

        if isinstance(body, (Mapping, list, tuple)):
            encoded = json.dumps(
                dict(body) if isinstance(body, Mapping) else list(body),
                separators=(",", ":"),
                ensure_ascii=self._ensure_ascii,
            )
            if not _has_header(request, "Content-Type"):
                request = request.with_headers({"Content-Type": self.content_type})
            return RawRequest(request, encoded)

        return RawRequest(request, str(body))


class FormRequestConverter:
    """Encodes mapping bodies as ``application/x-www-form-urlencoded``."""

    key = "form"
    content_type = "application/x-www-form-urlencoded"

    def to_raw(self, request: Request) -> RawRequest:
        body = request.body
        if body is None:
            return RawRequest(request, "")

        if isinstance(body, Mapping):
            if not _has_header(request, "Content-Type"):
                request = request.with_headers({"Content-Type": self.content_type})
            return RawRequest(request, urlencode(body, doseq=True))

        return RawRequest(request, str(body))


# ---------------------------------------------------------------------------
# Response converters
# ---------------------------------------------------------------------------

class JsonResponseConverter:
    """Decodes the body as UTF-8 JSON; an empty body converts to ``None``.

    Malformed JSON raises ``json.JSONDecodeError`` unchanged.
    """

    key = "json"

    def from_raw(self, raw: RawResponse) -> Response:
        decoded = None
        if raw.body:
            decoded = json.loads(raw.body.decode("utf-8"))
        return Response(raw.request, raw, decoded)


class StringResponseConverter:
    """Decodes the body as text using the response charset (UTF-8 default)."""

    key = "string"

    def __init__(self, default_encoding: str = "utf-8") -> None:
        self._default_encoding = default_encoding

    def from_raw(self, raw: RawResponse) -> Response:
        text = None
        if raw.body:
            text = raw.body.decode(raw.charset or self._default_encoding)
        return Response(raw.request, raw, text)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

C = TypeVar("C")


class ConverterRegistry(Generic[C]):
    """Key to converter lookup with an identity fallback.

    Args:
        kind: ``"request"`` or ``"response"``; used in error messages.
        identity: Converter returned when no key is given.
    """

    def __init__(self, kind: str, identity: C) -> None:
        self._kind = kind
        self._identity = identity
        self._converters: Dict[str, C] = {}
        self._frozen = False

    def register(self, converter: C) -> None:
        """Register ``converter`` under its own key; later wins."""
        if self._frozen:
            raise RuntimeError(f"{self._kind} converter registry is frozen")
        key = getattr(converter, "key", None)
        if not isinstance(key, str) or not key:
            raise TypeError(
                f"{type(converter).__name__} must declare a non-empty string 'key'"
            )
        self._converters[key] = converter

    def freeze(self) -> ConverterRegistry[C]:
        self._converters = MappingProxyType(dict(self._converters))  # type: ignore[assignment]
        self._frozen = True
        return self

    def resolve(self, key: Optional[str]) -> C:
        """Return the converter for ``key``.

        Raises:
            ConverterNotRegisteredError: ``key`` was never registered.
        """
        if key is None:
            return self._identity
        try:
            return self._converters[key]
        except KeyError:
            raise ConverterNotRegisteredError(self._kind, key) from None

    def keys(self):
        return self._converters.keys()

    def __contains__(self, key: object) -> bool:
        return key in self._converters

    def __len__(self) -> int:
        return len(self._converters)
