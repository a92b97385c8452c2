"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Header injection middlewares.

``BearerTokenMiddleware`` is the extension point for authentication: the
token provider may be synchronous or a coroutine function (for example one
that refreshes an OAuth token), and is awaited once per call.
"""

from __future__ import annotations

import inspect
from typing import Awaitable, Callable, Mapping, Union

from courier.middleware import Next
from courier.models import RawRequest

TokenProvider = Callable[[], Union[str, Awaitable[str]]]


class HeadersMiddleware:
    """Adds default headers without overriding ones the request already set."""

    def __init__(self, headers: Mapping[str, str]) -> None:
        self._headers = dict(headers)

    async def process(self, value: RawRequest, next: Next[RawRequest]) -> RawRequest:
        present = {key.lower() for key in value.headers}
        missing = {
            key: header for key, header in self._headers.items()
            if key.lower() not in present
        }
        if missing:
            value = value.with_headers(missing)
        return await next(value)


class BearerTokenMiddleware:
    """Sets ``Authorization: Bearer <token>`` from a token provider."""

    def __init__(self, token_provider: TokenProvider, header: str = "Authorization") -> None:
        self._token_provider = token_provider
        self._header = header

    async def process(self, value: RawRequest, next: Next[RawRequest]) -> RawRequest:
        token = self._token_provider()
        if inspect.isawaitable(token):
            token = await token
        return await next(value.with_headers({self._header: f"Bearer {token}"}))
