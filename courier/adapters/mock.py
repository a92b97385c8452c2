"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Mock request executor for local testing.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Tuple, Union

from courier.adapters.base import RequestExecutor
from courier.exceptions import ExecutorTimeoutError
from courier.models import Method, RawRequest, RawResponse


class MockResponse:
    """Canned response template; bound to the calling request on use."""

    def __init__(
        self,
        status_code: int = 200,
        body: bytes = b"",
        headers: Optional[Dict[str, str]] = None,
        reason_phrase: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        self.body = body
        self.headers = dict(headers or {})
        self.reason_phrase = reason_phrase

    def bind(self, raw_request: RawRequest) -> RawResponse:
        return RawResponse(
            request=raw_request.request,
            status_code=self.status_code,
            body=self.body,
            headers=self.headers,
            content_length=len(self.body),
            reason_phrase=self.reason_phrase,
        )


MockResult = Union[MockResponse, BaseException]


class MockRequestExecutor(RequestExecutor):
    """In-memory executor for unit tests.

    Args:
        responses: Mapping from ``(method, url)`` tuples to a
            :class:`MockResponse`, or to an exception instance that is
            raised as is (its attributes, ``url`` included, are left untouched).
        delay: Seconds to sleep before answering.
        timeout: When set and ``delay`` exceeds it, the call fails with
            :class:`ExecutorTimeoutError` the way a real executor would.

    Example::

        executor = MockRequestExecutor({
            ("GET", "https://api.example.com/users/1"): MockResponse(
                200, b'{"id":1,"name":"Joe"}'
            ),
        })
    """

    def __init__(
        self,
        responses: Optional[Dict[Tuple[str, str], MockResult]] = None,
        delay: float = 0.0,
        timeout: Optional[float] = None,
    ) -> None:
        self._responses: Dict[Tuple[str, str], MockResult] = {
            (Method(method).value, url): result
            for (method, url), result in (responses or {}).items()
        }
        self._delay = delay
        self._timeout = timeout
        self._sent: List[RawRequest] = []

    def add_response(self, method: str, url: str, result: MockResult) -> None:
        self._responses[(Method(method).value, url)] = result

    async def execute(self, raw_request: RawRequest) -> RawResponse:
        self._sent.append(raw_request)
        request = raw_request.request

        if self._delay:
            if self._timeout is not None and self._delay > self._timeout:
                await asyncio.sleep(self._timeout)
                raise ExecutorTimeoutError(self._timeout, url=request.url)
            await asyncio.sleep(self._delay)

        result = self._responses.get((request.method.value, request.url))
        if result is None:
            return MockResponse(404, b'{"error":"not mocked"}').bind(raw_request)
        if isinstance(result, BaseException):
            # Shared across calls: raise unchanged, with a fresh traceback.
            raise result.with_traceback(None)
        return result.bind(raw_request)

    @property
    def sent_requests(self) -> List[RawRequest]:
        """All requests that have been sent through this executor."""
        return list(self._sent)

    @property
    def call_count(self) -> int:
        return len(self._sent)
