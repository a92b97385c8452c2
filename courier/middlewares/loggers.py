"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Request and response logging middlewares.

Both loggers emit one structured event per call through structlog and then
forward the value unchanged. ``log_parts`` selects which parts of the
request or response are included.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, AbstractSet, Dict, Optional

import structlog

from courier.logging_config import get_logger
from courier.middleware import Next
from courier.models import RawRequest, RawResponse

_default_logger = get_logger(__name__)


class LogPart(str, Enum):
    """Parts of a request/response a logger may include."""

    URL = "url"
    HEADERS = "headers"
    BODY = "body"
    CODE = "code"

    @classmethod
    def all(cls) -> frozenset:
        return frozenset(cls)


def describe_body(body: Any) -> str:
    """Render a body for logs: text as-is, bytes as text or a size marker."""
    if body is None:
        return "EMPTY"
    if isinstance(body, (bytes, bytearray)):
        if not body:
            return "EMPTY"
        try:
            return bytes(body).decode("utf-8")
        except UnicodeDecodeError:
            return f"Bytes({len(body)})"
    text = str(body)
    return text if text else "EMPTY"


class RequestLogger:
    """Logs every outgoing raw request at INFO level."""

    def __init__(
        self,
        log_parts: AbstractSet[LogPart] = LogPart.all(),
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ) -> None:
        self.log_parts = frozenset(log_parts)
        self._logger = logger or _default_logger

    async def process(self, value: RawRequest, next: Next[RawRequest]) -> RawRequest:
        request = value.request
        fields: Dict[str, Any] = {}
        if LogPart.URL in self.log_parts:
            fields["method"] = request.method.value
            fields["url"] = request.url
        if LogPart.HEADERS in self.log_parts:
            fields["headers"] = dict(request.headers)
        if LogPart.BODY in self.log_parts:
            fields["body"] = describe_body(value.body)

        self._logger.info("http_request", **fields)
        return await next(value)


class ResponseLogger:
    """Logs every incoming raw response at INFO level."""

    def __init__(
        self,
        log_parts: AbstractSet[LogPart] = LogPart.all(),
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ) -> None:
        self.log_parts = frozenset(log_parts)
        self._logger = logger or _default_logger

    async def process(self, value: RawResponse, next: Next[RawResponse]) -> RawResponse:
        fields: Dict[str, Any] = {}
        if LogPart.URL in self.log_parts:
            fields["method"] = value.request.method.value
            fields["url"] = value.request.url
        if LogPart.CODE in self.log_parts:
            fields["status_code"] = value.status_code
        if LogPart.HEADERS in self.log_parts:
            fields["headers"] = dict(value.headers)
        if LogPart.BODY in self.log_parts:
            fields["body"] = describe_body(value.body)

        self._logger.info("http_response", **fields)
        return await next(value)
