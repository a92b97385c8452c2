"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Request executor base class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from courier.models import RawRequest, RawResponse


class RequestExecutor(ABC):
    """Performs the network I/O for a single pipeline call.

    Implementations return a complete :class:`RawResponse` or raise
    :class:`courier.exceptions.TransportError` (or a subclass) when no
    response was obtained. They never return a partially filled response
    to signal failure.
    """

    @abstractmethod
    async def execute(self, raw_request: RawRequest) -> RawResponse:
        """Send ``raw_request`` and return the response."""
        ...

    async def aclose(self) -> None:
        """Release executor resources."""
        return None
