"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Request executors.
"""

from courier.adapters.base import RequestExecutor
from courier.adapters.http import HttpRequestExecutor
from courier.adapters.mock import MockRequestExecutor, MockResponse

__all__ = [
    "RequestExecutor",
    "HttpRequestExecutor",
    "MockRequestExecutor",
    "MockResponse",
]
