"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Middlewares shipped with Courier.
"""

from courier.middlewares.headers import BearerTokenMiddleware, HeadersMiddleware
from courier.middlewares.loggers import LogPart, RequestLogger, ResponseLogger

__all__ = [
    "BearerTokenMiddleware",
    "HeadersMiddleware",
    "LogPart",
    "RequestLogger",
    "ResponseLogger",
]
