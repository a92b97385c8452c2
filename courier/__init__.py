"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Courier - configurable HTTP request/response pipeline.

A client executes declarative requests through request converters,
request middlewares, a pluggable executor, response middlewares and
response converters, and returns a typed result.

Quick start::

    from courier import CourierClient, HttpRequestExecutor, Method, Request

    client = CourierClient.builder(HttpRequestExecutor()).build()
    response = await client.execute(Request(Method.GET, "https://example.com"))
"""

from courier._version import __version__
from courier.adapters import (
    HttpRequestExecutor,
    MockRequestExecutor,
    MockResponse,
    RequestExecutor,
)
from courier.client import CourierBuilder, CourierClient
from courier.converters import (
    ConverterRegistry,
    FormRequestConverter,
    JsonRequestConverter,
    JsonResponseConverter,
    RequestConverter,
    ResponseConverter,
    StringResponseConverter,
)
from courier.exceptions import (
    BuilderConsumedError,
    ConfigurationError,
    ConverterNotRegisteredError,
    CourierError,
    ExecutionError,
    ExecutorTimeoutError,
    InvalidRequestBodyError,
    TransportError,
)
from courier.middleware import FunctionMiddleware, Middleware, MiddlewareChain, passthrough
from courier.middlewares import (
    BearerTokenMiddleware,
    HeadersMiddleware,
    LogPart,
    RequestLogger,
    ResponseLogger,
)
from courier.models import (
    FilePart,
    Method,
    MultipartBody,
    RawRequest,
    RawResponse,
    Request,
    Response,
)
from courier.url_builder import UrlBuilder

__all__ = [
    "__version__",
    # client
    "CourierClient",
    "CourierBuilder",
    # models
    "Method",
    "Request",
    "RawRequest",
    "RawResponse",
    "Response",
    "MultipartBody",
    "FilePart",
    # middleware
    "Middleware",
    "MiddlewareChain",
    "FunctionMiddleware",
    "passthrough",
    "RequestLogger",
    "ResponseLogger",
    "LogPart",
    "HeadersMiddleware",
    "BearerTokenMiddleware",
    # converters
    "RequestConverter",
    "ResponseConverter",
    "ConverterRegistry",
    "JsonRequestConverter",
    "JsonResponseConverter",
    "FormRequestConverter",
    "StringResponseConverter",
    # executors
    "RequestExecutor",
    "HttpRequestExecutor",
    "MockRequestExecutor",
    "MockResponse",
    # errors
    "CourierError",
    "ConfigurationError",
    "ConverterNotRegisteredError",
    "BuilderConsumedError",
    "ExecutionError",
    "TransportError",
    "ExecutorTimeoutError",
    "InvalidRequestBodyError",
    # helpers
    "UrlBuilder",
]
