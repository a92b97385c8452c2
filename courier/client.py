"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Courier Client & Builder.

The client wires converters, middlewares and a request executor together::

    client = (
        CourierClient.builder(HttpRequestExecutor())
        .add_request_converter(JsonRequestConverter())
        .add_response_converter(JsonResponseConverter())
        .add_request_middleware(RequestLogger())
        .add_response_middleware(ResponseLogger())
        .build()
    )

    response = await client.execute(
        Request(Method.GET, "https://api.example.com/books/1", response_converter="json")
    )

Every call runs the same pipeline, in this order:

    request converter -> request middlewares -> executor
        -> response middlewares -> response converter
"""

from __future__ import annotations

import time
from typing import Optional, Tuple

from courier.adapters.base import RequestExecutor
from courier.adapters.http import HttpRequestExecutor
from courier.config.settings import CourierConfig, get_default_config
from courier.converters import (
    IDENTITY_REQUEST_CONVERTER,
    IDENTITY_RESPONSE_CONVERTER,
    ConverterRegistry,
    RequestConverter,
    ResponseConverter,
)
from courier.exceptions import BuilderConsumedError
from courier.logging_config import (
    correlation_scope,
    get_logger,
    log_request_execution,
    log_request_failure,
)
from courier.middleware import Middleware, MiddlewareChain
from courier.models import RawRequest, RawResponse, Request, Response

logger = get_logger(__name__)


class CourierClient:
    """Executes :class:`Request` objects through a fixed pipeline.

    Instances are created by :meth:`CourierClient.builder` and are read-only
    afterwards: converter registries are frozen and middleware chains are
    sealed, so one client can serve any number of concurrent ``execute``
    calls.
    """

    def __init__(
        self,
        *,
        executor: RequestExecutor,
        request_converters: ConverterRegistry[RequestConverter],
        response_converters: ConverterRegistry[ResponseConverter],
        request_chain: MiddlewareChain[RawRequest],
        response_chain: MiddlewareChain[RawResponse],
    ) -> None:
        self._executor = executor
        self._request_converters = request_converters
        self._response_converters = response_converters
        self._request_chain = request_chain
        self._response_chain = response_chain

    @staticmethod
    def builder(executor: RequestExecutor) -> CourierBuilder:
        """Start configuring a client bound to ``executor``."""
        return CourierBuilder(executor)

    # -- Execution ---------------------------------------------------------

    async def execute(self, request: Request) -> Response:
        """Run ``request`` through the pipeline and return the converted response.

        Raises:
            ConverterNotRegisteredError: A selector names a converter that
                was never registered. Raised before any middleware runs.
            TransportError: The executor did not obtain a response.

        Middleware and converter errors propagate unchanged.
        """
        request_converter = self._request_converters.resolve(request.request_converter)
        response_converter = self._response_converters.resolve(request.response_converter)

        with correlation_scope():
            start = time.monotonic()
            logger.debug("request_started", method=request.method.value, url=request.url)
            try:
                if request.is_multipart:
                    raw_request = RawRequest(request, request.body)
                else:
                    raw_request = request_converter.to_raw(request)

                raw_request = await self._request_chain.run(raw_request)
                raw_response = await self._executor.execute(raw_request)
                raw_response = await self._response_chain.run(raw_response)

                response = response_converter.from_raw(raw_response)
            except Exception as exc:
                log_request_failure(
                    logger, request.method.value, request.url, exc,
                    duration_ms=round((time.monotonic() - start) * 1000, 2),
                )
                raise

            log_request_execution(
                logger,
                request.method.value,
                request.url,
                raw_response.status_code,
                round((time.monotonic() - start) * 1000, 2),
            )
            return response

    # -- Introspection -----------------------------------------------------

    @property
    def executor(self) -> RequestExecutor:
        return self._executor

    @property
    def request_middlewares(self) -> Tuple[Middleware[RawRequest], ...]:
        return self._request_chain.stages

    @property
    def response_middlewares(self) -> Tuple[Middleware[RawResponse], ...]:
        return self._response_chain.stages

    @property
    def request_converter_keys(self) -> Tuple[str, ...]:
        return tuple(self._request_converters.keys())

    @property
    def response_converter_keys(self) -> Tuple[str, ...]:
        return tuple(self._response_converters.keys())

    # -- Lifecycle ---------------------------------------------------------

    async def aclose(self) -> None:
        """Release the executor's resources."""
        await self._executor.aclose()
        logger.info("CourierClient closed")

    async def __aenter__(self) -> CourierClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


# ---------------------------------------------------------------------------
# CourierBuilder
# ---------------------------------------------------------------------------

class CourierBuilder:
    """Fluent, single-use builder for :class:`CourierClient`.

    Converters are registered under their own ``key``; registering a second
    converter with the same key replaces the first. Middlewares run in the
    order they are added. Nothing is validated here: a request that selects
    an unregistered converter fails on its first ``execute``.

    Example::

        client = (
            CourierBuilder(MockRequestExecutor())
            .add_request_converter(JsonRequestConverter())
            .add_request_middleware(BearerTokenMiddleware(get_token))
            .build()
        )
    """

    def __init__(self, executor: RequestExecutor) -> None:
        if not callable(getattr(executor, "execute", None)):
            raise TypeError(
                f"{type(executor).__name__} is not a request executor: missing execute()"
            )
        self._executor = executor
        self._request_converters: ConverterRegistry[RequestConverter] = ConverterRegistry(
            "request", IDENTITY_REQUEST_CONVERTER
        )
        self._response_converters: ConverterRegistry[ResponseConverter] = ConverterRegistry(
            "response", IDENTITY_RESPONSE_CONVERTER
        )
        self._request_chain: MiddlewareChain[RawRequest] = MiddlewareChain()
        self._response_chain: MiddlewareChain[RawResponse] = MiddlewareChain()
        self._built = False

    @classmethod
    def from_config(cls, config: Optional[CourierConfig] = None) -> CourierBuilder:
        """Start a builder around an :class:`HttpRequestExecutor` built from ``config``."""
        config = config or get_default_config()
        return cls(HttpRequestExecutor.from_config(config.executor))

    def _ensure_open(self) -> None:
        if self._built:
            raise BuilderConsumedError(
                "CourierBuilder has already built a client and cannot be reused"
            )

    def add_request_converter(self, converter: RequestConverter) -> CourierBuilder:
        """Register a request converter under ``converter.key``."""
        self._ensure_open()
        if not callable(getattr(converter, "to_raw", None)):
            raise TypeError(f"{type(converter).__name__} is not a request converter")
        self._request_converters.register(converter)
        logger.debug("Registered request converter", key=converter.key)
        return self

    def add_response_converter(self, converter: ResponseConverter) -> CourierBuilder:
        """Register a response converter under ``converter.key``."""
        self._ensure_open()
        if not callable(getattr(converter, "from_raw", None)):
            raise TypeError(f"{type(converter).__name__} is not a response converter")
        self._response_converters.register(converter)
        logger.debug("Registered response converter", key=converter.key)
        return self

    def add_request_middleware(self, middleware: Middleware[RawRequest]) -> CourierBuilder:
        """Append a stage to the request middleware chain."""
        self._ensure_open()
        self._request_chain.append(middleware)
        return self

    def add_response_middleware(self, middleware: Middleware[RawResponse]) -> CourierBuilder:
        """Append a stage to the response middleware chain."""
        self._ensure_open()
        self._response_chain.append(middleware)
        return self

    def build(self) -> CourierClient:
        """Seal both chains, freeze the registries and return the client.

        Raises:
            BuilderConsumedError: ``build()`` was already called.
        """
        self._ensure_open()
        self._built = True

        client = CourierClient(
            executor=self._executor,
            request_converters=self._request_converters.freeze(),
            response_converters=self._response_converters.freeze(),
            request_chain=self._request_chain.seal(),
            response_chain=self._response_chain.seal(),
        )

        logger.info(
            f"CourierBuilder: built client with {len(self._request_chain)} request "
            f"and {len(self._response_chain)} response middleware(s)"
        )
        return client
