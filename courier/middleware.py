"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Middleware chain.

A middleware is any object with an ``async process(value, next)`` method.
It may rewrite ``value`` before forwarding, rewrite the result after
forwarding, or return its own value without calling ``next`` to stop the
chain. ``next`` is always safe to call: sealing a chain appends a terminal
stage that simply returns what it receives.

Example::

    class AddTraceHeader:
        async def process(self, raw, next):
            return await next(raw.with_headers({"X-Trace": "1"}))

    builder.add_request_middleware(AddTraceHeader())
"""

from __future__ import annotations

from typing import (
    Awaitable,
    Callable,
    Generic,
    List,
    Protocol,
    Sequence,
    Tuple,
    TypeVar,
    runtime_checkable,
)

T = TypeVar("T")

Next = Callable[[T], Awaitable[T]]
"""Continuation handed to a stage; invokes the rest of the chain."""


@runtime_checkable
class Middleware(Protocol[T]):
    """A single stage of a :class:`MiddlewareChain`."""

    async def process(self, value: T, next: Next[T]) -> T:
        ...


async def passthrough(value: T, next: Next[T]) -> T:
    """Default stage behaviour: forward ``value`` untouched."""
    return await next(value)


class FunctionMiddleware(Generic[T]):
    """Adapts ``async def fn(value, next)`` into a middleware stage."""

    def __init__(self, fn: Callable[[T, Next[T]], Awaitable[T]]) -> None:
        self._fn = fn

    async def process(self, value: T, next: Next[T]) -> T:
        return await self._fn(value, next)

    def __repr__(self) -> str:
        return f"FunctionMiddleware({getattr(self._fn, '__name__', self._fn)!r})"


class _TerminalStage(Generic[T]):
    async def process(self, value: T, next: Next[T]) -> T:
        return value


class MiddlewareChain(Generic[T]):
    """Ordered, sealable sequence of middleware stages over one value type.

    Stages are appended while the owning builder is configured, then the
    chain is sealed once. A sealed chain holds an immutable tuple and can be
    run by any number of concurrent calls; per-call state travels only in
    the value passed along.
    """

    def __init__(self, stages: Sequence[Middleware[T]] = ()) -> None:
        self._pending: List[Middleware[T]] = list(stages)
        self._stages: Tuple[Middleware[T], ...] = ()
        self._sealed = False

    def append(self, stage: Middleware[T]) -> None:
        if self._sealed:
            raise RuntimeError("Cannot append to a sealed middleware chain")
        if not callable(getattr(stage, "process", None)):
            raise TypeError(
                f"{type(stage).__name__} is not a middleware: missing process(value, next)"
            )
        self._pending.append(stage)

    def seal(self) -> MiddlewareChain[T]:
        """Freeze the chain and append the terminal stage."""
        if not self._sealed:
            self._stages = (*self._pending, _TerminalStage())
            self._pending = []
            self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def stages(self) -> Tuple[Middleware[T], ...]:
        """User stages in traversal order (terminal stage excluded)."""
        if self._sealed:
            return self._stages[:-1]
        return tuple(self._pending)

    def __len__(self) -> int:
        return len(self.stages)

    async def run(self, value: T) -> T:
        """Send ``value`` through every stage and return the result."""
        if not self._sealed:
            raise RuntimeError("Middleware chain must be sealed before it runs")
        return await self._dispatch(0, value)

    async def _dispatch(self, index: int, value: T) -> T:
        stage = self._stages[index]

        async def next_stage(forwarded: T) -> T:
            return await self._dispatch(index + 1, forwarded)

        return await stage.process(value, next_stage)
