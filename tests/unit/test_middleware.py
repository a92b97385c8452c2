"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
Courier, a product of Garudex Labs

Tests for the middleware chain.
"""

import pytest

from courier.middleware import FunctionMiddleware, Middleware, MiddlewareChain, passthrough


class Doubler:
    async def process(self, value, next):
        return await next(value * 2)


class AddAfter:
    def __init__(self, amount):
        self.amount = amount

    async def process(self, value, next):
        result = await next(value)
        return result + self.amount


class DefaultStage:
    async def process(self, value, next):
        return await passthrough(value, next)


class Failing:
    async def process(self, value, next):
        raise ValueError("stage failed")


class TestMiddlewareChainBuilding:
    def test_append_preserves_order(self, recorder):
        first, second = recorder("first"), recorder("second")
        chain = MiddlewareChain()
        chain.append(first)
        chain.append(second)
        assert chain.stages == (first, second)

    def test_seal_excludes_terminal_from_stages(self, recorder):
        stage = recorder("only")
        chain = MiddlewareChain([stage]).seal()
        assert chain.sealed is True
        assert chain.stages == (stage,)
        assert len(chain) == 1

    def test_seal_is_idempotent(self, recorder):
        chain = MiddlewareChain([recorder("a")])
        assert chain.seal() is chain.seal()
        assert len(chain) == 1

    def test_append_after_seal_rejected(self, recorder):
        chain = MiddlewareChain().seal()
        with pytest.raises(RuntimeError):
            chain.append(recorder("late"))

    def test_append_rejects_non_middleware(self):
        chain = MiddlewareChain()
        with pytest.raises(TypeError):
            chain.append(object())

    def test_protocol_recognises_stages(self, recorder):
        assert isinstance(recorder("x"), Middleware)
        assert isinstance(Doubler(), Middleware)
        assert not isinstance(object(), Middleware)


class TestMiddlewareChainRun:
    @pytest.mark.asyncio
    async def test_empty_chain_returns_value(self):
        chain = MiddlewareChain().seal()
        assert await chain.run(41) == 41

    @pytest.mark.asyncio
    async def test_unsealed_chain_cannot_run(self):
        with pytest.raises(RuntimeError):
            await MiddlewareChain().run(1)

    @pytest.mark.asyncio
    async def test_runs_in_registration_order(self, recorder, journal):
        chain = MiddlewareChain([recorder("a"), recorder("b"), recorder("c")]).seal()
        await chain.run("value")
        assert journal == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_each_stage_invoked_once_per_run(self, recorder):
        stages = [recorder(str(i)) for i in range(5)]
        chain = MiddlewareChain(stages).seal()
        await chain.run(0)
        assert [stage.calls for stage in stages] == [1] * 5

    @pytest.mark.asyncio
    async def test_transform_before_and_after_forwarding(self):
        chain = MiddlewareChain([AddAfter(1), Doubler(), Doubler()]).seal()
        # (3 * 2 * 2) + 1
        assert await chain.run(3) == 13

    @pytest.mark.asyncio
    async def test_default_passthrough_stage(self):
        chain = MiddlewareChain([DefaultStage(), DefaultStage()]).seal()
        assert await chain.run("same") == "same"

    @pytest.mark.asyncio
    async def test_short_circuit_stops_remaining_stages(self, recorder, short_circuit, journal):
        after = recorder("after")
        chain = MiddlewareChain([recorder("before"), short_circuit("stopped"), after]).seal()

        assert await chain.run("value") == "stopped"
        assert journal == ["before", "short"]
        assert after.calls == 0

    @pytest.mark.asyncio
    async def test_failure_propagates_through_enclosing_stages(self, recorder):
        after = recorder("after")
        chain = MiddlewareChain([AddAfter(1), Failing(), after]).seal()

        with pytest.raises(ValueError, match="stage failed"):
            await chain.run(1)
        assert after.calls == 0

    @pytest.mark.asyncio
    async def test_chain_is_reusable(self, recorder, journal):
        chain = MiddlewareChain([recorder("a")]).seal()
        assert await chain.run(1) == 1
        assert await chain.run(2) == 2
        assert journal == ["a", "a"]


class TestFunctionMiddleware:
    @pytest.mark.asyncio
    async def test_wraps_coroutine_function(self):
        async def upper(value, next):
            return await next(value.upper())

        chain = MiddlewareChain([FunctionMiddleware(upper)]).seal()
        assert await chain.run("abc") == "ABC"

    def test_repr_names_function(self):
        async def named(value, next):
            return await next(value)

        assert "named" in repr(FunctionMiddleware(named))
