"""Tests for wayfinder.resolve — resolve specs and concurrent execution."""

import anyio
import pytest

from wayfinder._internal.invoke import call_with_params, invoke
from wayfinder.deferred import defer
from wayfinder.resolve import (
    Named,
    Once,
    Ordered,
    Ready,
    Single,
    normalize_resolve,
    run_resolve,
)


def _load() -> str:
    return "loaded"


class TestNormalize:
    def test_none(self) -> None:
        assert normalize_resolve(None) is None

    def test_callable_is_single(self) -> None:
        assert normalize_resolve(_load) == Single(_load)

    def test_mapping_is_named(self) -> None:
        spec = normalize_resolve({"a": _load})
        assert isinstance(spec, Named)
        assert spec.funcs == {"a": _load}

    def test_sequence_is_ordered(self) -> None:
        assert normalize_resolve([_load, _load]) == Ordered((_load, _load))
        assert normalize_resolve((_load,)) == Ordered((_load,))

    def test_awaitable_is_ready(self) -> None:
        d = defer()
        assert normalize_resolve(d) == Ready(d)

    def test_plain_value_is_ready(self) -> None:
        assert normalize_resolve(42) == Ready(42)

    def test_spec_passes_through(self) -> None:
        spec = Single(_load)
        assert normalize_resolve(spec) is spec


class TestRunResolve:
    async def test_none_resolves_empty(self) -> None:
        assert await run_resolve(None, {}) == {}

    async def test_single_sync(self) -> None:
        assert await run_resolve(Single(_load), {}) == "loaded"

    async def test_single_async_with_params(self) -> None:
        async def load(fooId):
            return f"foo-{fooId}"

        assert await run_resolve(Single(load), {"fooId": 1}) == "foo-1"

    async def test_single_returning_deferred(self) -> None:
        d = defer()
        d.resolve("later")
        assert await run_resolve(Single(lambda: d), {}) == "later"

    async def test_ready_value(self) -> None:
        assert await run_resolve(Ready(42), {}) == 42

    async def test_named_keeps_keys(self) -> None:
        async def b():
            return 2

        result = await run_resolve(normalize_resolve({"a": lambda: 1, "b": b, "c": 3}), {})
        assert result == {"a": 1, "b": 2, "c": 3}
        assert list(result) == ["a", "b", "c"]

    async def test_ordered_keeps_positions(self) -> None:
        async def slow():
            await anyio.sleep(0.01)
            return "slow"

        result = await run_resolve(normalize_resolve([slow, lambda: "fast"]), {})
        assert result == ["slow", "fast"]

    async def test_entries_run_concurrently(self) -> None:
        ready = anyio.Event()

        async def waiter():
            await ready.wait()
            return "waited"

        async def setter():
            ready.set()
            return "set"

        with anyio.fail_after(1):
            result = await run_resolve(normalize_resolve({"w": waiter, "s": setter}), {})
        assert result == {"w": "waited", "s": "set"}

    async def test_first_failure_propagates(self) -> None:
        cancelled = []

        async def never():
            try:
                await anyio.sleep_forever()
            except anyio.get_cancelled_exc_class():
                cancelled.append(True)
                raise

        async def fail():
            await anyio.sleep(0)
            raise LookupError("gone")

        with pytest.raises(LookupError, match="gone"):
            await run_resolve(normalize_resolve([never, fail]), {})
        assert cancelled == [True]

    async def test_empty_named(self) -> None:
        assert await run_resolve(Named({}), {}) == {}


class TestCoroutineValues:
    async def test_awaited_once(self) -> None:
        calls = []

        async def load():
            calls.append(1)
            return "data"

        spec = normalize_resolve(load())
        assert isinstance(spec.value, Once)
        assert await run_resolve(spec, {}) == "data"
        assert await run_resolve(spec, {}) == "data"
        assert calls == [1]

    async def test_failure_replayed(self) -> None:
        async def fail():
            raise LookupError("gone")

        spec = normalize_resolve(fail())
        for _ in range(2):
            with pytest.raises(LookupError, match="gone"):
                await run_resolve(spec, {})

    async def test_concurrent_waiters_share_result(self) -> None:
        gate = anyio.Event()

        async def slow():
            await gate.wait()
            return "shared"

        once = Once(slow())
        results = []

        async def wait():
            results.append(await once)

        async with anyio.create_task_group() as tg:
            tg.start_soon(wait)
            tg.start_soon(wait)
            await anyio.sleep(0)
            gate.set()
        assert results == ["shared", "shared"]

    async def test_named_and_ordered_entries(self) -> None:
        async def one():
            return 1

        named = normalize_resolve({"a": one(), "b": lambda: 2})
        ordered = normalize_resolve([one(), 3])
        for _ in range(2):
            assert await run_resolve(named, {}) == {"a": 1, "b": 2}
            assert await run_resolve(ordered, {}) == [1, 3]

    def test_other_awaitables_untouched(self) -> None:
        d = defer()
        assert normalize_resolve(d).value is d


class TestCallWithParams:
    def test_params_mapping(self) -> None:
        assert call_with_params(lambda params: dict(params), {"a": 1}) == {"a": 1}

    def test_by_name(self) -> None:
        assert call_with_params(lambda a, b=5: (a, b), {"a": 1}) == (1, 5)

    def test_no_args(self) -> None:
        assert call_with_params(lambda: "none", {"a": 1}) == "none"

    def test_ignores_var_args(self) -> None:
        assert call_with_params(lambda *args, **kwargs: (args, kwargs), {"a": 1}) == ((), {})


class TestInvoke:
    async def test_sync(self) -> None:
        assert await invoke(lambda x: x + 1, 1) == 2

    async def test_async(self) -> None:
        async def double(x):
            return x * 2

        assert await invoke(double, 2) == 4
