"""Resolve specifications — data a route needs before activation.

A route's ``resolve`` option takes one of four shapes. Each is normalized
at registration into a tagged variant, and ``run_resolve`` turns every
variant into "await one value, one mapping, or one sequence"::

    resolve=load_user                          # Single  -> value
    resolve={"user": load_user, "perms": ...}  # Named   -> {"user": ..., "perms": ...}
    resolve=[load_user, load_perms]            # Ordered -> [user, perms]
    resolve=deferred                           # Ready   -> deferred's value

A coroutine object given in place of a function is awaited on first entry
only; later entries reuse its result.

Named and ordered entries run concurrently in an anyio task group. The
first failure cancels the remaining entries and is re-raised as-is.

Producers receive route params by name (see ``call_with_params``).
"""

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

import anyio

from wayfinder._internal.invoke import call_with_params
from wayfinder._internal.types import Resolver
from wayfinder.deferred import Deferred
from wayfinder.errors import RejectedError


@dataclass(frozen=True, slots=True)
class Single:
    """One producer function."""

    func: Resolver


@dataclass(frozen=True, slots=True)
class Named:
    """Producers keyed by name; resolves to a dict."""

    funcs: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class Ordered:
    """Producers by position; resolves to a list."""

    funcs: tuple[Any, ...]


@dataclass(frozen=True, slots=True)
class Ready:
    """An already-available value or awaitable (e.g. a ``Deferred``)."""

    value: Any


ResolveSpec: TypeAlias = Single | Named | Ordered | Ready


def normalize_resolve(value: Any) -> ResolveSpec | None:
    """Map a route's raw ``resolve`` option onto a variant.

    ``None`` means the route has nothing to resolve.
    """
    if value is None:
        return None
    if isinstance(value, Single | Named | Ordered | Ready):
        return value
    if inspect.isawaitable(value):
        return Ready(_reusable(value))
    if callable(value):
        return Single(value)
    if isinstance(value, Mapping):
        return Named({key: _reusable(entry) for key, entry in value.items()})
    if isinstance(value, list | tuple):
        return Ordered(tuple(_reusable(entry) for entry in value))
    return Ready(value)


class Once:
    """Awaits a one-shot awaitable on first use and replays the outcome.

    A coroutine object can only be awaited once, but a route may be
    entered many times. Later (or concurrent) awaits get the first
    result, or the first error, from a ``Deferred``.
    """

    __slots__ = ("_awaitable", "_outcome")

    def __init__(self, awaitable: Any) -> None:
        self._awaitable = awaitable
        self._outcome: Deferred | None = None

    async def wait(self) -> Any:
        if self._outcome is not None:
            return await self._outcome
        self._outcome = outcome = Deferred()
        try:
            value = await self._awaitable
        except Exception as exc:
            outcome.reject(exc)
            raise
        except BaseException:
            outcome.reject(RejectedError("awaitable was cancelled before it settled"))
            raise
        outcome.resolve(value)
        return value

    def __await__(self):
        return self.wait().__await__()


def _reusable(entry: Any) -> Any:
    if inspect.iscoroutine(entry):
        return Once(entry)
    return entry


async def run_resolve(spec: ResolveSpec | None, params: Mapping[str, Any]) -> Any:
    """Execute *spec* and return the resolved value.

    Routes without a spec resolve to an empty dict.
    """
    if spec is None:
        return {}
    if isinstance(spec, Single):
        return await _produce(spec.func, params)
    if isinstance(spec, Named):
        return await _gather(dict(spec.funcs), params)
    if isinstance(spec, Ordered):
        results = await _gather(dict(enumerate(spec.funcs)), params)
        return list(results.values())
    return await _produce(spec.value, params)


async def _produce(entry: Any, params: Mapping[str, Any]) -> Any:
    """Call a producer (or take a ready value) and await the result."""
    result = entry
    if callable(entry) and not inspect.isawaitable(entry):
        result = call_with_params(entry, params)
    if inspect.isawaitable(result):
        result = await result
    return result


async def _gather(entries: dict[Any, Any], params: Mapping[str, Any]) -> dict[Any, Any]:
    """Resolve all entries concurrently. Result keys keep the input order."""
    if not entries:
        return {}

    results: dict[Any, Any] = {}

    async def _run(key: Any, entry: Any) -> None:
        results[key] = await _produce(entry, params)

    try:
        async with anyio.create_task_group() as tg:
            for key, entry in entries.items():
                tg.start_soon(_run, key, entry)
    except BaseExceptionGroup as group:
        error = _first_error(group)
        raise error from error.__cause__

    return {key: results[key] for key in entries}


def _first_error(group: BaseExceptionGroup) -> BaseException:
    error: BaseException = group
    while isinstance(error, BaseExceptionGroup):
        error = error.exceptions[0]
    return error
