"""Invoke helpers — call sync or async user callables uniformly.

Controllers, resolvers, exit hooks, and lifecycle hooks can all be
``def`` or ``async def``. Any code that calls one of them must handle
both cases. This module keeps the sync/async check in exactly one place.

Usage::

    from wayfinder._internal.invoke import invoke

    result = await invoke(on_exit)
"""

import inspect
from collections.abc import Callable, Mapping
from typing import Any


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    A synchronous return value counts as an already-settled success::

        def on_exit(self):
            return None                # settles immediately

        async def on_exit(self):
            await self.save_draft()    # awaited before the next exit runs
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


def call_with_params(func: Callable[..., Any], params: Mapping[str, Any]) -> Any:
    """Call a resolver, injecting route params by parameter name.

    The resolver's signature decides what it receives::

        def resolve(params):          # the whole params mapping
            ...

        async def resolve(fooId):     # just fooId from /foo/:fooId
            ...

        def resolve():                # nothing
            ...

    Parameters that match nothing are left to their defaults. Callables
    whose signature can't be inspected (some builtins) get no arguments.

    Returns whatever *func* returns; the caller awaits it if needed.
    """
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return func()

    kwargs: dict[str, Any] = {}
    for name, param in sig.parameters.items():
        if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if name == "params":
            kwargs[name] = params
        elif name in params:
            kwargs[name] = params[name]

    return func(**kwargs)
