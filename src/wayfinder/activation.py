"""Controller activation.

A controller is whatever a route runs once its data is resolved. The
framework checks the shape, not the lineage:

- a **class** is instantiated; the instance may define ``on_exit()``
  (sync or async) to veto or clean up before the route is exited, and the
  class may define a static ``resolve`` used when the route has none::

      class Editor:
          @staticmethod
          async def resolve(docId):
              return await store.load(docId)

          def __init__(self, params, doc):
              self.doc = doc

          async def on_exit(self):
              if self.doc.dirty:
                  raise RuntimeError("Unsaved changes")

- any other **callable** is called; an awaitable result is awaited, and
  the result stands in for the instance (so it may carry ``on_exit`` too).

Both receive ``(params, resolved)``, trimmed to what their signature
accepts — ``def home(): ...`` is a valid controller.
"""

import inspect
from collections.abc import Callable, Mapping
from typing import Any

from wayfinder._internal.invoke import invoke


async def activate(controller: Any, params: Mapping[str, Any], resolved: Any) -> Any:
    """Instantiate or invoke *controller*. Returns the active instance."""
    if controller is None:
        return None
    args = _fit_args(controller, (params, resolved))
    if inspect.isclass(controller):
        return controller(*args)
    return await invoke(controller, *args)


def exit_hook(instance: Any) -> Callable[[], Any] | None:
    """Return the instance's ``on_exit`` hook, if it has a callable one."""
    if instance is None:
        return None
    hook = getattr(instance, "on_exit", None)
    return hook if callable(hook) else None


def static_resolve(controller: Any) -> Any:
    """Return a controller class's ``resolve`` attribute, if any.

    Only classes are consulted; plain functions never carry one.
    """
    if not inspect.isclass(controller):
        return None
    return getattr(controller, "resolve", None)


def _fit_args(func: Any, args: tuple[Any, ...]) -> tuple[Any, ...]:
    """Trim positional *args* to what *func* accepts."""
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return args

    accepted = 0
    for param in sig.parameters.values():
        if param.kind is param.VAR_POSITIONAL:
            return args
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            accepted += 1
    return args[:accepted]
