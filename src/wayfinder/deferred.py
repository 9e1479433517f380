"""Deferred — an asynchronous result settled from the outside.

Lets resolvers and exit hooks be driven independently of when their
awaitable is constructed. A resolver can hand out ``deferred`` and some
other piece of code settles it later::

    from wayfinder.deferred import defer

    loaded = defer()

    router.route("inbox", url="/inbox", resolve=lambda: loaded)

    ...
    loaded.resolve(messages)      # the pending transition continues

Unlike a coroutine, a ``Deferred`` may be awaited any number of times, so
it can also serve directly as a route's ready ``resolve`` value.
"""

from typing import Any

import anyio

from wayfinder.errors import RejectedError


class Deferred:
    """An externally resolvable / rejectable awaitable.

    The first call to ``resolve()`` or ``reject()`` wins; later calls are
    ignored. Settling does not require a running event loop — the wait
    event is created lazily by the first waiter.
    """

    __slots__ = ("_error", "_event", "_settled", "_value")

    def __init__(self) -> None:
        self._value: Any = None
        self._error: BaseException | None = None
        self._settled = False
        self._event: anyio.Event | None = None  # Created lazily on first wait

    @property
    def settled(self) -> bool:
        """True once resolved or rejected."""
        return self._settled

    @property
    def rejected(self) -> bool:
        """True once rejected."""
        return self._settled and self._error is not None

    def resolve(self, value: Any = None) -> None:
        """Settle with *value*. Waiters receive it from ``await``."""
        if self._settled:
            return
        self._value = value
        self._settle()

    def reject(self, reason: Any) -> None:
        """Settle with a failure. Waiters see it raised from ``await``.

        Non-exception reasons are wrapped in ``RejectedError`` and remain
        available as ``.reason``.
        """
        if self._settled:
            return
        if not isinstance(reason, BaseException):
            reason = RejectedError(reason)
        self._error = reason
        self._settle()

    def _settle(self) -> None:
        self._settled = True
        if self._event is not None:
            self._event.set()

    async def wait(self) -> Any:
        """Suspend until settled; return the value or raise the rejection."""
        if not self._settled:
            if self._event is None:
                self._event = anyio.Event()
            await self._event.wait()
        if self._error is not None:
            raise self._error
        return self._value

    def __await__(self):
        return self.wait().__await__()

    def __repr__(self) -> str:
        if not self._settled:
            return "<Deferred pending>"
        if self._error is not None:
            return f"<Deferred rejected {self._error!r}>"
        return f"<Deferred resolved {self._value!r}>"


def defer() -> Deferred:
    """Create a new pending ``Deferred``."""
    return Deferred()
