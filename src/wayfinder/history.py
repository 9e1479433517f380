"""Platform collaborators — the URL writer and the URL listener.

The router never touches the browser itself. After a transition commits
with ``location=True`` it hands the new state to a ``HistoryWriter``;
platform navigation events reach the router through a ``UrlListener``
that feeds raw URLs to ``router.url_router.on_change()``.

No base class required. The router checks the shape, not the lineage::

    class BrowserHistory:
        def push_state(self, state, title, url):
            window.history.pushState(state, title, url)

``MemoryHistory`` is the in-process writer used when none is supplied.
"""

from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any, Protocol


class HistoryWriter(Protocol):
    """Performs the platform URL/title mutation. May be sync or async."""

    def push_state(self, state: dict[str, Any], title: str, url: str) -> Awaitable[None] | None: ...


class UrlListener(Protocol):
    """Subscribes to platform URL changes and dispatches them.

    Implementations call ``router.url_router.on_change(url)`` on every
    change (and once on initial load) and await the returned transition
    when there is one.
    """

    def listen(self, on_change: Any) -> None: ...


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One recorded ``push_state`` call."""

    state: dict[str, Any]
    title: str
    url: str


class MemoryHistory:
    """A history writer that records entries in memory.

    Useful headless and in tests::

        history = MemoryHistory()
        router = Router(history=history)
        await router.go("foo", {"fooId": 1})
        assert history.url == "#!/foo/1"
    """

    __slots__ = ("entries",)

    def __init__(self) -> None:
        self.entries: list[HistoryEntry] = []

    def push_state(self, state: dict[str, Any], title: str, url: str) -> None:
        self.entries.append(HistoryEntry(state=state, title=title, url=url))

    @property
    def url(self) -> str | None:
        """URL of the most recent entry, or ``None`` before any push."""
        if not self.entries:
            return None
        return self.entries[-1].url

    @property
    def title(self) -> str | None:
        if not self.entries:
            return None
        return self.entries[-1].title

    def __len__(self) -> int:
        return len(self.entries)
