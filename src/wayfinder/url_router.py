"""URL dispatch — the listener-facing side of the router.

Rules are tried in registration order; the first structural match wins.
A URL that matches nothing is not fatal: ``on_change`` logs a warning
and, when a default path is configured, dispatches that instead::

    urls = UrlRouter(prefix="#!")
    urls.when("/", show_index)
    urls.when("/foo/:fooId", show_foo)
    urls.otherwise("/")

    urls.on_change("#!/foo/1")      # show_foo({"fooId": "1"})
    urls.on_change("#!/nowhere")    # warning, then show_index({})
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from wayfinder.errors import NoMatchError
from wayfinder.routing.pattern import UrlPattern, compile_pattern

logger = logging.getLogger("wayfinder.url_router")


@dataclass(frozen=True, slots=True)
class UrlRule:
    """A compiled pattern and the handler it dispatches to."""

    pattern: UrlPattern
    handler: Callable[[dict[str, str]], Any]
    name: str | None = None


@dataclass(frozen=True, slots=True)
class UrlMatch:
    """A rule that matched, with its bound params."""

    rule: UrlRule
    params: dict[str, str]


class UrlRouter:
    """Matches raw URLs against registered rules and dispatches them."""

    __slots__ = ("_default", "_rules", "prefix")

    def __init__(self, prefix: str = "#!", default: str | None = None) -> None:
        self.prefix = prefix
        self._rules: list[UrlRule] = []
        self._default = default

    # -- Setup --

    def when(
        self,
        pattern: str | UrlPattern,
        handler: Callable[[dict[str, str]], Any],
        *,
        name: str | None = None,
    ) -> UrlRouter:
        """Register *handler* for URLs matching *pattern*. Chainable."""
        if isinstance(pattern, str):
            pattern = compile_pattern([pattern or "/"])
        self._rules.append(UrlRule(pattern=pattern, handler=handler, name=name))
        return self

    def otherwise(self, path: str) -> UrlRouter:
        """Set the path dispatched when a URL matches no rule."""
        self._default = path
        return self

    @property
    def default(self) -> str | None:
        return self._default

    @property
    def rules(self) -> list[UrlRule]:
        return list(self._rules)

    # -- Matching --

    def split(self, url: str) -> tuple[str, str]:
        """Strip the prefix and split a raw URL into ``(path, query)``."""
        if self.prefix:
            _, sep, tail = url.partition(self.prefix)
            if sep:
                url = tail
        path, _, query = url.partition("?")
        if not path.startswith("/"):
            path = f"/{path}"
        return path, query

    def match(self, url: str) -> UrlMatch | None:
        """Return the first rule matching *url*, or ``None``."""
        path, query = self.split(url)
        for rule in self._rules:
            params = rule.pattern.match(path, query)
            if params is not None:
                return UrlMatch(rule=rule, params=params)
        return None

    # -- Dispatch --

    def dispatch(self, url: str) -> Any:
        """Call the matching rule's handler and return its result.

        Raises ``NoMatchError`` if no rule matches.
        """
        found = self.match(url)
        if found is None:
            path, _ = self.split(url)
            raise NoMatchError(path)
        logger.debug("Dispatching %r to %s", url, found.rule.name or found.rule.pattern)
        return found.rule.handler(found.params)

    def on_change(self, url: str) -> Any | None:
        """Dispatch a URL reported by the platform.

        Returns the handler's result (for router rules, an awaitable
        transition) or ``None`` when nothing matched. Unmatched URLs are
        logged and, if a default path is set, redirected to it once.
        """
        try:
            return self.dispatch(url)
        except NoMatchError as exc:
            logger.warning("%s", exc)
            if self._default is None:
                return None
            fallback = f"{self.prefix}{self._default}"
            if self.split(fallback)[0] == exc.path:
                return None
            return self.on_change(fallback)
