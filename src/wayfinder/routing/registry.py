"""Route registry — the navigation tree.

Owns every ``Route``. Parents are resolved once, at registration, from an
explicit ``parent`` (a route or a name) or from the dotted name
(``"a.b"`` is a child of ``"a"``). Parents must already be registered;
forward references raise ``UnknownParentError``.

The hierarchy never changes after registration, so ancestor chains and
full templates are computed once per route and cached.
"""

from collections.abc import Iterator
from typing import Any

from wayfinder.activation import static_resolve
from wayfinder.errors import DuplicateRouteError, RouteNotFoundError, UnknownParentError
from wayfinder.resolve import normalize_resolve
from wayfinder.routing.pattern import compile_pattern
from wayfinder.routing.route import Route


class RouteRegistry:
    """Named routes in registration order.

    Usage::

        registry = RouteRegistry()
        registry.register("foo", url="/foo/:fooId")
        registry.register("foo.bar", url="/bar/:barId")

        bar = registry.lookup("foo.bar")
        registry.ancestor_chain(bar)       # (foo, foo.bar)
        registry.full_url_template(bar)    # "/foo/:fooId/bar/:barId"
    """

    __slots__ = ("_chains", "_routes")

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}
        self._chains: dict[str, tuple[Route, ...]] = {}

    def register(
        self,
        name: str,
        *,
        url: str = "",
        controller: Any = None,
        resolve: Any = None,
        parent: Route | str | None = None,
        abstract: bool = False,
        title: str | None = None,
    ) -> Route:
        """Create and store a route.

        Raises ``DuplicateRouteError`` if *name* is taken and
        ``UnknownParentError`` if the parent cannot be found.
        """
        if name in self._routes:
            raise DuplicateRouteError(name)

        if resolve is None:
            resolve = static_resolve(controller)

        parent_route = self._resolve_parent(name, parent)
        fragments = [r.url for r in self._chains[parent_route.name]] if parent_route else []
        fragments.append(url or "")

        route = Route(
            name=name,
            url=url or "",
            controller=controller,
            resolve=normalize_resolve(resolve),
            parent=parent_route,
            abstract=abstract,
            title=title or name,
            pattern=compile_pattern(fragments),
        )
        chain = self._build_chain(route)

        self._routes[name] = route
        self._chains[name] = chain
        return route

    def _resolve_parent(self, name: str, parent: Route | str | None) -> Route | None:
        if isinstance(parent, Route):
            if self._routes.get(parent.name) is not parent:
                raise UnknownParentError(name, parent.name)
            return parent

        if parent is None:
            if "." not in name:
                return None
            parent = name.rsplit(".", 1)[0]

        found = self._routes.get(parent)
        if found is None:
            raise UnknownParentError(name, parent)
        return found

    @staticmethod
    def _build_chain(route: Route) -> tuple[Route, ...]:
        chain: list[Route] = []
        node: Route | None = route
        while node is not None:
            chain.append(node)
            node = node.parent
        chain.reverse()
        return tuple(chain)

    # -- Lookup --

    def lookup(self, name: str) -> Route:
        """Return the route called *name*.

        Raises ``RouteNotFoundError`` if it isn't registered.
        """
        try:
            return self._routes[name]
        except KeyError:
            raise RouteNotFoundError(name) from None

    get = lookup

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __iter__(self) -> Iterator[Route]:
        return iter(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    def concrete(self) -> list[Route]:
        """Non-abstract routes in registration order."""
        return [route for route in self._routes.values() if not route.abstract]

    # -- Hierarchy --

    def ancestor_chain(self, route: Route) -> tuple[Route, ...]:
        """Ordered ancestors of *route*, root first, including itself."""
        chain = self._chains.get(route.name)
        if chain is None or chain[-1] is not route:
            chain = self._build_chain(route)
        return chain

    def full_url_template(self, route: Route) -> str:
        """The concatenated URL template for *route*'s chain.

        Declared query names are appended as ``?a&b``.
        """
        return str(route.pattern)

    def declared_params(self, route: Route) -> tuple[str, ...]:
        """Every path and query param declared by *route* or its ancestors."""
        return route.pattern.names
