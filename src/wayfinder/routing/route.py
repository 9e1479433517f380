"""Route, RouteMatch, and PathSegment dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wayfinder._internal.types import Controller
    from wayfinder.resolve import ResolveSpec
    from wayfinder.routing.pattern import UrlPattern


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a URL template.

    Static:  ``/users``  (is_param=False)
    Param:   ``/:id``    (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None


def _empty_pattern() -> UrlPattern:
    from wayfinder.routing.pattern import UrlPattern

    return UrlPattern(template="")


@dataclass(slots=True, eq=False)
class Route:
    """One node in the navigation tree.

    Created by ``RouteRegistry.register()``, which resolves ``parent`` and
    compiles ``pattern`` from the ancestor chain. Treated as immutable
    afterwards. Routes compare by identity.

    A route built by hand gets an empty pattern: it renders as ``/`` and
    matches no URL.
    """

    name: str
    url: str = ""
    controller: Controller | None = None
    resolve: ResolveSpec | None = None
    parent: Route | None = None
    abstract: bool = False
    title: str = ""
    pattern: UrlPattern = field(default_factory=_empty_pattern, repr=False)

    def __post_init__(self) -> None:
        if not self.title:
            self.title = self.name

    @property
    def depth(self) -> int:
        """Number of ancestors above this route (0 for a root)."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def is_descendant_of(self, other: Route) -> bool:
        """True if *other* appears strictly above this route."""
        node = self.parent
        while node is not None:
            if node is other:
                return True
            node = node.parent
        return False


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful URL match."""

    route: Route
    params: dict[str, Any]
