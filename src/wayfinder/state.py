"""RouteState — an immutable snapshot of where the application is."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wayfinder.routing.route import Route


@dataclass(frozen=True, slots=True)
class RouteState:
    """A committed ``(route, params)`` pair.

    Created by the router on every successful transition and never
    mutated; the router swaps ``current``/``previous`` wholesale.
    ``params`` is a read-only view.
    """

    route: Route
    params: Mapping[str, Any] = field(default_factory=dict)
    prefix: str = "#!"

    def __post_init__(self) -> None:
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @property
    def name(self) -> str:
        return self.route.name

    def path(self) -> str:
        """Rendered path and query string, without the URL prefix."""
        return self.route.pattern.render(self.params)

    def url(self) -> str:
        """Full URL as written to the browser (``#!/foo/1``)."""
        return f"{self.prefix}{self.path()}"

    def to_dict(self) -> dict[str, Any]:
        """Serialized form handed to the history writer."""
        return {"name": self.route.name, "params": dict(self.params)}
