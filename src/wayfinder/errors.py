"""Wayfinder exception hierarchy.

Shared across the registry, URL matcher, and transition engine so every
module raises and catches the same types.

Registration and render errors are programmer errors and are raised
synchronously. Navigation failures surface from the awaited transition.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from wayfinder.routing.route import Route


class WayfinderError(Exception):
    """Base for all wayfinder-specific errors."""


class ConfigurationError(WayfinderError):
    """Raised when a route definition or router setup is invalid.

    Typically raised from ``Router.route()`` during setup.
    """


class DuplicateRouteError(ConfigurationError):
    """A route with this name is already registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Route '{name}' is already registered.")


class UnknownParentError(ConfigurationError):
    """The parent named by a route definition is not registered.

    Parents must be registered before their children.
    """

    def __init__(self, name: str, parent: str) -> None:
        self.name = name
        self.parent = parent
        super().__init__(
            f"Route '{name}' declares parent '{parent}', which is not registered. "
            "Register parent routes before their children."
        )


class DuplicateParamError(ConfigurationError):
    """A path param name appears twice in one ancestor chain."""

    def __init__(self, param: str, template: str) -> None:
        self.param = param
        self.template = template
        super().__init__(f"Path param ':{param}' is declared twice in {template!r}.")


class RouteNotFoundError(WayfinderError):
    """Navigation or href to an unregistered route name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Route '{name}' not found.")


class AbstractRouteError(WayfinderError):
    """An abstract route was used as the final target of a navigation."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Route '{name}' is abstract and cannot be navigated to.")


class MissingParamError(WayfinderError):
    """A required path param was absent when rendering a URL."""

    def __init__(self, param: str, template: str) -> None:
        self.param = param
        self.template = template
        super().__init__(f"Missing required param ':{param}' for {template!r}.")


class NoMatchError(WayfinderError):
    """A URL did not match any concrete route.

    Recoverable: the URL listener logs it or falls back to the default
    path. Never raised to the platform.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No route handler found for '{path}'")


class RejectedError(WayfinderError):
    """A ``Deferred`` was rejected with a value that is not an exception."""

    def __init__(self, reason: Any) -> None:
        self.reason = reason
        super().__init__(f"Rejected: {reason!r}")


class TransitionError(WayfinderError):
    """Base for navigation failures tied to a specific route.

    The original failure is available as ``__cause__``.
    """

    phase = "transition"

    def __init__(self, route: Route, detail: str = "") -> None:
        self.route = route
        message = f"{self.phase.capitalize()} of route '{route.name}' was rejected"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ExitRejectedError(TransitionError):
    """An exit hook vetoed the transition."""

    phase = "exit"


class ResolveRejectedError(TransitionError):
    """A resolver failed, so the route and its descendants were not entered."""

    phase = "resolve"
