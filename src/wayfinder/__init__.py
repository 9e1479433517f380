"""Wayfinder — client-side navigation for hierarchical, data-resolving routes.

Named routes form a tree; each may resolve async data before its
controller runs. The router matches URLs to routes and executes minimal,
ordered transitions between states.

Basic usage::

    from wayfinder import Router

    router = Router()

    router.route("foo", url="/foo/:fooId", controller=Foo)
    router.route("foo.bar", url="/bar/:barId", controller=Bar, resolve=load_bar)

    await router.go("foo.bar", {"fooId": 1, "barId": 2})
    router.href("foo.bar", {"barId": 3})      # "#!/foo/1/bar/3"

Platform URL changes::

    transition = router.url_router.on_change("#!/foo/1/bar/2")
    if transition is not None:
        await transition
"""

__version__ = "0.1.0"
__all__ = [
    "AbstractRouteError",
    "ConfigurationError",
    "Deferred",
    "DuplicateParamError",
    "DuplicateRouteError",
    "ExitRejectedError",
    "HistoryWriter",
    "MemoryHistory",
    "MissingParamError",
    "NoMatchError",
    "RejectedError",
    "ResolveRejectedError",
    "Route",
    "RouteMatch",
    "RouteNotFoundError",
    "RouteRegistry",
    "RouteState",
    "Router",
    "RouterConfig",
    "Transition",
    "TransitionError",
    "TransitionPhase",
    "UnknownParentError",
    "UrlListener",
    "UrlRouter",
    "WayfinderError",
    "defer",
]

# name -> defining module
_LAZY_IMPORTS: dict[str, str] = {
    "Router": "wayfinder.router",
    "RouterConfig": "wayfinder.config",
    "Deferred": "wayfinder.deferred",
    "defer": "wayfinder.deferred",
    "Route": "wayfinder.routing.route",
    "RouteMatch": "wayfinder.routing.route",
    "RouteRegistry": "wayfinder.routing.registry",
    "RouteState": "wayfinder.state",
    "Transition": "wayfinder.transition",
    "TransitionPhase": "wayfinder.transition",
    "UrlRouter": "wayfinder.url_router",
    "HistoryWriter": "wayfinder.history",
    "MemoryHistory": "wayfinder.history",
    "UrlListener": "wayfinder.history",
    "WayfinderError": "wayfinder.errors",
    "ConfigurationError": "wayfinder.errors",
    "DuplicateRouteError": "wayfinder.errors",
    "UnknownParentError": "wayfinder.errors",
    "DuplicateParamError": "wayfinder.errors",
    "RouteNotFoundError": "wayfinder.errors",
    "AbstractRouteError": "wayfinder.errors",
    "MissingParamError": "wayfinder.errors",
    "NoMatchError": "wayfinder.errors",
    "RejectedError": "wayfinder.errors",
    "TransitionError": "wayfinder.errors",
    "ExitRejectedError": "wayfinder.errors",
    "ResolveRejectedError": "wayfinder.errors",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wayfinder`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
