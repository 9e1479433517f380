"""The wayfinder router — route registration and the transition engine.

Every navigation runs the same pipeline::

    on_start ─▶ diff ─▶ exit hooks ─▶ (resolve ─▶ controller)* ─▶ commit ─▶ URL ─▶ on_success
                             │                 │
                             └──── reject ─────┴─▶ on_error  (state untouched)

Exit hooks run one at a time, deepest route first. Resolvers and
controllers run route by route, parent before child. ``current`` and
``previous`` are only written on commit.

Transitions never overlap: a navigation requested while another is in
flight waits for it to settle, then diffs against whatever it committed.
Everything up to the URL write holds the transition lock; ``on_success``
and ``on_error`` run after it is released.
"""

import logging
from collections.abc import Coroutine, Mapping
from functools import partial
from typing import Any

import anyio

from wayfinder._internal.invoke import invoke
from wayfinder._internal.types import Hook
from wayfinder.activation import activate, exit_hook
from wayfinder.config import RouterConfig
from wayfinder.errors import (
    AbstractRouteError,
    ConfigurationError,
    ExitRejectedError,
    ResolveRejectedError,
    RouteNotFoundError,
)
from wayfinder.history import HistoryWriter, MemoryHistory, UrlListener
from wayfinder.resolve import run_resolve
from wayfinder.routing.registry import RouteRegistry
from wayfinder.routing.route import Route, RouteMatch
from wayfinder.state import RouteState
from wayfinder.transition import Transition, TransitionPhase, plan_transition
from wayfinder.url_router import UrlRouter

logger = logging.getLogger("wayfinder.transition")

_ROUTE_OPTIONS = frozenset({"url", "controller", "resolve", "parent", "abstract", "title"})


class Router:
    """The navigation engine.

    Usage::

        router = Router()

        router.route("home", url="/home", controller=Home)
        router.route("foo", url="/foo/:fooId", controller=Foo)
        router.route("foo.bar", url="/bar/:barId", controller=Bar, resolve=load_bar)

        await router.go("foo.bar", {"fooId": 1, "barId": 2})
        router.current.url()             # "#!/foo/1/bar/2"
        router.href("foo.bar", {"barId": 3})   # "#!/foo/1/bar/3"

    There is no process-wide default instance; construct one and pass it
    where it is needed.
    """

    __slots__ = (
        "_current",
        "_error_hooks",
        "_instances",
        "_lock",
        "_previous",
        "_start_hooks",
        "_success_hooks",
        "_transition",
        "config",
        "history",
        "registry",
        "url_router",
    )

    def __init__(
        self,
        config: RouterConfig | None = None,
        *,
        history: HistoryWriter | None = None,
    ) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self.registry = RouteRegistry()
        self.url_router = UrlRouter(prefix=self.config.prefix, default=self.config.default_path)
        self.history: HistoryWriter = history if history is not None else MemoryHistory()
        self._current: RouteState | None = None
        self._previous: RouteState | None = None
        self._transition: Transition | None = None
        self._instances: dict[str, Any] = {}
        self._lock: anyio.Lock | None = None  # Created lazily on first transition
        self._start_hooks: list[Hook] = []
        self._success_hooks: list[Hook] = []
        self._error_hooks: list[Hook] = []

    # -- Route registration --

    def route(
        self,
        name: str,
        definition: Mapping[str, Any] | None = None,
        /,
        **options: Any,
    ) -> "Router":
        """Register a route. Chainable.

        Options may be given as a dict, as keywords, or both (keywords
        win): ``url``, ``controller``, ``resolve``, ``parent``,
        ``abstract``, ``title``.

        Concrete routes with a URL are also registered with the URL
        router, so ``url_router.on_change()`` can dispatch to them.
        """
        merged = {**(definition or {}), **options}
        unknown = set(merged) - _ROUTE_OPTIONS
        if unknown:
            msg = (
                f"Unknown option(s) {sorted(unknown)} for route '{name}'. "
                f"Valid options: {sorted(_ROUTE_OPTIONS)}."
            )
            raise ConfigurationError(msg)

        route = self.registry.register(name, **merged)
        if not route.abstract and route.pattern.addressable:
            self.url_router.when(
                route.pattern,
                partial(self._dispatch_url, route),
                name=route.name,
            )
        return self

    def otherwise(self, path: str) -> "Router":
        """Set the path the URL router falls back to on no match. Chainable."""
        self.url_router.otherwise(path)
        return self

    def listen(self, listener: UrlListener) -> None:
        """Connect a platform URL listener to the URL router."""
        listener.listen(self.url_router.on_change)

    # -- Lifecycle hooks --

    def on_start(self, func: Hook) -> Hook:
        """Register a hook called with the target route as a transition starts.

        Async hooks are awaited, so a hook may delay the pipeline.

        Usage::

            @router.on_start
            async def show_spinner(route):
                spinner.show()
        """
        self._start_hooks.append(func)
        return func

    def on_success(self, func: Hook) -> Hook:
        """Register a hook called with the new ``RouteState`` after commit."""
        self._success_hooks.append(func)
        return func

    def on_error(self, func: Hook) -> Hook:
        """Register a hook called with the error when a transition fails."""
        self._error_hooks.append(func)
        return func

    # -- State --

    @property
    def current(self) -> RouteState | None:
        """The last committed state, or ``None`` before the first commit."""
        return self._current

    @property
    def previous(self) -> RouteState | None:
        """The state ``current`` replaced."""
        return self._previous

    @property
    def transition(self) -> Transition | None:
        """The transition in flight, if any."""
        return self._transition

    @property
    def phase(self) -> TransitionPhase:
        if self._transition is None:
            return TransitionPhase.IDLE
        return self._transition.phase

    def controller_instance(self, name: str) -> Any:
        """The active controller instance for an entered route, or ``None``."""
        return self._instances.get(name)

    # -- URLs --

    def href(self, name: str, params: Mapping[str, Any] | None = None) -> str:
        """Build the URL for a named route.

        Starts from the current params the route declares, with *params*
        on top. Raises ``RouteNotFoundError`` or ``MissingParamError``.
        """
        route = self.registry.lookup(name)
        return f"{self.config.prefix}{route.pattern.render(self._merge_params(route, params))}"

    def match(self, url: str) -> RouteMatch | None:
        """Match a raw URL to a route and its params, or ``None``."""
        found = self.url_router.match(url)
        if found is None or found.rule.name not in self.registry:
            return None
        return RouteMatch(route=self.registry.lookup(found.rule.name), params=found.params)

    # -- Navigation --

    def go(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        *,
        location: bool | None = None,
    ) -> Coroutine[Any, Any, RouteState]:
        """Navigate to a named route.

        The name is checked immediately — ``RouteNotFoundError`` and
        ``AbstractRouteError`` are raised before anything is scheduled.
        Returns the transition coroutine; await it for the new state::

            state = await router.go("foo.baz", {"bazId": 2})
        """
        route = self.registry.lookup(name)
        if route.abstract:
            raise AbstractRouteError(name)
        if location is None:
            location = self.config.go_updates_location
        return self.transition_to(route, params, location=location)

    async def reload(
        self,
        params: Mapping[str, Any] | None = None,
        hard_refresh: bool = False,
    ) -> RouteState:
        """Re-run the transition to the current route.

        *params* are merged over the current ones. A hard refresh exits
        and re-enters the whole ancestor chain instead of just the
        changed part.
        """
        if self._current is None:
            msg = "Nothing to reload: no route has been entered yet."
            raise RuntimeError(msg)
        return await self.transition_to(
            self._current.route,
            params,
            location=True,
            hard=hard_refresh,
        )

    async def transition_to(
        self,
        route: Route,
        params: Mapping[str, Any] | None = None,
        *,
        location: bool = False,
        hard: bool = False,
        inherit: bool = True,
    ) -> RouteState:
        """Transition to *route* and return the committed state.

        Raises ``ExitRejectedError`` / ``ResolveRejectedError`` (or
        whatever a controller raised) if the transition fails; the
        current state is left as it was.

        With ``inherit=False`` the current params are ignored and
        *params* is the whole new state. URL dispatch uses this, since a
        URL carries every param its route declares.

        ``on_success`` / ``on_error`` hooks run after the transition lock
        is released, so a hook may itself ``await router.go(...)``::

            @router.on_error
            async def to_login(error):
                await router.go("login")
        """
        if self.registry.get(route.name) is not route:
            raise RouteNotFoundError(route.name)
        if route.abstract:
            raise AbstractRouteError(route.name)

        if self._lock is None:
            self._lock = anyio.Lock()
        async with self._lock:
            transition = Transition(
                from_state=self._current,
                to_route=route,
                to_params=self._merge_params(route, params, inherit=inherit),
                location=location,
                hard=hard,
            )
            self._transition = transition
            try:
                state = await self._run(transition)
            finally:
                self._transition = None

        if state is None:
            error = transition.error
            for hook in self._error_hooks:
                await invoke(hook, error)
            raise error
        for hook in self._success_hooks:
            await invoke(hook, state)
        return state

    # -- Pipeline --

    async def _run(self, transition: Transition) -> RouteState | None:
        """Run the pipeline through commit and the URL write.

        Returns ``None`` if the transition failed; the error is left on
        ``transition.error``.
        """
        route = transition.to_route
        logger.debug(
            "Transition %s -> %s %r",
            transition.from_state.name if transition.from_state else None,
            route.name,
            transition.to_params,
        )

        try:
            url = await self._execute(transition)
        except Exception as exc:
            transition.phase = TransitionPhase.FAILED
            transition.error = exc
            logger.info("Transition to '%s' failed: %s", route.name, exc)
            return None

        state = self._commit(transition)
        if url is not None:
            await invoke(self.history.push_state, state.to_dict(), route.title, url)
        return state

    async def _execute(self, transition: Transition) -> str | None:
        """Run everything up to commit. Returns the URL to write, if any."""
        route = transition.to_route

        for hook in self._start_hooks:
            await invoke(hook, route)

        transition.phase = TransitionPhase.DIFFING
        url = None
        if transition.location:
            url = f"{self.config.prefix}{route.pattern.render(transition.to_params)}"

        plan = plan_transition(
            self.registry,
            transition.from_state,
            route,
            transition.to_params,
            hard=transition.hard,
        )
        transition.plan = plan

        transition.phase = TransitionPhase.EXITING
        for exiting in plan.exits:
            await self._exit(exiting)

        for entering in plan.enters:
            await self._enter(transition, entering)

        return url

    async def _exit(self, route: Route) -> None:
        hook = exit_hook(self._instances.get(route.name))
        if hook is not None:
            try:
                await invoke(hook)
            except Exception as exc:
                raise ExitRejectedError(route, str(exc)) from exc
        self._instances.pop(route.name, None)

    async def _enter(self, transition: Transition, route: Route) -> None:
        params = transition.to_params

        transition.phase = TransitionPhase.RESOLVING
        try:
            resolved = await run_resolve(route.resolve, params)
        except Exception as exc:
            raise ResolveRejectedError(route, str(exc)) from exc

        transition.phase = TransitionPhase.ENTERING
        self._instances[route.name] = await activate(route.controller, dict(params), resolved)

    def _commit(self, transition: Transition) -> RouteState:
        state = RouteState(
            route=transition.to_route,
            params=transition.to_params,
            prefix=self.config.prefix,
        )
        self._previous = transition.from_state
        self._current = state
        transition.phase = TransitionPhase.COMMITTED
        logger.debug("Committed %s %r", state.name, transition.to_params)
        return state

    # -- Helpers --

    def _merge_params(
        self,
        route: Route,
        params: Mapping[str, Any] | None,
        *,
        inherit: bool = True,
    ) -> dict[str, Any]:
        """Current params the route declares, overlaid with *params*."""
        merged: dict[str, Any] = {}
        if inherit and self.config.inherit_params and self._current is not None:
            declared = self.registry.declared_params(route)
            merged.update(
                (key, value) for key, value in self._current.params.items() if key in declared
            )
        if params:
            merged.update(params)
        return merged

    def _dispatch_url(
        self,
        route: Route,
        params: dict[str, str],
    ) -> Coroutine[Any, Any, RouteState]:
        return self.transition_to(route, params, inherit=False)

    def __repr__(self) -> str:
        current = self._current.name if self._current else None
        return f"<Router routes={len(self.registry)} current={current!r}>"

