"""Transitions — one navigation attempt and the tree diff that drives it.

The diff decides which part of the old ancestor chain survives::

    current:  home ─ child ─ grandChild
    target:   home ─ sibling

    retained: (home,)
    exits:    (grandChild, child)      deepest first
    enters:   (sibling,)               shallowest first

A shared ancestor is only retained while every param it (or anything
above it) declares keeps its value, so ``/foo/1/bar`` → ``/foo/2/bar``
exits and re-enters ``foo``. The target route itself is always entered:
navigating to the current route, or up to one of its ancestors,
re-runs that route's resolve and controller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from wayfinder.routing.params import params_equal

if TYPE_CHECKING:
    from wayfinder.routing.registry import RouteRegistry
    from wayfinder.routing.route import Route
    from wayfinder.state import RouteState


class TransitionPhase(Enum):
    """Where a transition is in the pipeline."""

    IDLE = "idle"
    DIFFING = "diffing"
    EXITING = "exiting"
    RESOLVING = "resolving"
    ENTERING = "entering"
    COMMITTED = "committed"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class TransitionPlan:
    """Ordered exit and enter lists for one transition."""

    retained: tuple[Route, ...] = ()
    exits: tuple[Route, ...] = ()
    enters: tuple[Route, ...] = ()


@dataclass(slots=True)
class Transition:
    """A navigation in flight. Lives until it commits or fails."""

    from_state: RouteState | None
    to_route: Route
    to_params: dict[str, Any]
    location: bool = False
    hard: bool = False
    phase: TransitionPhase = TransitionPhase.IDLE
    plan: TransitionPlan | None = None
    error: BaseException | None = field(default=None, repr=False)

    @property
    def settled(self) -> bool:
        return self.phase in (TransitionPhase.COMMITTED, TransitionPhase.FAILED)


def plan_transition(
    registry: RouteRegistry,
    from_state: RouteState | None,
    to_route: Route,
    to_params: dict[str, Any],
    *,
    hard: bool = False,
) -> TransitionPlan:
    """Diff the current state against the target and order the work.

    With ``hard=True`` nothing is retained: the whole old chain exits and
    the whole new chain enters.
    """
    to_chain = registry.ancestor_chain(to_route)
    if from_state is None:
        return TransitionPlan(enters=to_chain)

    from_chain = registry.ancestor_chain(from_state.route)
    old_params = from_state.params

    keep = 0
    if not hard:
        for old, new in zip(from_chain, to_chain, strict=False):
            if old is not new or new is to_route:
                break
            if not params_equal(old_params, to_params, registry.declared_params(new)):
                break
            keep += 1

    return TransitionPlan(
        retained=to_chain[:keep],
        exits=tuple(reversed(from_chain[keep:])),
        enters=to_chain[keep:],
    )
