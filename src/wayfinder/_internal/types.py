"""Shared type aliases used across wayfinder modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Controller — a function or class invoked with (params, resolved)
Controller: TypeAlias = Callable[..., Any]

# Resolver — produces (or awaits) data a route needs before activation
Resolver: TypeAlias = Callable[..., Any]

# Lifecycle hook — on_start / on_success / on_error observers
Hook: TypeAlias = Callable[..., Any]

# Route params as bound in a RouteState
Params: TypeAlias = dict[str, Any]
