"""Shared fixtures — a small route tree with recording controllers."""

from typing import Any

import pytest

from wayfinder.deferred import Deferred, defer
from wayfinder.router import Router


class Recorder:
    """A controller that records every activation.

    Appends its name to a shared log so tests can assert activation order.
    """

    def __init__(self, name: str, log: list[str]) -> None:
        self.name = name
        self.log = log
        self.calls: list[tuple[dict[str, Any], Any]] = []

    def __call__(self, params: dict[str, Any], resolved: Any) -> None:
        self.calls.append((dict(params), resolved))
        self.log.append(self.name)

    @property
    def count(self) -> int:
        return len(self.calls)

    @property
    def last(self) -> tuple[dict[str, Any], Any]:
        return self.calls[-1]


@pytest.fixture
def log() -> list[str]:
    return []


@pytest.fixture
def controllers(log: list[str]) -> dict[str, Recorder]:
    names = ("home", "child", "sibling", "grandChild", "foo", "bar", "baz", "biz")
    return {name: Recorder(name, log) for name in names}


@pytest.fixture
def baz_data() -> Deferred:
    """Resolve value for ``foo.baz``; tests settle it before navigating there."""
    return defer()


@pytest.fixture
def router(controllers: dict[str, Recorder], baz_data: Deferred) -> Router:
    router = Router()
    (
        router.route("home", url="/home", controller=controllers["home"])
        .route("home.child", url="/child", controller=controllers["child"])
        .route("home.sibling", url="/sibling", controller=controllers["sibling"])
        .route(
            "home.child.grandChild",
            url="/grandChild",
            controller=controllers["grandChild"],
        )
        .route("foo", url="/foo/:fooId", controller=controllers["foo"])
        .route("foo.bar", url="/bar/:barId", controller=controllers["bar"], title="Bar")
        .route(
            "foo.baz",
            url="/baz/:bazId",
            controller=controllers["baz"],
            resolve=lambda: baz_data,
        )
        .route("foo.biz", url="/biz?bizId", controller=controllers["biz"])
    )
    return router
