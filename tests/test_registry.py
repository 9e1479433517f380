"""Tests for wayfinder.routing.registry — the route tree."""

import pytest

from wayfinder.errors import (
    DuplicateParamError,
    DuplicateRouteError,
    RouteNotFoundError,
    UnknownParentError,
)
from wayfinder.resolve import Named, Ready, Single
from wayfinder.routing.registry import RouteRegistry
from wayfinder.routing.route import Route


@pytest.fixture
def registry() -> RouteRegistry:
    registry = RouteRegistry()
    registry.register("home", url="/home")
    registry.register("home.child", url="/child")
    registry.register("foo", url="/foo/:fooId")
    registry.register("foo.bar", url="/bar/:barId", title="Bar")
    registry.register("foo.biz", url="/biz?bizId")
    return registry


class TestRegister:
    def test_dotted_name_infers_parent(self, registry: RouteRegistry) -> None:
        child = registry.lookup("home.child")
        assert child.parent is registry.lookup("home")

    def test_root_has_no_parent(self, registry: RouteRegistry) -> None:
        assert registry.lookup("home").parent is None

    def test_explicit_parent_name(self, registry: RouteRegistry) -> None:
        route = registry.register("detail", url="/detail", parent="foo")
        assert route.parent is registry.lookup("foo")

    def test_explicit_parent_wins_over_dots(self, registry: RouteRegistry) -> None:
        route = registry.register("home.modal", parent="foo")
        assert route.parent is registry.lookup("foo")

    def test_explicit_parent_route(self, registry: RouteRegistry) -> None:
        foo = registry.lookup("foo")
        route = registry.register("detail", parent=foo)
        assert route.parent is foo

    def test_foreign_parent_route(self, registry: RouteRegistry) -> None:
        other = RouteRegistry()
        stranger = other.register("foo")
        with pytest.raises(UnknownParentError):
            registry.register("detail", parent=stranger)

    def test_unknown_parent(self) -> None:
        registry = RouteRegistry()
        with pytest.raises(UnknownParentError) as exc_info:
            registry.register("a.b")
        assert exc_info.value.parent == "a"
        assert "Register parent routes before their children" in str(exc_info.value)

    def test_forward_reference(self) -> None:
        registry = RouteRegistry()
        with pytest.raises(UnknownParentError):
            registry.register("child", parent="later")

    def test_duplicate_name(self, registry: RouteRegistry) -> None:
        with pytest.raises(DuplicateRouteError, match="'home' is already registered"):
            registry.register("home")

    def test_duplicate_param_in_chain(self, registry: RouteRegistry) -> None:
        with pytest.raises(DuplicateParamError):
            registry.register("foo.again", url="/again/:fooId")
        assert "foo.again" not in registry

    def test_pattern_compiled_at_registration(self, registry: RouteRegistry) -> None:
        route = registry.register("foo.bar.qux", url="/qux?page")
        assert route.pattern.template == "/foo/:fooId/bar/:barId/qux"
        assert route.pattern.query_names == ("page",)

    def test_hand_built_route_has_empty_pattern(self) -> None:
        route = Route(name="loose")
        assert route.pattern.addressable is False
        assert route.pattern.render({}) == "/"

    def test_title_defaults_to_name(self, registry: RouteRegistry) -> None:
        assert registry.lookup("home").title == "home"
        assert registry.lookup("foo.bar").title == "Bar"

    def test_resolve_is_normalized(self) -> None:
        registry = RouteRegistry()

        def load():
            return 1

        assert isinstance(registry.register("a", resolve=load).resolve, Single)
        assert isinstance(registry.register("b", resolve={"x": load}).resolve, Named)
        assert isinstance(registry.register("c", resolve=42).resolve, Ready)
        assert registry.register("d").resolve is None

    def test_static_resolve_from_controller_class(self) -> None:
        class Page:
            @staticmethod
            def resolve():
                return "data"

        registry = RouteRegistry()
        route = registry.register("page", controller=Page)
        assert isinstance(route.resolve, Single)


class TestLookup:
    def test_lookup(self, registry: RouteRegistry) -> None:
        assert registry.lookup("foo").name == "foo"
        assert registry.get("foo") is registry.lookup("foo")

    def test_missing(self, registry: RouteRegistry) -> None:
        with pytest.raises(RouteNotFoundError, match="Route 'nope' not found."):
            registry.lookup("nope")

    def test_contains(self, registry: RouteRegistry) -> None:
        assert "foo.bar" in registry
        assert "foo.nope" not in registry

    def test_iterates_in_registration_order(self, registry: RouteRegistry) -> None:
        assert [r.name for r in registry] == ["home", "home.child", "foo", "foo.bar", "foo.biz"]
        assert len(registry) == 5

    def test_concrete_skips_abstract(self, registry: RouteRegistry) -> None:
        registry.register("admin", abstract=True)
        assert "admin" not in [r.name for r in registry.concrete()]
        assert len(registry.concrete()) == 5


class TestHierarchy:
    def test_ancestor_chain(self, registry: RouteRegistry) -> None:
        bar = registry.lookup("foo.bar")
        assert registry.ancestor_chain(bar) == (registry.lookup("foo"), bar)

    def test_ancestor_chain_of_root(self, registry: RouteRegistry) -> None:
        home = registry.lookup("home")
        assert registry.ancestor_chain(home) == (home,)

    def test_full_url_template(self, registry: RouteRegistry) -> None:
        assert registry.full_url_template(registry.lookup("foo.bar")) == "/foo/:fooId/bar/:barId"
        assert registry.full_url_template(registry.lookup("foo.biz")) == "/foo/:fooId/biz?bizId"

    def test_child_without_url_inherits_template(self, registry: RouteRegistry) -> None:
        route = registry.register("foo.panel")
        assert registry.full_url_template(route) == "/foo/:fooId"

    def test_declared_params(self, registry: RouteRegistry) -> None:
        assert registry.declared_params(registry.lookup("foo.biz")) == ("fooId", "bizId")
        assert registry.declared_params(registry.lookup("home")) == ()

    def test_depth_and_descent(self, registry: RouteRegistry) -> None:
        foo = registry.lookup("foo")
        bar = registry.lookup("foo.bar")
        assert foo.depth == 0
        assert bar.depth == 1
        assert bar.is_descendant_of(foo)
        assert not foo.is_descendant_of(bar)
        assert not bar.is_descendant_of(bar)
