"""Tests for page reference resolution."""

import pytest

from menufilter import PathRouter, RouteDescriptor, RouteNotFound, RouteResolver
from menufilter.core.routing import is_numeric


class RecordingRouter:
    def __init__(self, result=None, error=None):
        self.paths = []
        self.result = result
        self.error = error

    def resolve_path(self, path):
        self.paths.append(path)
        if self.error is not None:
            raise self.error
        return self.result


def test_route_descriptor_drops_null_parameters():
    route = RouteDescriptor("view.page", {"a": 1, "b": None, "c": "x"})
    assert route.parameters == {"a": 1, "c": "x"}
    assert route == RouteDescriptor("view.page", {"a": 1, "c": "x"})
    assert route != RouteDescriptor("view.other", {"a": 1, "c": "x"})
    assert hash(route) == hash(RouteDescriptor("view.page", {"a": 1, "c": "x"}))


def test_route_descriptor_hash_ignores_parameter_order():
    first = RouteDescriptor("view.page", {"a": 1, "b": 2})
    second = RouteDescriptor("view.page", {"b": 2, "a": 1})
    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1
    assert {first: "page"}[second] == "page"


@pytest.mark.parametrize("value", [42, "42", " 42 ", "42.0", "+42"])
def test_numeric_input_maps_to_canonical_node_route(value):
    router = RecordingRouter()
    route = RouteResolver(router).resolve(value)
    assert route == RouteDescriptor("entity.node.canonical", {"node": 42})
    assert isinstance(route.parameters["node"], int)
    assert router.paths == []


@pytest.mark.parametrize(
    "value, expected",
    [("5", True), ("-3.5", True), (".5", True), ("1e3", True), ("node/5", False), ("", False), (True, False)],
)
def test_is_numeric(value, expected):
    assert is_numeric(value) is expected


@pytest.mark.parametrize("value", ["node/42", "/node/42", "node/42/", "//node/42//"])
def test_path_input_is_normalised_before_routing(value):
    target = RouteDescriptor("entity.node.canonical", {"node": 42})
    router = RecordingRouter(result=target)
    assert RouteResolver(router).resolve(value) == target
    assert router.paths == ["/node/42"]


def test_unresolved_path_returns_none():
    resolver = RouteResolver(RecordingRouter(error=RouteNotFound("/unknown/path")))
    assert resolver.resolve("/unknown/path") is None
    assert RouteResolver(RecordingRouter(result=None)).resolve("about") is None


def test_collaborator_failure_propagates():
    resolver = RouteResolver(RecordingRouter(error=RuntimeError("routing backend down")))
    with pytest.raises(RuntimeError):
        resolver.resolve("about")


def test_descriptor_passes_through_unchanged():
    route = RouteDescriptor("view.frontpage.page_1")
    router = RecordingRouter()
    assert RouteResolver(router).resolve(route) is route
    assert router.paths == []


def test_path_router_default_patterns():
    router = PathRouter.default()
    assert router.resolve_path("/node/7") == RouteDescriptor("entity.node.canonical", {"node": 7})
    assert router.resolve_path("/") == RouteDescriptor("<front>")
    with pytest.raises(RouteNotFound):
        router.resolve_path("/node/abc")


def test_path_router_first_registered_pattern_wins():
    router = PathRouter()
    router.add("/docs/{section}", "docs.section").add("/docs/{rest:path}", "docs.any")
    assert router.resolve_path("/docs/intro") == RouteDescriptor("docs.section", {"section": "intro"})
    assert router.resolve_path("/docs/a/b") == RouteDescriptor("docs.any", {"rest": "a/b"})
    assert router.patterns() == ("/docs/{section}", "/docs/{rest:path}")


def test_path_router_rejects_unknown_converter_and_empty_name():
    router = PathRouter()
    with pytest.raises(ValueError):
        router.add("/x/{id:uuid}", "x")
    with pytest.raises(ValueError):
        router.add("/x", "")
