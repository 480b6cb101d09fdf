"""Tests for the View plugin registry and the logging plugin."""

import logging

import pytest

import menufilter.plugins.logging  # noqa: F401
from menufilter import InMemoryMenuStorage, MenuLink, RouteDescriptor, SqlQuery, View
from menufilter.plugins._base_plugin import BasePlugin  # Not public API


class StatusPlugin(BasePlugin):
    plugin_code = "status"
    plugin_description = "Published nodes only"
    handles_argument = True

    def __init__(self, view, **config):
        super().__init__(view, **config)
        self.values = []

    def apply(self, query, value):
        self.values.append(value)
        query.add_where_expression(1, "node_field_data.status = :status", {":status": 1})


class TracePlugin(BasePlugin):
    plugin_code = "trace"
    plugin_description = "Records wrapped calls"

    def __init__(self, view, **config):
        super().__init__(view, **config)
        self.calls = []

    def wrap_handler(self, view, entry, call_next):
        def wrapper(query, value):
            self.calls.append((entry.name, value))
            return call_next(query, value)

        return wrapper


if "status" not in View.available_plugins():
    View.register_plugin(StatusPlugin)
if "trace" not in View.available_plugins():
    View.register_plugin(TracePlugin)


def test_builtin_plugins_registered():
    available = View.available_plugins()
    assert {"menu_children", "logging"} <= set(available)


def test_register_plugin_validation():
    class NoCode(BasePlugin):
        pass

    class OtherStatus(BasePlugin):
        plugin_code = "status"

    with pytest.raises(TypeError):
        View.register_plugin(object)
    with pytest.raises(ValueError):
        View.register_plugin(NoCode)
    with pytest.raises(ValueError):
        View.register_plugin(OtherStatus)
    # registering the same class again is idempotent
    View.register_plugin(StatusPlugin)


def test_plug_errors():
    view = View("children")
    with pytest.raises(ValueError):
        view.plug("missing")
    with pytest.raises(TypeError):
        view.plug(StatusPlugin)
    view.plug("status")
    with pytest.raises(ValueError):
        view.plug("status")
    with pytest.raises(AttributeError):
        view.unknown_plugin
    with pytest.raises(ValueError):
        View("")


def test_arguments_receive_values_in_attachment_order():
    view = View("children").plug("status").plug("menu_children", target_menus=["main"])
    assert view.arguments() == ("status", "menu_children")
    query = view.build("ignored", None)
    assert view.status.values == ["ignored"]
    assert query.where[1] == [("node_field_data.status = :status", {":status": 1})]
    assert len(query.where[0]) == 1


def test_build_uses_given_query():
    view = View("children").plug("status")
    query = SqlQuery("node_field_data")
    assert view.build(query=query) is query
    assert view.status.values == [None]


def test_middleware_wraps_every_argument():
    view = View("children").plug("trace").plug("status").plug("menu_children")
    view.build("x", "node/1")
    assert view.trace.calls == [("status", "x"), ("menu_children", "node/1")]
    assert view._entries["status"].plugins == ["trace"]
    view.set_plugin_enabled("trace", False)
    view.build("y")
    assert len(view.trace.calls) == 2


def _logged_view(**config):
    storage = InMemoryMenuStorage()
    storage.add_menu("main", "Main navigation")
    storage.add_link(MenuLink(7, 3, "main", RouteDescriptor.entity("node", 42), title="Team"))
    view = View("children", storage=storage).plug("menu_children", target_menus=["main"])
    return view.plug("logging", **config)


def _messages(caplog):
    return [record.getMessage() for record in caplog.records if record.name == "menufilter"]


def test_logging_plugin_reports_link_and_cache_use(caplog):
    view = _logged_view(flags="timing:off")
    with caplog.at_level(logging.INFO, logger="menufilter"):
        view.build("node/42")
        view.build("42")
    assert _messages(caplog) == [
        "menu_children 'node/42': entity.node.canonical(node=42) -> link 7 in main"
        " | cache 0 hit / 1 miss",
        "menu_children '42': entity.node.canonical(node=42) -> link 7 in main"
        " | cache 1 hit / 0 miss",
    ]


def test_logging_plugin_reports_root_fallback(caplog):
    view = _logged_view(flags="timing:off,cache:off")
    with caplog.at_level(logging.INFO, logger="menufilter"):
        view.build("/unknown/path")
        view.build("node/5")
    assert _messages(caplog) == [
        "menu_children '/unknown/path': unresolved, root only",
        "menu_children 'node/5': entity.node.canonical(node=5) -> no link, root only",
    ]


def test_logging_plugin_reports_missing_input(caplog):
    view = _logged_view(flags="cache:off")
    with caplog.at_level(logging.INFO, logger="menufilter"):
        view.build()
    (message,) = _messages(caplog)
    assert message.startswith("menu_children None: no parent filter | ")
    assert message.endswith(" ms")


def test_logging_plugin_level_and_plain_arguments(caplog):
    view = View("children").plug("status").plug("logging", level=logging.DEBUG, flags="timing:off")
    with caplog.at_level(logging.DEBUG, logger="menufilter"):
        view.build("x")
    assert [(r.levelno, r.getMessage()) for r in caplog.records if r.name == "menufilter"] == [
        (logging.DEBUG, "status 'x': handled | cache 0 hit / 0 miss")
    ]


def test_logging_plugin_disabled_via_configure(caplog):
    view = _logged_view()
    view.logging.configure(flags="enabled:off")
    with caplog.at_level(logging.INFO, logger="menufilter"):
        view.build("node/42")
    assert _messages(caplog) == []


def test_base_plugin_flags_parsing():
    view = View("children").plug("status", flags="enabled,verbose:off")
    assert view.get_config("status") == {"enabled": True, "verbose": False}
