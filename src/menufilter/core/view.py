"""View with plugin pipeline (source of truth).

If this module disappeared, rebuild it exactly as described. ``View`` is the
host a filter plugin is attached to: it owns the collaborators of the menu
children filter, a global plugin registry, per-view plugin instances,
middleware wrapping of argument handlers, and plugin state stored on the
view instance.

Constructor
-----------
``View(name, *, base_table="node_field_data", storage=None,
path_router=None, cache=None, link_resolver=None, filter_builder=None,
join_handler=None, build_kwargs=None)``

- Missing collaborators get defaults: ``InMemoryMenuStorage``,
  ``PathRouter.default()``, a fresh ``LinkResolutionCache``, a
  ``MenuLinkResolver`` over storage + cache, ``QueryFilterBuilder`` and
  ``MenuChildrenJoin`` on ``base_table``.
- Passing the same ``LinkResolutionCache`` to several views shares the memo.
  When ``link_resolver`` is given, ``cache`` is taken from it.

Internal state
--------------
- ``_plugins``: instantiated plugins in the order they were attached.
- ``_plugins_by_name``: name → plugin instance.
- ``_plugin_info``: per-plugin store with a ``"--base--"`` bucket holding
  ``config`` and ``locals``.
- ``_entries`` / ``_handlers``: argument entries and their wrapped callables,
  in attachment order.

Global registry
---------------
``View.register_plugin(plugin_class, name=None)`` validates that
``plugin_class`` is a ``BasePlugin`` subclass with a ``plugin_code``.
Re-registering a code with a different class raises ``ValueError`` unless
``name`` is given explicitly. ``available_plugins`` returns a shallow copy.

Attaching plugins
-----------------
``plug(plugin_name, **config)`` instantiates the registered class, appends
it to ``_plugins``, registers an ``ArgumentEntry`` when the plugin handles
arguments, rebuilds handlers and returns ``self``. Attaching a name twice
raises ``ValueError``. ``__getattr__`` exposes attached plugins by name or
raises ``AttributeError``.

Wrapping pipeline
-----------------
For each argument entry, middleware layers are built from ``_plugins`` in
reverse order (first attached = outermost). Each layer is skipped while
``is_plugin_enabled(plugin_name)`` is False. Plugins keep per-build state in the
``locals`` bucket through ``set_runtime_data`` / ``get_runtime_data``.

Building
--------
``build(*values, query=None, **options)`` merges ``options`` with
``build_kwargs`` through ``SmartOptions``. ``reset_cache=True`` clears the
link cache first. A ``SqlQuery`` on ``base_table`` is created when
``query`` is None. Argument handlers run in attachment order, the n-th one
receiving ``values[n]`` (``None`` when fewer values are given). Returns the
query.
"""

from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Type

from smartseeds import SmartOptions

from menufilter.core.cache import LinkResolutionCache
from menufilter.core.filters import MenuChildrenJoin, QueryFilterBuilder
from menufilter.core.link_resolver import MenuLinkResolver
from menufilter.core.query import SqlQuery
from menufilter.core.routing import PathRouter, RouteResolver
from menufilter.core.storage import InMemoryMenuStorage, MenuTreeStorage
from menufilter.plugins._base_plugin import ArgumentEntry, BasePlugin

__all__ = ["View"]

_PLUGIN_REGISTRY: Dict[str, Type[BasePlugin]] = {}


class View:
    """Query host with plugin registry/pipeline support."""

    __slots__ = (
        "name",
        "base_table",
        "storage",
        "path_router",
        "cache",
        "route_resolver",
        "link_resolver",
        "filter_builder",
        "join_handler",
        "_build_defaults",
        "_plugins",
        "_plugins_by_name",
        "_plugin_info",
        "_entries",
        "_handlers",
    )

    def __init__(
        self,
        name: str,
        *,
        base_table: str = "node_field_data",
        storage: Optional[MenuTreeStorage] = None,
        path_router: Any = None,
        cache: Optional[LinkResolutionCache] = None,
        link_resolver: Optional[MenuLinkResolver] = None,
        filter_builder: Optional[QueryFilterBuilder] = None,
        join_handler: Optional[MenuChildrenJoin] = None,
        build_kwargs: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._plugins_by_name: Dict[str, BasePlugin] = {}
        self._plugins: List[BasePlugin] = []
        self._plugin_info: Dict[str, Dict[str, Any]] = {}
        self._entries: Dict[str, ArgumentEntry] = {}
        self._handlers: Dict[str, Callable] = {}
        if not name:
            raise ValueError("View requires a name")
        self.name = name
        self.base_table = base_table
        self.storage = storage if storage is not None else InMemoryMenuStorage()
        self.path_router = path_router if path_router is not None else PathRouter.default()
        if link_resolver is None:
            link_resolver = MenuLinkResolver(self.storage, cache)
        self.link_resolver = link_resolver
        self.cache = link_resolver.cache
        self.route_resolver = RouteResolver(self.path_router)
        self.filter_builder = filter_builder or QueryFilterBuilder()
        self.join_handler = join_handler or MenuChildrenJoin(
            table=self.filter_builder.table, base_table=base_table
        )
        self._build_defaults: Dict[str, Any] = {"reset_cache": False}
        self._build_defaults.update(build_kwargs or {})

    # ------------------------------------------------------------------
    # Plugin registration
    # ------------------------------------------------------------------
    @classmethod
    def register_plugin(cls, plugin_class: Type[BasePlugin], name: Optional[str] = None) -> None:
        """Register a plugin class globally.

        Args:
            plugin_class: A BasePlugin subclass with plugin_code defined
            name: Optional override name. If provided, overwrites any existing
                  registration. If not provided, uses plugin_code and raises
                  if already registered.
        """
        if not isinstance(plugin_class, type) or not issubclass(plugin_class, BasePlugin):
            raise TypeError("plugin_class must be a BasePlugin subclass")
        if not getattr(plugin_class, "plugin_code", None):
            raise ValueError(
                f"Plugin {plugin_class.__name__} not following standards: missing plugin_code"
            )
        code = name or plugin_class.plugin_code
        if name is None:
            existing = _PLUGIN_REGISTRY.get(code)
            if existing is not None and existing is not plugin_class:
                raise ValueError(f"Plugin '{code}' already registered")
        _PLUGIN_REGISTRY[code] = plugin_class

    @classmethod
    def available_plugins(cls) -> Dict[str, Type[BasePlugin]]:
        return dict(_PLUGIN_REGISTRY)

    def plug(self, plugin: str, **config: Any) -> "View":
        """Attach a plugin by name (previously registered globally)."""
        if not isinstance(plugin, str):
            raise TypeError(
                f"Plugin must be referenced by name string, got {type(plugin).__name__}"
            )
        plugin_class = _PLUGIN_REGISTRY.get(plugin)
        if plugin_class is None:
            available = ", ".join(sorted(_PLUGIN_REGISTRY)) or "none"
            raise ValueError(
                f"Unknown plugin '{plugin}'. Register it first. Available plugins: {available}"
            )
        if plugin_class.plugin_code in self._plugins_by_name:
            raise ValueError(
                f"Plugin '{plugin_class.plugin_code}' already attached to view '{self.name}'"
            )
        instance = plugin_class(self, **config)
        self._plugins.append(instance)
        self._plugins_by_name[instance.name] = instance
        if instance.handles_argument:
            self._entries[instance.name] = ArgumentEntry(
                name=instance.name, func=instance.apply, plugins=[]
            )
        self._rebuild_handlers()
        return self

    def arguments(self) -> tuple:
        """Names of the argument handlers in the order ``build`` feeds them."""
        return tuple(self._entries)

    def get_config(self, plugin_name: str) -> Dict[str, Any]:
        plugin = self._plugins_by_name.get(plugin_name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to view '{self.name}'")
        return plugin.configuration()

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        plugin = self._plugins_by_name.get(name)
        if plugin is None:
            raise AttributeError(f"No plugin named '{name}' attached to view '{self.name}'")
        return plugin

    # ------------------------------------------------------------------
    # Runtime helpers (state stored on plugin_info)
    # ------------------------------------------------------------------
    def _get_plugin_bucket(self, plugin_name: str) -> Dict[str, Any]:
        bucket = self._plugin_info.get(plugin_name)
        if bucket is None:
            raise AttributeError(f"No plugin named '{plugin_name}' attached to view '{self.name}'")
        return bucket.setdefault("--base--", {"config": {}, "locals": {}})

    def set_plugin_enabled(self, plugin_name: str, enabled: bool = True) -> None:
        self._get_plugin_bucket(plugin_name).setdefault("locals", {})["enabled"] = bool(enabled)

    def is_plugin_enabled(self, plugin_name: str) -> bool:
        bucket = self._get_plugin_bucket(plugin_name)
        entry_locals = bucket.get("locals", {})
        if "enabled" in entry_locals:
            return bool(entry_locals["enabled"])
        return bool(bucket.get("config", {}).get("enabled", True))

    def set_runtime_data(self, plugin_name: str, key: str, value: Any) -> None:
        self._get_plugin_bucket(plugin_name).setdefault("locals", {})[key] = value

    def get_runtime_data(self, plugin_name: str, key: str, default: Any = None) -> Any:
        return self._get_plugin_bucket(plugin_name).get("locals", {}).get(key, default)

    # ------------------------------------------------------------------
    # Wrapping pipeline
    # ------------------------------------------------------------------
    def _rebuild_handlers(self) -> None:
        handlers: Dict[str, Callable] = {}
        for logical_name, entry in self._entries.items():
            handlers[logical_name] = self._wrap_handler(entry, entry.func)
        self._handlers = handlers

    def _wrap_handler(self, entry: ArgumentEntry, call_next: Callable) -> Callable:
        wrapped = call_next
        entry.plugins = []
        for plugin in reversed(self._plugins):
            if plugin.handles_argument:
                continue
            entry.plugins.insert(0, plugin.name)
            plugin_call = plugin.wrap_handler(self, entry, wrapped)
            wrapped = self._create_wrapper(plugin, plugin_call, wrapped)
        return wrapped

    def _create_wrapper(
        self,
        plugin: BasePlugin,
        plugin_call: Callable,
        next_handler: Callable,
    ) -> Callable:
        @wraps(next_handler)
        def wrapper(*args, **kwargs):
            if not self.is_plugin_enabled(plugin.name):
                return next_handler(*args, **kwargs)
            return plugin_call(*args, **kwargs)

        return wrapper

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def build(self, *values: Any, query: Any = None, **options: Any) -> Any:
        """Run every argument handler against ``query`` and return it."""
        opts = SmartOptions(options, defaults=self._build_defaults)
        if getattr(opts, "reset_cache", False):
            self.cache.reset()
        if query is None:
            query = SqlQuery(self.base_table)
        for index, name in enumerate(self._entries):
            if not self.is_plugin_enabled(name):
                continue
            value = values[index] if index < len(values) else None
            self._handlers[name](query, value)
        return query
