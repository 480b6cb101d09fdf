"""menufilter public API surface (source of truth).

Recreate the module with these rules:
- Public exports: ``View``, the resolver components (``RouteResolver``,
  ``PathRouter``, ``LinkResolutionCache``, ``MenuLinkResolver``,
  ``ScopedMenuLinkResolver``, ``QueryFilterBuilder``) and the value types.
- Plugin registration: import built-in plugins (``menu_children``,
  ``logging``) for their side effect of calling ``View.register_plugin``.
  Imports are done lazily via ``import_module`` to avoid cycles.

Constraints
-----------
- Import must stay lightweight: no view instantiation or heavy work beyond
  plugin registration.
- Version string lives here as ``__version__``.
"""

from importlib import import_module

__version__ = "0.3.0"

from .core import (
    ALL_MENUS,
    NO_MATCH,
    ROOT_PARENT,
    FilterClause,
    InMemoryMenuStorage,
    LinkResolutionCache,
    MenuChildrenJoin,
    MenuLink,
    MenuLinkResolver,
    PathRouter,
    QueryFilterBuilder,
    RouteDescriptor,
    RouteNotFound,
    RouteResolver,
    ScopedMenuLinkResolver,
    SqlQuery,
    View,
)

# Import plugins to trigger auto-registration (lazy to avoid cycles)
for _plugin in ("menu_children", "logging"):
    import_module(f"{__name__}.plugins.{_plugin}")
del _plugin

__all__ = [
    "ALL_MENUS",
    "NO_MATCH",
    "ROOT_PARENT",
    "FilterClause",
    "InMemoryMenuStorage",
    "LinkResolutionCache",
    "MenuChildrenJoin",
    "MenuLink",
    "MenuLinkResolver",
    "PathRouter",
    "QueryFilterBuilder",
    "RouteDescriptor",
    "RouteNotFound",
    "RouteResolver",
    "ScopedMenuLinkResolver",
    "SqlQuery",
    "View",
]
