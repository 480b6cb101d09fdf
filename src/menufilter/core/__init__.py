"""Core runtime aggregator (source of truth).

Purpose: expose the building blocks of the menu children filter from a
single module. No extra logic beyond imports/exports.

Guarantees
----------
- Importing this module performs only imports; it does not register plugins or
  instantiate views.
- Public API mirrors underlying modules 1:1:
  * ``base`` → value types and sentinels
  * ``routing`` → ``RouteResolver``, ``PathRouter``, ``RouteNotFound``
  * ``cache`` → ``LinkResolutionCache``, ``NO_MATCH``
  * ``link_resolver`` → ``MenuLinkResolver``, ``ScopedMenuLinkResolver``
  * ``filters`` → ``QueryFilterBuilder``, ``MenuChildrenJoin``
  * ``query`` → ``HostQuery``, ``SqlQuery``
  * ``storage`` → ``MenuTreeStorage``, ``InMemoryMenuStorage``
  * ``view`` → ``View`` (plugin-enabled host)
"""

from .base import ALL_MENUS, ROOT_PARENT, FilterClause, MenuLink, RouteDescriptor
from .cache import NO_MATCH, LinkResolutionCache, build_route_identifier
from .filters import MenuChildrenJoin, QueryFilterBuilder
from .link_resolver import MenuLinkResolver, ScopedMenuLinkResolver, first_in_provider_order
from .query import HostQuery, SqlQuery
from .routing import PathRouter, RouteNotFound, RouteResolver
from .storage import InMemoryMenuStorage, MenuTreeStorage
from .view import View

__all__ = [
    "ALL_MENUS",
    "ROOT_PARENT",
    "FilterClause",
    "MenuLink",
    "RouteDescriptor",
    "NO_MATCH",
    "LinkResolutionCache",
    "build_route_identifier",
    "MenuChildrenJoin",
    "QueryFilterBuilder",
    "MenuLinkResolver",
    "ScopedMenuLinkResolver",
    "first_in_provider_order",
    "HostQuery",
    "SqlQuery",
    "PathRouter",
    "RouteNotFound",
    "RouteResolver",
    "InMemoryMenuStorage",
    "MenuTreeStorage",
    "View",
]
