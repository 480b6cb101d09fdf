"""Menu children argument plugin (source of truth).

Rebuild behaviour exactly as described; no hidden defaults beyond this text.

Responsibilities
----------------
Restrict a node query to the menu children of a page. The argument value is
a page reference: a node id (``42``) or a path (``node/42``, ``/about/``).

- ``set_relationship(query)`` always joins the node table to the menu link
  table (``view.join_handler``). When ``target_menus`` is non-empty it also
  adds ``menu_name in (:menus[])``. The argument value plays no part here.
- ``query(query, value)`` does nothing for ``None`` / ``""``: results are
  only scoped by the join. Any other value, blank strings such as ``"   "``
  included, goes to ``filter_children_by_parent``.
- ``filter_children_by_parent(query, value, menus)``: value →
  ``view.route_resolver`` → ``get_menu_link_from_target_url`` →
  ``parent = :parent_lid``. A value that resolves to no route or to no link
  still adds the parent clause, bound to the root sentinel.
- ``apply(query, value)`` runs ``set_relationship`` then ``query``; the View
  calls it once per build. Each apply stores the outcome under the
  ``resolution`` runtime key: ``None`` when no parent filter was added,
  otherwise ``{"value", "route", "link"}`` (``link`` ``None`` means the root
  fallback).

Configuration
-------------
- ``target_menus``: list of menu names, or a ``{name: label}`` mapping as
  posted by an option form (keys are used). Default ``[]`` meaning every
  menu.
- ``enabled`` (default True).

``options_form()`` describes the option form: a multi-select listing
``view.storage.menu_names()`` with the configured menus preselected.

Registration
------------
Registers itself globally as ``"menu_children"`` at import time.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from menufilter.core.base import MenuLink, RouteDescriptor
from menufilter.core.query import HostQuery
from menufilter.core.view import View
from menufilter.plugins._base_plugin import BasePlugin

__all__ = ["MenuChildrenPlugin"]


def _is_empty(value: Any) -> bool:
    return value is None or value == ""


class MenuChildrenPlugin(BasePlugin):
    """Filter a view to the menu children of the page given as argument."""

    plugin_code = "menu_children"
    plugin_description = "Limits results to menu children of a parent page"
    handles_argument = True

    __slots__ = ()

    def configure(
        self,
        target_menus: Union[List[str], Dict[str, str]] = [],  # noqa: B006
        enabled: bool = True,
    ):
        """Configure the candidate menus.

        The wrapper added by __init_subclass__ handles writing to store.
        """
        pass

    @property
    def target_menus(self) -> List[str]:
        menus = self.configuration().get("target_menus") or []
        if isinstance(menus, dict):
            menus = list(menus)
        return [str(menu) for menu in menus if menu]

    def options_form(self) -> Dict[str, Any]:
        return {
            "target_menus": {
                "type": "select",
                "multiple": True,
                "title": "Target menus",
                "description": "Menus searched for the parent page. Leave empty to search all menus.",
                "options": self._view.storage.menu_names(),
                "default_value": self.target_menus,
            }
        }

    # ------------------------------------------------------------------
    # Query alteration
    # ------------------------------------------------------------------
    def apply(self, query: HostQuery, value: Any) -> None:
        self._view.set_runtime_data(self.name, "resolution", None)
        self.set_relationship(query)
        self.query(query, value)

    def set_relationship(self, query: HostQuery) -> None:
        view = self._view
        view.join_handler.join_to_node_table(query)
        view.filter_builder.apply(
            query, view.filter_builder.menu_membership_clause(self.target_menus)
        )

    def query(self, query: HostQuery, value: Any) -> None:
        if _is_empty(value):
            return
        self.filter_children_by_parent(query, value, self.target_menus)

    def filter_children_by_parent(
        self, query: HostQuery, value: Any, menus: Optional[List[str]]
    ) -> Optional[MenuLink]:
        view = self._view
        route = view.route_resolver.resolve(value)
        link = self.get_menu_link_from_target_url(menus, route)
        view.filter_builder.apply(query, view.filter_builder.parent_clause(link))
        view.set_runtime_data(
            self.name, "resolution", {"value": value, "route": route, "link": link}
        )
        return link

    def get_menu_link_from_target_url(
        self,
        menus: Optional[List[str]],
        route: Optional[RouteDescriptor] = None,
        reset_cache: bool = False,
    ) -> Optional[MenuLink]:
        if reset_cache:
            self._view.cache.reset()
        if route is None:
            return None
        return self._view.link_resolver.resolve_link(menus, route)


View.register_plugin(MenuChildrenPlugin)
