"""Menu tree storage contract plus an in-memory provider."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol

from menufilter.core.base import MenuLink, RouteDescriptor

__all__ = ["MenuTreeStorage", "InMemoryMenuStorage"]


class MenuTreeStorage(Protocol):
    """Provider answering "which links point at this route"."""

    def load_links_by_route(
        self,
        route_name: str,
        parameters: Mapping[str, Any],
        menu_name: Optional[str] = None,
    ) -> List[MenuLink]:
        """Links for the route, restricted to ``menu_name`` unless it is ``None``."""
        ...

    def menu_names(self) -> Dict[str, str]:
        """Available menus as ``{name: label}``."""
        ...


class InMemoryMenuStorage:
    """Dictionary-backed storage; provider order is insertion order.

    ``lookups`` counts calls to ``load_links_by_route`` so callers can observe
    whether a lookup reached the storage.
    """

    def __init__(self) -> None:
        self._menus: Dict[str, str] = {}
        self._links: List[MenuLink] = []
        self.lookups = 0

    def add_menu(self, name: str, label: Optional[str] = None) -> "InMemoryMenuStorage":
        self._menus[name] = label or name
        return self

    def add_link(self, link: MenuLink) -> MenuLink:
        if link.menu_name not in self._menus:
            self.add_menu(link.menu_name)
        self._links.append(link)
        return link

    def load_links_by_route(
        self,
        route_name: str,
        parameters: Mapping[str, Any],
        menu_name: Optional[str] = None,
    ) -> List[MenuLink]:
        self.lookups += 1
        wanted = RouteDescriptor(route_name, dict(parameters))
        return [
            link
            for link in self._links
            if link.route == wanted and (menu_name is None or link.menu_name == menu_name)
        ]

    def menu_names(self) -> Dict[str, str]:
        return dict(self._menus)
