"""
Example showing how to restrict a node listing to the menu children of a page.
"""

from __future__ import annotations

import logging

from menufilter import InMemoryMenuStorage, MenuLink, RouteDescriptor, View

logging.basicConfig(level=logging.INFO)

storage = InMemoryMenuStorage()
storage.add_menu("main", "Main navigation")
storage.add_link(MenuLink(3, 0, "main", RouteDescriptor.entity("node", 1), title="About"))
storage.add_link(MenuLink(7, 3, "main", RouteDescriptor.entity("node", 42), title="Team"))

view = View("about_children", storage=storage)
view.plug("menu_children", target_menus=["main"]).plug("logging")

if __name__ == "__main__":
    for page in ("node/1", "42", "/unknown/path", None):
        query = view.build(page)
        print(f"{page!r:>16} -> {query.sql} {query.params}")
