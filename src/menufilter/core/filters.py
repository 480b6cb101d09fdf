"""Filter clauses applied to the host query.

``QueryFilterBuilder`` produces the two predicate fragments of the menu
children filter and appends them to a ``HostQuery``:

- ``menu_membership_clause(menus)``: ``<table>.menu_name in (:menus[])``,
  or ``None`` when no menus are configured;
- ``parent_clause(link)``: ``<table>.parent = :parent_lid`` bound to
  ``link.id``, or to ``ROOT_PARENT`` when ``link`` is ``None``.

Both clauses go into the same where group so they AND with each other and
with everything else already on the query.

``MenuChildrenJoin`` joins the node base table to the menu link table; both
clauses reference columns of the joined table.
"""

from __future__ import annotations

from typing import Iterable, Optional

from menufilter.core.base import ROOT_PARENT, FilterClause, MenuLink
from menufilter.core.query import HostQuery

__all__ = ["MENU_LINK_TABLE", "QueryFilterBuilder", "MenuChildrenJoin"]

MENU_LINK_TABLE = "menu_link_content_data"


class QueryFilterBuilder:
    __slots__ = ("table", "group")

    def __init__(self, table: str = MENU_LINK_TABLE, group: int = 0) -> None:
        self.table = table
        self.group = group

    def menu_membership_clause(self, menus: Optional[Iterable[str]]) -> Optional[FilterClause]:
        names = list(dict.fromkeys(menu for menu in (menus or ()) if menu))
        if not names:
            return None
        return FilterClause(
            kind="menu",
            expression=f"{self.table}.menu_name in (:menus[])",
            values={":menus[]": names},
            column="menu_name",
        )

    def parent_clause(self, link: Optional[MenuLink]) -> FilterClause:
        parent = link.id if link is not None else ROOT_PARENT
        return FilterClause(
            kind="parent",
            expression=f"{self.table}.parent = :parent_lid",
            values={":parent_lid": parent},
            column="parent",
        )

    def apply(self, query: HostQuery, clause: Optional[FilterClause]) -> None:
        if clause is None:
            return
        query.add_where_expression(self.group, clause.expression, clause.values)


class MenuChildrenJoin:
    """Join from the node table to the menu link rows pointing at each node."""

    __slots__ = ("table", "base_table", "base_field")

    def __init__(
        self,
        table: str = MENU_LINK_TABLE,
        base_table: str = "node_field_data",
        base_field: str = "nid",
    ) -> None:
        self.table = table
        self.base_table = base_table
        self.base_field = base_field

    @property
    def condition(self) -> str:
        return (
            f"{self.table}.link__uri = "
            f"CONCAT('entity:node/', {self.base_table}.{self.base_field})"
        )

    def join_to_node_table(self, query: HostQuery) -> str:
        return query.add_join(self.table, self.condition)
