"""Host query capability plus a recording SQL implementation (source of truth).

``HostQuery`` is the narrow interface the filter pipeline talks to:

- ``add_join(table, condition, alias=None)`` → alias used for the table
- ``add_where_expression(group, expression, values)``

``SqlQuery(base_table)`` records those calls:

- joins are keyed by alias; re-adding an alias with the same condition is a
  no-op, a different condition raises ``ValueError``;
- where expressions are stored per group in insertion order; every fragment
  of every group is ANDed;
- placeholders are ``:name`` for scalars and ``:name[]`` for lists. ``.sql``
  replaces them with ``?`` (one per list item) and ``.params`` returns the
  bound values in the same order. A placeholder without a bound value raises
  ``KeyError``.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple

__all__ = ["HostQuery", "SqlQuery"]

_PLACEHOLDER_RE = re.compile(r":[A-Za-z_][A-Za-z0-9_]*(?:\[\])?")


class HostQuery(Protocol):
    def add_join(self, table: str, condition: str, alias: Optional[str] = None) -> str: ...

    def add_where_expression(
        self, group: int, expression: str, values: Mapping[str, Any]
    ) -> None: ...


class SqlQuery:
    """Query builder that records joins and grouped where expressions."""

    __slots__ = ("base_table", "_joins", "_where")

    def __init__(self, base_table: str) -> None:
        self.base_table = base_table
        self._joins: Dict[str, Tuple[str, str]] = {}
        self._where: Dict[int, List[Tuple[str, Dict[str, Any]]]] = {}

    def add_join(self, table: str, condition: str, alias: Optional[str] = None) -> str:
        alias = alias or table
        existing = self._joins.get(alias)
        if existing is not None and existing != (table, condition):
            raise ValueError(f"Join alias collision: {alias}")
        self._joins[alias] = (table, condition)
        return alias

    def add_where_expression(
        self, group: int, expression: str, values: Mapping[str, Any]
    ) -> None:
        self._where.setdefault(group, []).append((expression, dict(values)))

    @property
    def joins(self) -> Dict[str, Tuple[str, str]]:
        return dict(self._joins)

    @property
    def where(self) -> Dict[int, List[Tuple[str, Dict[str, Any]]]]:
        return {group: list(items) for group, items in self._where.items()}

    def expressions(self) -> List[str]:
        """Raw where expressions across all groups, in group then insertion order."""
        return [expr for group in sorted(self._where) for expr, _ in self._where[group]]

    def _compile(self) -> Tuple[str, Tuple[Any, ...]]:
        params: List[Any] = []

        def render(expression: str, values: Dict[str, Any]) -> str:
            def substitute(match: "re.Match[str]") -> str:
                placeholder = match.group(0)
                if placeholder not in values:
                    raise KeyError(f"No value bound for placeholder {placeholder}")
                value = values[placeholder]
                if placeholder.endswith("[]"):
                    items = list(value)
                    params.extend(items)
                    return ", ".join("?" for _ in items)
                params.append(value)
                return "?"

            return _PLACEHOLDER_RE.sub(substitute, expression)

        parts = [f"SELECT {self.base_table}.* FROM {self.base_table}"]
        for alias, (table, condition) in self._joins.items():
            target = table if alias == table else f"{table} {alias}"
            parts.append(f"INNER JOIN {target} ON {condition}")
        fragments = [
            render(expression, values)
            for group in sorted(self._where)
            for expression, values in self._where[group]
        ]
        if fragments:
            parts.append("WHERE " + " AND ".join(f"({fragment})" for fragment in fragments))
        return " ".join(parts), tuple(params)

    @property
    def sql(self) -> str:
        return self._compile()[0]

    @property
    def params(self) -> Tuple[Any, ...]:
        return self._compile()[1]
