"""Value types shared by the resolver components (source of truth).

Objects
~~~~~~~
``RouteDescriptor``
    Frozen ``(route_name, parameters)`` pair. Parameters whose value is
    ``None`` are dropped at construction; the remaining keys keep their
    insertion order. Two descriptors are equal when the route name and the
    filtered mapping are equal.

``MenuLink``
    Frozen node of a menu tree as reported by the storage provider. Only
    ``id`` and ``parent_id`` are read by the filter pipeline.

``FilterClause``
    Frozen predicate fragment handed to the host query. ``kind`` is
    ``"menu"`` (``IN`` over a bound list of menu names) or ``"parent"``
    (equality over one bound parent identifier).

Sentinels
~~~~~~~~~
- ``ALL_MENUS``: candidate menu meaning "search every menu"; never a real
  menu name.
- ``ROOT_PARENT``: parent identifier of top-level links.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

__all__ = [
    "ALL_MENUS",
    "ROOT_PARENT",
    "ENTITY_ROUTE_TEMPLATE",
    "RouteDescriptor",
    "MenuLink",
    "FilterClause",
]

ALL_MENUS = "all_menus"
ROOT_PARENT = 0
ENTITY_ROUTE_TEMPLATE = "entity.{entity_type}.canonical"


@dataclass(frozen=True)
class RouteDescriptor:
    """Canonical route name plus its non-null parameters."""

    route_name: str
    parameters: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        cleaned = {key: value for key, value in dict(self.parameters).items() if value is not None}
        object.__setattr__(self, "parameters", cleaned)

    def __hash__(self) -> int:
        return hash((self.route_name, frozenset(self.parameters.items())))

    @classmethod
    def entity(cls, entity_type: str, entity_id: Any) -> "RouteDescriptor":
        """Descriptor of the canonical page of one entity (``entity.node.canonical``)."""
        return cls(ENTITY_ROUTE_TEMPLATE.format(entity_type=entity_type), {entity_type: entity_id})

    def parameter_values(self) -> Tuple[Any, ...]:
        return tuple(self.parameters.values())


@dataclass(frozen=True)
class MenuLink:
    """Menu link record owned by the storage provider."""

    id: Any
    parent_id: Any
    menu_name: str
    route: RouteDescriptor
    title: str = ""
    weight: int = 0


@dataclass(frozen=True)
class FilterClause:
    """Predicate fragment appended to a host query."""

    kind: str
    expression: str
    values: Dict[str, Any]
    column: str = ""

    def bound_value(self) -> Any:
        # every clause binds exactly one placeholder
        return next(iter(self.values.values()))

    def matches(self, row: Mapping[str, Any]) -> bool:
        """Evaluate the clause against a result row keyed by column name."""
        value = row.get(self.column)
        bound = self.bound_value()
        if self.kind == "menu":
            return value in tuple(bound)
        if self.kind == "parent":
            return value == bound
        raise ValueError(f"Unknown clause kind: {self.kind!r}")


def describe_parameters(parameters: Optional[Mapping[str, Any]]) -> str:
    """Render parameters as ``key=value`` pairs for log messages."""
    if not parameters:
        return "-"
    return ",".join(f"{key}={value}" for key, value in parameters.items())
