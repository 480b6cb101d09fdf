"""Page reference → route descriptor resolution (source of truth).

Objects
~~~~~~~
``RouteResolver(path_router)``
    ``resolve(value)`` turns a user-supplied page reference into a
    ``RouteDescriptor``:

    - a ``RouteDescriptor`` is returned unchanged;
    - a numeric value (``42``, ``"42"``, ``" 42 "``, ``"4.0"``) becomes the
      canonical node route ``entity.node.canonical`` with ``{"node": n}``;
      integral values are normalised to ``int``;
    - anything else is a path: ``/`` is stripped from both ends and a single
      leading ``/`` is prepended before asking the routing collaborator.

    When the collaborator raises ``RouteNotFound`` (or returns ``None``) the
    resolver returns ``None``. Other exceptions propagate.

``PathRouter``
    Minimal routing collaborator. Patterns use ``{name}`` / ``{name:type}``
    placeholders with ``str``, ``int`` and ``path`` converters; patterns are
    tried in registration order and the first match wins.
    ``PathRouter.default()`` knows ``/node/{node:int}`` and the front page.

``RouteNotFound``
    ``LookupError`` raised by ``PathRouter.resolve_path`` for unknown paths.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

from smartseeds.typeutils import safe_is_instance

from menufilter.core.base import RouteDescriptor

__all__ = ["RouteNotFound", "PathResolver", "PathRouter", "RouteResolver", "is_numeric"]

logger = logging.getLogger("menufilter")

_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")

CONVERTERS: Dict[str, Tuple[str, type]] = {
    "str": (r"[^/]+", str),
    "int": (r"\d+", int),
    "path": (r".+", str),
}


class RouteNotFound(LookupError):
    """Raised when a path does not match any registered route."""

    def __init__(self, path: str):
        super().__init__(f"No route matches path '{path}'")
        self.path = path


class PathResolver(Protocol):
    """Routing collaborator consumed by ``RouteResolver``."""

    def resolve_path(self, path: str) -> Optional[RouteDescriptor]: ...


def is_numeric(value: Any) -> bool:
    """True for ints/floats and for strings holding a decimal number."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    if isinstance(value, str):
        return bool(_NUMERIC_RE.match(value.strip()))
    return False


def _normalise_number(value: Union[int, float, str]) -> Union[int, float]:
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    number = float(value)
    return int(number) if number.is_integer() else number


@dataclass(frozen=True)
class _Pattern:
    pattern: str
    route_name: str
    regex: "re.Pattern[str]"
    converters: Tuple[Tuple[str, type], ...]


class PathRouter:
    """Ordered table of path patterns mapped to route names."""

    __slots__ = ("_patterns",)

    def __init__(self) -> None:
        self._patterns: List[_Pattern] = []

    @classmethod
    def default(cls) -> "PathRouter":
        router = cls()
        router.add("/", "<front>")
        router.add("/node/{node:int}", "entity.node.canonical")
        return router

    def add(self, pattern: str, route_name: str) -> "PathRouter":
        """Register ``pattern`` under ``route_name``; returns self for chaining."""
        if not route_name:
            raise ValueError("route_name cannot be empty")
        parts: List[str] = []
        converters: List[Tuple[str, type]] = []
        for segment in pattern.strip("/").split("/"):
            if not segment:
                continue
            if segment.startswith("{") and segment.endswith("}"):
                inner = segment[1:-1]
                name, _, param_type = inner.partition(":")
                param_type = param_type or "str"
                if param_type not in CONVERTERS:
                    raise ValueError(f"Unknown converter '{param_type}' in pattern '{pattern}'")
                regex, target_type = CONVERTERS[param_type]
                parts.append(f"(?P<{name}>{regex})")
                converters.append((name, target_type))
            else:
                parts.append(re.escape(segment))
        compiled = re.compile("^/" + "/".join(parts) + "$")
        self._patterns.append(_Pattern(pattern, route_name, compiled, tuple(converters)))
        return self

    def resolve_path(self, path: str) -> RouteDescriptor:
        for entry in self._patterns:
            match = entry.regex.match(path)
            if match is None:
                continue
            params = {name: target_type(match.group(name)) for name, target_type in entry.converters}
            return RouteDescriptor(entry.route_name, params)
        raise RouteNotFound(path)

    def patterns(self) -> Tuple[str, ...]:
        return tuple(entry.pattern for entry in self._patterns)


class RouteResolver:
    """Normalise raw page references into route descriptors."""

    __slots__ = ("path_router", "entity_type")

    def __init__(self, path_router: PathResolver, *, entity_type: str = "node") -> None:
        self.path_router = path_router
        self.entity_type = entity_type

    def resolve(self, value: Any) -> Optional[RouteDescriptor]:
        if safe_is_instance(value, "menufilter.core.base.RouteDescriptor"):
            return value
        if is_numeric(value):
            return RouteDescriptor.entity(self.entity_type, _normalise_number(value))
        path = "/" + str(value).strip("/")
        try:
            route = self.path_router.resolve_path(path)
        except RouteNotFound:
            logger.debug("Page reference %r does not resolve to a route", value)
            return None
        if route is None:
            logger.debug("Page reference %r does not resolve to a route", value)
        return route
