"""Memo of resolved menu links (source of truth).

``LinkResolutionCache`` maps a route identifier (see
``build_route_identifier``) to a ``MenuLink`` or to the ``NO_MATCH`` marker.

Lifecycle
---------
- Construct once and hand the instance to the link resolver; sharing one
  instance across views makes the memo process-wide.
- Entries are authoritative until ``reset()``. Nothing is evicted and no
  change in the menu storage is detected.
- ``get`` returns ``None`` on a miss, so ``None`` is never stored; a
  confirmed miss is stored as ``NO_MATCH``.

Every read and write goes through a ``threading.Lock`` so hosts building
queries on several threads may share one cache.

Identifier format
-----------------
``"<menu>:<route_name>:<v1>:<v2>..."`` where ``v*`` are the parameter values
in insertion order. Parameter names are not part of the identifier.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Iterator, Optional, Union

from menufilter.core.base import MenuLink, RouteDescriptor

__all__ = ["NO_MATCH", "LinkResolutionCache", "build_route_identifier"]


class _NoMatch:
    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_MATCH"

    def __bool__(self) -> bool:
        return False


NO_MATCH = _NoMatch()

CacheValue = Union[MenuLink, _NoMatch]


def build_route_identifier(menu_name: str, route: RouteDescriptor) -> str:
    """Cache identifier for a lookup of ``route`` inside ``menu_name``.

    Example: ``main:entity.node.canonical:42``.
    """
    parameters = ":".join(str(value) for value in route.parameter_values())
    return f"{menu_name}:{route.route_name}:{parameters}"


class LinkResolutionCache:
    """Thread-safe, unbounded memo of link lookups."""

    __slots__ = ("_entries", "_lock", "hits", "misses")

    def __init__(self) -> None:
        self._entries: Dict[str, CacheValue] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Optional[CacheValue]:
        with self._lock:
            value = self._entries.get(key)
            if value is None:
                self.misses += 1
            else:
                self.hits += 1
            return value

    def put(self, key: str, value: CacheValue) -> None:
        if value is None:
            raise ValueError("Use NO_MATCH to record a confirmed miss")
        with self._lock:
            self._entries[key] = value

    def reset(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __contains__(self, key: Any) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        with self._lock:
            return iter(list(self._entries))
