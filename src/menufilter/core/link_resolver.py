"""Candidate-menu link lookup (source of truth).

``MenuLinkResolver(storage, cache, *, tie_break=first_in_provider_order,
cache_misses=False)``

``resolve_link(candidate_menus, route)``

1. ``route`` is ``None`` or has an empty route name → ``None``; storage is
   not consulted.
2. An empty candidate list becomes ``[ALL_MENUS]``.
3. Menus are visited in order. For each one the cache identifier is built
   (``build_route_identifier(menu, route)``):

   - any cache entry for that identifier, link or ``NO_MATCH``, is returned
     at once and ends the whole search (``NO_MATCH`` comes back as
     ``None``); later menus are not consulted even when the entry was
     written for a different candidate list;
   - otherwise storage is asked for links of ``route`` restricted to the
     menu (unrestricted for ``ALL_MENUS``). A non-empty answer goes through
     ``tie_break``, is cached under the identifier and returned; an empty
     answer moves on to the next menu without caching anything.

4. Exhausting the list returns ``None``. With ``cache_misses=True`` the miss
   is recorded as ``NO_MATCH`` under the identifier of the first candidate.

Storage exceptions propagate unchanged.

``ScopedMenuLinkResolver`` keeps the same interface but scopes every cache
entry to its menu: a cached ``NO_MATCH`` only skips its own menu, misses are
cached per menu, and the search always continues to the next candidate.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence

from menufilter.core.base import ALL_MENUS, MenuLink, RouteDescriptor, describe_parameters
from menufilter.core.cache import NO_MATCH, LinkResolutionCache, build_route_identifier
from menufilter.core.storage import MenuTreeStorage

__all__ = ["MenuLinkResolver", "ScopedMenuLinkResolver", "first_in_provider_order"]

logger = logging.getLogger("menufilter")

TieBreak = Callable[[Sequence[MenuLink]], MenuLink]


def first_in_provider_order(links: Sequence[MenuLink]) -> MenuLink:
    """Pick the first link in the order reported by the storage provider."""
    return links[0]


def _candidate_menus(menus: Optional[Iterable[str]]) -> List[str]:
    candidates = [menu for menu in (menus or ()) if menu]
    return candidates or [ALL_MENUS]


class MenuLinkResolver:
    """Find the link of a route within an ordered list of menus."""

    __slots__ = ("storage", "cache", "tie_break", "cache_misses")

    def __init__(
        self,
        storage: MenuTreeStorage,
        cache: Optional[LinkResolutionCache] = None,
        *,
        tie_break: TieBreak = first_in_provider_order,
        cache_misses: bool = False,
    ) -> None:
        self.storage = storage
        self.cache = cache if cache is not None else LinkResolutionCache()
        self.tie_break = tie_break
        self.cache_misses = cache_misses

    def resolve_link(
        self, candidate_menus: Optional[Iterable[str]], route: Optional[RouteDescriptor]
    ) -> Optional[MenuLink]:
        if route is None or not route.route_name:
            return None
        menus = _candidate_menus(candidate_menus)
        for menu in menus:
            key = build_route_identifier(menu, route)
            cached = self.cache.get(key)
            if cached is not None:
                logger.debug("Menu link cache hit for %s", key)
                return cached or None
            link = self._lookup(menu, route)
            if link is not None:
                self.cache.put(key, link)
                return link
        if self.cache_misses:
            self.cache.put(build_route_identifier(menus[0], route), NO_MATCH)
        logger.debug(
            "No menu link for %s (%s) in %s",
            route.route_name,
            describe_parameters(route.parameters),
            ", ".join(menus),
        )
        return None

    def _lookup(self, menu: str, route: RouteDescriptor) -> Optional[MenuLink]:
        restrict = None if menu == ALL_MENUS else menu
        links = list(self.storage.load_links_by_route(route.route_name, route.parameters, restrict))
        if not links:
            return None
        if len(links) > 1:
            logger.warning(
                "%d menu links match %s (%s) in %s; using the first one",
                len(links),
                route.route_name,
                describe_parameters(route.parameters),
                menu,
            )
        return self.tie_break(links)


class ScopedMenuLinkResolver(MenuLinkResolver):
    """Resolver whose cache entries never short-circuit other menus."""

    __slots__ = ()

    def resolve_link(
        self, candidate_menus: Optional[Iterable[str]], route: Optional[RouteDescriptor]
    ) -> Optional[MenuLink]:
        if route is None or not route.route_name:
            return None
        for menu in _candidate_menus(candidate_menus):
            key = build_route_identifier(menu, route)
            cached = self.cache.get(key)
            if cached is NO_MATCH:
                continue
            if cached is not None:
                return cached
            link = self._lookup(menu, route)
            if link is None:
                if self.cache_misses:
                    self.cache.put(key, NO_MATCH)
                continue
            self.cache.put(key, link)
            return link
        return None
