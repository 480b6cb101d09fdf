"""Resolution logging plugin (source of truth).

Rebuild behaviour exactly as described; no hidden defaults beyond this text.

Responsibilities
----------------
Wrap each argument handler and emit one record per build describing what the
argument did with its value::

    menu_children 'node/42': entity.node.canonical(node=42) -> link 7 in main | cache 0 hit / 1 miss | 0.12 ms

The outcome is read from the ``resolution`` runtime data the argument plugin
leaves on the view:

- not set (argument without resolution) → ``handled``
- ``None`` → ``no parent filter``
- route ``None`` → ``unresolved, root only``
- link ``None`` → ``<route> -> no link, root only``
- otherwise → ``<route> -> link <id> in <menu>``

Cache figures are the change of ``view.cache.hits`` / ``view.cache.misses``
across the call. Exceptions raised by the handler propagate and nothing is
logged for that call.

Configuration
-------------
- ``enabled`` (default True): gates the plugin through the view.
- ``level`` (default ``logging.INFO``): record level.
- ``cache`` / ``timing`` (default True): include cache figures / elapsed ms.
- Booleans can be given as a ``flags`` string (``"timing:off,cache:on"``).
- Records go to the provided ``logging.Logger`` (default
  ``logging.getLogger("menufilter")``).

Registration
------------
At module import, the plugin registers itself globally as ``"logging"`` via
``View.register_plugin(LoggingPlugin)``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Optional

from menufilter.core.base import describe_parameters
from menufilter.core.view import View
from menufilter.plugins._base_plugin import ArgumentEntry, BasePlugin

_UNSET = object()


class LoggingPlugin(BasePlugin):
    """Logs how each build resolved its page reference."""

    plugin_code = "logging"
    plugin_description = "Logs page reference resolution and cache use per build"

    __slots__ = ("_logger",)

    def __init__(self, view, *, logger: Optional[logging.Logger] = None, **cfg):
        self._logger = logger or logging.getLogger("menufilter")
        super().__init__(view, **cfg)

    def configure(
        self,
        enabled: bool = True,
        level: int = logging.INFO,
        cache: bool = True,
        timing: bool = True,
    ):
        """Configure logging plugin options.

        The wrapper added by __init_subclass__ handles writing to store.
        """
        pass

    def wrap_handler(self, view, entry: ArgumentEntry, call_next: Callable):
        """Wrap handler with a resolution summary."""

        def logged(query, value):
            cfg = self._settings()
            hits, misses = view.cache.hits, view.cache.misses
            started = time.perf_counter()
            result = call_next(query, value)
            elapsed = (time.perf_counter() - started) * 1000
            parts = [f"{entry.name} {value!r}: {self.describe_outcome(view, entry.name)}"]
            if cfg["cache"]:
                parts.append(
                    f"cache {view.cache.hits - hits} hit / {view.cache.misses - misses} miss"
                )
            if cfg["timing"]:
                parts.append(f"{elapsed:.2f} ms")
            self._logger.log(cfg["level"], " | ".join(parts))
            return result

        return logged

    def describe_outcome(self, view: Any, argument: str) -> str:
        resolution = view.get_runtime_data(argument, "resolution", _UNSET)
        if resolution is _UNSET:
            return "handled"
        if resolution is None:
            return "no parent filter"
        route = resolution["route"]
        if route is None:
            return "unresolved, root only"
        label = f"{route.route_name}({describe_parameters(route.parameters)})"
        link = resolution["link"]
        if link is None:
            return f"{label} -> no link, root only"
        return f"{label} -> link {link.id} in {link.menu_name}"

    def _settings(self) -> dict:
        cfg = {"level": logging.INFO, "cache": True, "timing": True} | self.configuration()
        return {
            "level": int(cfg["level"]),
            "cache": bool(cfg["cache"]),
            "timing": bool(cfg["timing"]),
        }


View.register_plugin(LoggingPlugin)
