"""Plugin contract used by the View runtime.

Source of truth
---------------
If this module were wiped except for this docstring, the implementation must be
reconstructed exactly as described below.

Objects
~~~~~~~
``ArgumentEntry``
    Dataclass capturing one argument handler registered on a view. Fields:

    - ``name`` – plugin name of the argument (``"menu_children"``)
    - ``func`` – callable ``func(query, value)`` invoked by the View
    - ``plugins`` – names of the middleware plugins wrapping the handler

``BasePlugin``
    Base class every plugin *must* subclass. Responsibilities:

    - keep configuration in the owning view's ``_plugin_info`` store (no
      hidden per-plugin globals)
    - provide the optional ``wrap_handler(view, entry, call_next)`` hook used
      by the View to build middleware layers around argument handlers
    - argument plugins set ``handles_argument = True`` and implement
      ``apply(query, value)``

    Required class attributes:

    - ``plugin_code`` – unique identifier used for registration
    - ``plugin_description`` – human-readable description

    Constructor signature: ``BasePlugin(view, **config)``; ``**config`` goes
    through ``configure()``.

    ``configure(**config)``
        Subclasses declare accepted options through the method signature.
        ``__init_subclass__`` wraps it to parse ``flags`` (``"enabled,log:off"``)
        into booleans, validate with Pydantic's ``validate_call`` and write the
        raw values to the store. Invalid values raise ``ValidationError`` and
        leave the store untouched.

    ``configuration()``
        Returns a copy of the stored configuration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from pydantic import validate_call

__all__ = ["BasePlugin", "ArgumentEntry"]


@dataclass
class ArgumentEntry:
    """Metadata for an argument handler registered on a view."""

    name: str
    func: Callable
    plugins: List[str]


def _wrap_configure(original_configure: Callable) -> Callable:
    """Wrap a plugin's configure() method to handle flags, validation, and storage."""
    validated = validate_call(original_configure)

    def wrapper(self: "BasePlugin", *, flags: Optional[str] = None, **kwargs: Any) -> None:
        if flags:
            kwargs.update(self._parse_flags(flags))
        validated(self, **kwargs)
        self._write_config(kwargs)

    wrapper.__doc__ = original_configure.__doc__
    return wrapper


class BasePlugin:
    """Hook interface + configuration helpers for view plugins."""

    __slots__ = ("name", "_view")

    plugin_code: str = ""
    plugin_description: str = ""
    handles_argument: bool = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "configure" in cls.__dict__:
            cls.configure = _wrap_configure(cls.__dict__["configure"])

    def __init__(self, view: Any, **config: Any):
        self.name = self.plugin_code
        self._view = view
        self._init_store()
        self.configure(**config)

    def _init_store(self) -> None:
        store = self._get_store()
        store.setdefault(self.name, {}).setdefault(
            "--base--", {"config": {"enabled": True}, "locals": {}}
        )

    def configure(self, *, flags: Optional[str] = None) -> None:
        """Override in subclasses to define accepted configuration parameters."""
        if flags:
            self._write_config(self._parse_flags(flags))

    def _write_config(self, config: Dict[str, Any]) -> None:
        if not config:
            return
        bucket = self._get_store().setdefault(self.name, {}).setdefault(
            "--base--", {"config": {}, "locals": {}}
        )
        bucket["config"].update(config)

    def configuration(self) -> Dict[str, Any]:
        """Read the stored configuration."""
        bucket = self._get_store().get(self.name, {}).get("--base--", {})
        return dict(bucket.get("config", {}))

    def _parse_flags(self, flags: str) -> Dict[str, bool]:
        mapping: Dict[str, bool] = {}
        for chunk in flags.split(","):
            chunk = chunk.strip()
            if not chunk:
                continue
            if ":" in chunk:
                name, value = chunk.split(":", 1)
                mapping[name.strip()] = value.strip().lower() != "off"
            else:
                mapping[chunk] = True
        return mapping

    def apply(self, query: Any, value: Any) -> None:  # pragma: no cover - argument plugins override
        raise NotImplementedError(f"Plugin '{self.name}' does not handle arguments")

    def wrap_handler(
        self,
        view: Any,
        entry: ArgumentEntry,
        call_next: Callable,
    ) -> Callable:
        """Wrap argument handling; default passthrough."""
        return call_next

    def _get_store(self) -> Dict[str, Any]:
        return getattr(self._view, "_plugin_info")
