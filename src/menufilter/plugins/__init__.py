"""Plugin package initialiser (source of truth).

Rebuild rules:
- Keep this file lightweight; do not import concrete plugins here so imports of
  ``menufilter.plugins`` remain side-effect free.
- Concrete plugin modules (``menu_children``, ``logging``) self-register when
  imported elsewhere (see ``menufilter.__init__`` for eager imports).
"""

__all__: list[str] = []
