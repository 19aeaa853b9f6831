"""Public package surface for lazyscope.

Exports ``scry``/``scry_resume`` for programmatic use and ``main`` for the
CLI. Imports are lazy to keep ``import lazyscope`` lightweight.
"""

from __future__ import annotations

import logging
import sys

logging.getLogger(__name__).addHandler(logging.NullHandler())


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def scry(seed, actions=None, **kwargs):
    """Browse ``seed``; see ``lazyscope.api.scry``."""
    from .api import scry as _scry

    kwargs.setdefault("namespace", sys._getframe(1).f_globals)
    return _scry(seed, actions, **kwargs)


def scry_resume(actions=None, **kwargs):
    """Re-open the last session; see ``lazyscope.api.scry_resume``."""
    from .api import scry_resume as _scry_resume

    return _scry_resume(actions, **kwargs)


__all__ = ["main", "scry", "scry_resume"]
