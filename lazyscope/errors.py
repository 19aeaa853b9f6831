"""Exception types raised across the public lazyscope surface.

Provider and lens failures are not exceptions at this level: they are
recovered into ``BuildError`` records and ``LensResult`` values instead.
"""

from __future__ import annotations


class LazyScopeError(Exception):
    """Base class for errors surfaced to callers of lazyscope."""


class InvalidCommandError(LazyScopeError):
    """A command could not run in the current context (e.g. nothing to resume)."""


class ConfigError(LazyScopeError):
    """Settings contain a value the runtime cannot honor."""
