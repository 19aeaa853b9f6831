"""Programmatic entry points: open a session on a value, or re-enter the last one."""

from __future__ import annotations

import sys
from collections.abc import MutableMapping, Sequence
from typing import Any

from .row_model.providers import ProviderSet
from .runtime.app import resume_session, run_session
from .runtime.config import Settings, load_settings
from .session.registry import DEFAULT_REGISTRY, SessionRegistry
from .session.state import Session, TabSet


def scry(
    seed: Any,
    actions: str | Sequence[str] | None = None,
    *,
    namespace: MutableMapping[str, Any] | None = None,
    settings: Settings | None = None,
    registry: SessionRegistry = DEFAULT_REGISTRY,
    **kwargs: Any,
) -> Any:
    """Browse ``seed`` and return what the user picked with ENTER (``None`` on quit).

    Expressions and saved handles use ``namespace``, which defaults to the
    caller's module globals.
    """
    if namespace is None:
        namespace = sys._getframe(1).f_globals
    settings = (settings or load_settings()).validate()
    providers = ProviderSet.for_namespace(namespace, settings.relationship_policy())
    tabs = TabSet(Session.seeded([seed]))
    return run_session(tabs, providers, actions=actions, settings=settings, registry=registry, **kwargs)


def scry_resume(
    actions: str | Sequence[str] | None = None,
    *,
    registry: SessionRegistry = DEFAULT_REGISTRY,
    **kwargs: Any,
) -> Any:
    """Re-open the most recent session exactly as it was left.

    Raises ``InvalidCommandError`` when no session has run yet.
    """
    return resume_session(actions=actions, registry=registry, **kwargs)
