"""Session state, tabs, selection, search, and the key controller."""

from __future__ import annotations

from .controller import WIDE_STEP, ExitRequest, SessionController
from .registry import DEFAULT_REGISTRY, ResumableSession, SessionRegistry
from .search import SearchEngine, SearchState, compile_pattern
from .selection import SelectionQueue
from .state import HELP_PAGE_COUNT, MAX_TABS, Session, TabSet, ViewMode

__all__ = [
    "DEFAULT_REGISTRY",
    "ExitRequest",
    "HELP_PAGE_COUNT",
    "MAX_TABS",
    "ResumableSession",
    "SearchEngine",
    "SearchState",
    "Session",
    "SessionController",
    "SessionRegistry",
    "SelectionQueue",
    "TabSet",
    "ViewMode",
    "WIDE_STEP",
    "compile_pattern",
]
