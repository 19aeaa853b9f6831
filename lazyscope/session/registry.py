"""Process-wide registry of the most recent session for resume."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from ..row_model.providers import ProviderSet
from .state import TabSet


@dataclass
class ResumableSession:
    tabs: TabSet
    providers: ProviderSet


class SessionRegistry:
    """Explicit holder of the last session; callers pass it to the runtime."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._last: ResumableSession | None = None

    def get_last(self) -> ResumableSession | None:
        with self._lock:
            return self._last

    def set_last(self, entry: ResumableSession) -> None:
        with self._lock:
            self._last = entry

    def clear(self) -> None:
        with self._lock:
            self._last = None


DEFAULT_REGISTRY = SessionRegistry()
