"""Key-combo registry used by the session controller."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback.

    Handlers receive the key token that triggered them.
    """

    combos: tuple[str, ...]
    handler: Callable[[str], object]


class KeyComboRegistry:
    """Exact-match key dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[str], object]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._handlers

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for the same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> tuple[bool, object]:
        """Invoke the handler bound to ``key``; returns ``(handled, handler_result)``."""
        handler = self._handlers.get(key)
        if handler is None:
            return False, None
        return True, handler(key)
