"""Key sources (live terminal or pre-recorded script) and the line prompt."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Protocol

from .reader import read_key

NAMED_KEYS = frozenset(
    {
        "UP",
        "DOWN",
        "LEFT",
        "RIGHT",
        "SHIFT_UP",
        "SHIFT_DOWN",
        "SHIFT_LEFT",
        "SHIFT_RIGHT",
        "ALT_UP",
        "ALT_DOWN",
        "ALT_LEFT",
        "ALT_RIGHT",
        "ENTER",
        "ESC",
        "TAB",
        "SHIFT_TAB",
        "SPACE",
        "BACKSPACE",
        "CTRL_U",
        "CTRL_C",
    }
)


class KeySource(Protocol):
    def next_key(self) -> str | None:
        """Return the next key token, or ``None`` once the source is exhausted."""


class TerminalKeySource:
    """Blocking reads from a raw-mode terminal file descriptor."""

    def __init__(self, fd: int) -> None:
        self.fd = fd

    def next_key(self) -> str | None:
        while True:
            key = read_key(self.fd)
            if key:
                return key


class ScriptedKeySource:
    """Replay a fixed list of key tokens."""

    def __init__(self, keys: Iterable[str]) -> None:
        self._keys = list(keys)
        self._position = 0

    @property
    def remaining(self) -> list[str]:
        return self._keys[self._position :]

    def next_key(self) -> str | None:
        if self._position >= len(self._keys):
            return None
        key = self._keys[self._position]
        self._position += 1
        return key


def _is_alt_token(token: str) -> bool:
    return token.startswith("ALT_") and len(token) == 5


def parse_action_script(script: str | Sequence[str]) -> list[str]:
    """Turn an action script into key tokens.

    A string is split on whitespace; named keys (``DOWN``, ``ENTER``...) and
    ``ALT_<char>`` stay whole, any other word is typed character by character.
    A sequence is taken as tokens verbatim.
    """
    if not isinstance(script, str):
        return list(script)
    tokens: list[str] = []
    for word in script.split():
        if word in NAMED_KEYS or _is_alt_token(word):
            tokens.append(word)
        else:
            tokens.extend(word)
    return tokens


def read_line(
    source: KeySource,
    on_change: Callable[[str], None] | None = None,
) -> str | None:
    """Collect typed text until ``ENTER``; ``ESC`` or exhaustion cancels with ``None``."""
    buffer: list[str] = []
    if on_change is not None:
        on_change("")
    while True:
        key = source.next_key()
        if key is None or key in {"ESC", "CTRL_C"}:
            return None
        if key == "ENTER":
            return "".join(buffer)
        if key == "BACKSPACE":
            if buffer:
                buffer.pop()
        elif key == "CTRL_U":
            buffer.clear()
        elif key == "SPACE":
            buffer.append(" ")
        elif len(key) == 1:
            buffer.append(key)
        else:
            continue
        if on_change is not None:
            on_change("".join(buffer))
