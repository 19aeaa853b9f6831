"""Main interactive event loop.

Draws, reads one key, dispatches it. The loop is wiring only; key semantics
live in ``SessionController`` and drawing in the injected ``Screen``.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from ..input.sources import KeySource
from ..session.controller import ExitRequest, SessionController


class Screen(Protocol):
    def size(self) -> tuple[int, int]:
        """Return ``(rows, columns)``."""

    def draw(self, lines: Sequence[str]) -> None: ...

    def bell(self) -> None: ...


class HeadlessScreen:
    """In-memory screen for scripted sessions; keeps the most recent frame."""

    def __init__(self, rows: int = 24, columns: int = 80) -> None:
        self.rows = rows
        self.columns = columns
        self.last_frame: list[str] = []
        self.frame_count = 0
        self.bells = 0

    def size(self) -> tuple[int, int]:
        return self.rows, self.columns

    def draw(self, lines: Sequence[str]) -> None:
        self.last_frame = list(lines)
        self.frame_count += 1

    def bell(self) -> None:
        self.bells += 1


def run_main_loop(
    controller: SessionController,
    keys: KeySource,
    redraw: Callable[[], None],
    after_key: Callable[[], None] | None = None,
) -> ExitRequest | None:
    """Run until the controller asks to exit or ``keys`` runs dry.

    Exhausting the key source ends the loop with ``None`` so a scripted run
    without a closing key leaves the session open for resume.
    """
    while True:
        redraw()
        key = keys.next_key()
        if key is None:
            return None
        request = controller.handle_key(key)
        if after_key is not None:
            after_key()
        if request is not None:
            return request
