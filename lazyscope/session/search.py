"""Forward-cycling row search over the visible tree."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from ..row_model.rendering import key_text, value_text
from ..row_model.types import RowArena
from ..runtime.progress import ProgressSupervisor


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile ``pattern`` as a case-sensitive regex, or as a literal if it is not one."""
    try:
        return re.compile(pattern)
    except re.error:
        return re.compile(re.escape(pattern))


@dataclass
class SearchState:
    pattern: str = ""
    last_match: int | None = None

    @property
    def active(self) -> bool:
        return bool(self.pattern)

    def clear(self) -> None:
        self.pattern = ""
        self.last_match = None


class SearchEngine:
    """Match rows by their displayed key or value text.

    The sweep starts strictly after ``start`` and wraps; the start row only
    matches when no other row does.
    """

    def __init__(
        self,
        arena: RowArena,
        supervisor: ProgressSupervisor | None = None,
        key_clip: int = 200,
        value_clip: int = 500,
    ) -> None:
        self.arena = arena
        self.supervisor = supervisor
        self.key_clip = key_clip
        self.value_clip = value_clip

    def row_matches(self, node_id: int, regex: re.Pattern[str]) -> bool:
        node = self.arena[node_id]
        if node.has_key and regex.search(key_text(node, self.key_clip)):
            return True
        return regex.search(value_text(node, self.value_clip)) is not None

    def _sweep(self, rows: Sequence[int], start: int, regex: re.Pattern[str], tick: Callable[[], None]) -> int | None:
        count = len(rows)
        for offset in range(1, count + 1):
            index = (start + offset) % count
            tick()
            if self.row_matches(rows[index], regex):
                return index
        return None

    def search(self, rows: Sequence[int], start: int, pattern: str) -> int | None:
        """Return the index in ``rows`` of the next match after ``start``, or ``None``."""
        if not rows or not pattern:
            return None
        regex = compile_pattern(pattern)
        if self.supervisor is None:
            return self._sweep(rows, start, regex, lambda: None)

        def work() -> int | None:
            with self.supervisor.task("search", total=len(rows)) as progress:
                return self._sweep(rows, start, regex, progress.tick)

        return self.supervisor.supervise(f"searching {pattern!r}", work).unwrap()
