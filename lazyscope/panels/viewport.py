"""Two-dimensional viewport geometry shared by the tree and lens panels.

A panel shows a rectangular window of a larger buffer of styled lines. The
offset is clamped to boundaries recomputed from the buffer on every render
and every scroll.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..render.ansi import clip_ansi_line, display_width, slice_ansi_line

SCROLL_STEP = 5
FAST_SCROLL_STEP = 50


def clamp_to(value: int, bounds: range) -> int:
    """Clamp ``value`` into ``[bounds.start, bounds.stop - 1]`` (``start`` for empty ranges)."""
    if len(bounds) == 0:
        return bounds.start
    return max(bounds.start, min(value, bounds.stop - 1))


def compute_boundaries(lines: Sequence[str], width: int) -> tuple[range, range]:
    """Return ``(x_bounds, y_bounds)`` for a buffer shown in a ``width``-column window."""
    longest = max((display_width(line) for line in lines), default=0)
    return range(0, max(longest, width)), range(0, len(lines))


def visible_slice(lines: Sequence[str], x: int, y: int, rows: int, cols: int) -> list[str]:
    """Cut ``rows`` lines starting at ``y``, each limited to columns ``[x, x + cols)``."""
    if rows <= 0:
        return []
    return [slice_ansi_line(line, x, cols) for line in lines[y : y + rows]]


@dataclass
class ViewCoords:
    """Scroll offset of one panel plus the boundaries it is clamped to."""

    x: int = 0
    y: int = 0
    x_bounds: range = field(default_factory=lambda: range(0, 1))
    y_bounds: range = field(default_factory=lambda: range(0, 1))

    @property
    def at_origin(self) -> bool:
        return self.x == 0 and self.y == 0

    def set_boundaries(self, x_bounds: range, y_bounds: range) -> None:
        self.x_bounds = x_bounds
        self.y_bounds = y_bounds
        self.clamp()

    def clamp(self) -> None:
        self.x = clamp_to(self.x, self.x_bounds)
        self.y = clamp_to(self.y, self.y_bounds)

    def move(self, dx: int, dy: int) -> None:
        self.x += dx
        self.y += dy
        self.clamp()

    def reset(self) -> None:
        self.x = 0
        self.y = 0


class ViewPanel:
    """Base panel: subclasses provide header and body lines for a session."""

    coords_attr = ""

    def coords(self, session) -> ViewCoords:
        return getattr(session, self.coords_attr)

    def header_lines(self, session, width: int) -> list[str]:
        return []

    def body_lines(self, session, width: int) -> list[str]:
        raise NotImplementedError

    def body_height(self, session, height: int, width: int) -> int:
        return max(0, height - len(self.header_lines(session, width)))

    def recalculate_boundaries(self, session, width: int, body: Sequence[str] | None = None) -> None:
        lines = self.body_lines(session, width) if body is None else body
        x_bounds, y_bounds = compute_boundaries(lines, width)
        self.coords(session).set_boundaries(x_bounds, y_bounds)

    def scroll(self, session, dx: int, dy: int, width: int) -> None:
        self.recalculate_boundaries(session, width)
        self.coords(session).move(dx, dy)

    def reset(self, session) -> bool:
        """Zero the offset; return ``False`` when it already was at the origin."""
        coords = self.coords(session)
        if coords.at_origin:
            return False
        coords.reset()
        return True

    def render(self, session, height: int, width: int) -> list[str]:
        """Return exactly ``height`` lines: clipped header then the visible body slice."""
        header = [clip_ansi_line(line, width) for line in self.header_lines(session, width)][:height]
        body = self.body_lines(session, width)
        self.recalculate_boundaries(session, width, body)
        coords = self.coords(session)
        rows = max(0, height - len(header))
        out = header + visible_slice(body, coords.x, coords.y, rows, width)
        out.extend([""] * (height - len(out)))
        return out
