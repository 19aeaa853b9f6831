"""Frame composition: panel area plus one status line.

``compose_frame`` is pure and returns exactly ``height`` lines; ``write_frame``
sends a composed frame to the terminal with a single write.
"""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass

from ..panels.viewport import ViewPanel
from ..ui_theme import DEFAULT_THEME, UITheme
from .ansi import clip_ansi_line, display_width
from .help import help_page_lines

HELP_HINT = "│ ? Help"


@dataclass
class FrameContext:
    session: object
    panel: ViewPanel
    height: int
    width: int
    tab_index: int = 0
    tab_count: int = 1
    theme: UITheme = DEFAULT_THEME
    progress_bar: str = ""
    alert: bool = False
    prompt: str | None = None


def build_status_line(left_text: str, width: int, right_text: str = HELP_HINT) -> str:
    """Left-align ``left_text`` and right-align ``right_text`` within ``width - 1`` columns."""
    usable = max(1, width - 1)
    right_width = display_width(right_text)
    if usable <= right_width:
        return clip_ansi_line(right_text, usable)
    left = clip_ansi_line(left_text, max(0, usable - right_width - 1))
    gap = " " * (usable - display_width(left) - right_width)
    return f"{left}{gap}{right_text}"


def tab_indicator(tab_index: int, tab_count: int, theme: UITheme = DEFAULT_THEME) -> str:
    if tab_count <= 1:
        return ""
    labels = []
    for index in range(tab_count):
        style = theme.tab_active if index == tab_index else theme.tab_inactive
        labels.append(f"{style}{index + 1}{theme.reset}")
    return "[" + " ".join(labels) + "] "


def status_left_text(context: FrameContext) -> str:
    session = context.session
    theme = context.theme
    if context.prompt is not None:
        return f"{context.prompt}▏"
    parts: list[str] = []
    if context.alert:
        parts.append(f"{theme.alert}SLOW{theme.reset}")
    if context.progress_bar:
        parts.append(context.progress_bar)
    if session.numeric_prefix:
        parts.append(f"[{session.numeric_prefix}]")
    if session.selection:
        parts.append(f"{len(session.selection)} selected")
    if session.search.active:
        parts.append(f"/{session.search.pattern}")
    if session.status_message:
        parts.append(f"{theme.status}{session.status_message}{theme.reset}")
    return "  ".join(parts)


def panel_lines(context: FrameContext, rows: int) -> list[str]:
    session = context.session
    if session.help_page:
        lines = [clip_ansi_line(line, context.width) for line in help_page_lines(session.help_page, context.theme)]
        lines = lines[:rows]
        lines.extend([""] * (rows - len(lines)))
        return lines
    return context.panel.render(session, rows, context.width)


def compose_frame(context: FrameContext) -> list[str]:
    """Return ``height`` lines: the panel (or help page) then the status line."""
    if context.height <= 0:
        return []
    rows = context.height - 1
    lines = panel_lines(context, rows) if rows > 0 else []
    right = tab_indicator(context.tab_index, context.tab_count, context.theme) + HELP_HINT
    status = build_status_line(status_left_text(context), context.width, right)
    lines.append(f"{context.theme.reverse}{status}\033[0m")
    return lines


def frame_text(lines: Sequence[str]) -> str:
    """Join lines into one payload that repaints from the home position."""
    out = ["\033[H"]
    for index, line in enumerate(lines):
        if index:
            out.append("\r\n")
        out.append(line)
        out.append("\033[0m\033[K")
    return "".join(out)


def write_frame(fd: int, lines: Sequence[str]) -> None:
    os.write(fd, frame_text(lines).encode("utf-8", errors="replace"))
