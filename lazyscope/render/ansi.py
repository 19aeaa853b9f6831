"""ANSI-aware text measurement and viewport slicing.

Escape sequences never count toward display width. Slicing keeps the most
recent SGR style active so a horizontally scrolled line keeps its colors.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    """Drop every escape sequence from ``text``."""
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return how many terminal columns ``text`` occupies once rendered."""
    col = 0
    for ch in strip_ansi(text):
        col += char_display_width(ch, col)
    return col


def clip_plain(text: str, max_chars: int, ellipsis: str = "…") -> str:
    """Clip unstyled ``text`` to ``max_chars`` characters, marking the cut."""
    if max_chars <= 0:
        return ""
    if len(text) <= max_chars:
        return text
    if max_chars <= len(ellipsis):
        return text[:max_chars]
    return text[: max_chars - len(ellipsis)] + ellipsis


def slice_ansi_line(text: str, start_cols: int, max_cols: int) -> str:
    """Return the ``[start_cols, start_cols + max_cols)`` column window of a styled line.

    When the window begins after a style sequence, that pending SGR sequence
    is emitted first so visible text keeps its original styling. Tabs are
    expanded into spaces so columns line up with terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""
    start_cols = max(0, start_cols)

    out: list[str] = []
    col = 0
    shown = 0
    i = 0
    n = len(text)
    pending_sgr = ""
    style_emitted = False
    while i < n and shown < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                seq = match.group(0)
                if seq.endswith("m"):
                    pending_sgr = seq
                    if col >= start_cols:
                        out.append(seq)
                        style_emitted = True
                elif col >= start_cols:
                    out.append(seq)
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w <= start_cols:
            col += w
            i += 1
            continue
        if not style_emitted and pending_sgr:
            out.append(pending_sgr)
            style_emitted = True
        if ch == "\t":
            pad = min(w, max_cols - shown)
            out.append(" " * pad)
            shown += pad
            col += w
            i += 1
            continue
        if shown + w > max_cols:
            break
        out.append(ch)
        shown += w
        col += w
        i += 1

    return "".join(out)


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns."""
    return slice_ansi_line(text, 0, max_cols)


def pad_ansi_line(text: str, width: int) -> str:
    """Right-pad a styled line with spaces up to ``width`` display columns."""
    missing = width - display_width(text)
    if missing <= 0:
        return text
    return text + " " * missing
