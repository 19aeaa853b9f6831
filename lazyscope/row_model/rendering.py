"""Formatting helpers for tree rows.

Key and value texts are clipped, single-line and ANSI free; the search
engine matches against exactly these strings.
"""

from __future__ import annotations

import reprlib
from typing import Any

from ..ui_theme import DEFAULT_THEME, PLAIN_THEME, UITheme
from ..render.ansi import clip_plain, strip_ansi
from .types import BuildErrorKind, ExpansionState, RowArena, RowNode

KEY_CLIP_LENGTH = 200
VALUE_CLIP_LENGTH = 500
KEY_VALUE_SEPARATOR = " : "

_ROW_REPR = reprlib.Repr()
_ROW_REPR.maxstring = 240
_ROW_REPR.maxother = 240
_ROW_REPR.maxlevel = 3


def safe_repr(value: Any) -> str:
    """``repr`` bounded in size, never raising."""
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    try:
        return _ROW_REPR.repr(value)
    except Exception as exc:
        return f"<unrepresentable {type(value).__name__}: {type(exc).__name__}>"


def _single_line(text: str) -> str:
    return text.replace("\r", "\\r").replace("\n", "\\n")


def key_text(node: RowNode, clip_length: int = KEY_CLIP_LENGTH) -> str:
    """Display text for the key subject; empty for keyless rows."""
    if not node.has_key:
        return ""
    key = node.key if isinstance(node.key, str) else safe_repr(node.key)
    return clip_plain(_single_line(key), clip_length)


def value_text(node: RowNode, clip_length: int = VALUE_CLIP_LENGTH) -> str:
    return clip_plain(_single_line(safe_repr(node.value)), clip_length)


def expansion_marker(arena: RowArena, node: RowNode) -> str:
    if node.is_error_row:
        return "✗"
    if node.build_error is not None:
        return "⧖" if node.build_error.kind is BuildErrorKind.TIMEOUT else "✗"
    if node.expansion_state is ExpansionState.UNBUILT:
        return "•"
    if not node.children:
        return "∅"
    return "▾" if node.expansion_state is ExpansionState.BUILT_OPEN else "▸"


def format_row(
    arena: RowArena,
    node: RowNode,
    key_clip: int = KEY_CLIP_LENGTH,
    value_clip: int = VALUE_CLIP_LENGTH,
    theme: UITheme | None = None,
) -> str:
    """Render one tree row as ANSI-styled display text."""
    active_theme = theme or DEFAULT_THEME
    reset = active_theme.reset
    indent = "  " * node.depth
    marker = expansion_marker(arena, node)
    if node.is_error_row:
        marker_color = active_theme.tree_error
    elif node.build_error is not None:
        marker_color = (
            active_theme.tree_timeout
            if node.build_error.kind is BuildErrorKind.TIMEOUT
            else active_theme.tree_error
        )
    else:
        marker_color = active_theme.tree_marker
    selection = f"{active_theme.tree_selected}*{reset}" if node.selected else " "

    parts = [f"{indent}{selection}{marker_color}{marker}{reset} "]
    if node.has_key:
        key_color = active_theme.tree_user_added if node.user_added else active_theme.tree_key
        parts.append(f"{key_color}{key_text(node, key_clip)}{reset}")
        parts.append(f"{active_theme.tree_separator}{KEY_VALUE_SEPARATOR}{reset}")
    value_color = active_theme.tree_error if node.is_error_row else active_theme.tree_value
    parts.append(f"{value_color}{value_text(node, value_clip)}{reset}")
    if node.expansion_state is ExpansionState.BUILT_COLLAPSED and node.children:
        hidden = arena.descendant_count(node.id)
        parts.append(f"{active_theme.dim} (+{hidden}){reset}")
    return "".join(parts)


def plain_row(arena: RowArena, node: RowNode) -> str:
    """Unstyled row text used by lens headers."""
    return strip_ansi(format_row(arena, node, theme=PLAIN_THEME))
