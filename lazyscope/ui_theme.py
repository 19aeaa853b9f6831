"""UI palette definitions for tree rows, lens headers, and chrome.

Lens syntax highlighting uses a separate Pygments style setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    reverse: str
    dim: str
    tree_marker: str
    tree_key: str
    tree_value: str
    tree_separator: str
    tree_selected: str
    tree_user_added: str
    tree_error: str
    tree_timeout: str
    tab_active: str
    tab_inactive: str
    status: str
    progress_fill: str
    progress_empty: str
    alert: str
    help_heading: str
    help_key: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    reverse="\033[7m",
    dim="\033[2m",
    tree_marker="\033[38;5;44m",
    tree_key="\033[38;5;110m",
    tree_value="\033[38;5;252m",
    tree_separator="\033[2;38;5;250m",
    tree_selected="\033[1;38;5;214m",
    tree_user_added="\033[38;5;42m",
    tree_error="\033[1;38;5;203m",
    tree_timeout="\033[1;38;5;221m",
    tab_active="\033[1;38;5;81m",
    tab_inactive="\033[2;38;5;250m",
    status="\033[38;5;229m",
    progress_fill="\033[48;5;31m",
    progress_empty="\033[48;5;237m",
    alert="\033[1;5;38;5;203m",
    help_heading="\033[1;38;5;81m",
    help_key="\033[38;5;229m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="\033[0m",
    reverse="\033[7m",
    dim="",
    tree_marker="",
    tree_key="",
    tree_value="",
    tree_separator="",
    tree_selected="",
    tree_user_added="",
    tree_error="",
    tree_timeout="",
    tab_active="",
    tab_inactive="",
    status="",
    progress_fill="\033[7m",
    progress_empty="",
    alert="\033[7m",
    help_heading="",
    help_key="",
)

_THEMES = {theme.name: theme for theme in (DEFAULT_THEME, PLAIN_THEME)}


def available_theme_names() -> tuple[str, ...]:
    """Return known theme names in display order."""
    return tuple(_THEMES)


def resolve_theme(name: str | None, no_color: bool = False) -> UITheme:
    """Return a theme by name; ``no_color`` always wins with the plain palette."""
    if no_color:
        return PLAIN_THEME
    if name is None:
        return DEFAULT_THEME
    return _THEMES.get(name.strip().lower(), DEFAULT_THEME)
