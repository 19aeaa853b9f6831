"""Help page content.

Two pages cycled by ``?``; rendering here is presentation-only and side-effect
free. Frame composition places the lines in the panel area.
"""

from __future__ import annotations

from ..ui_theme import DEFAULT_THEME, UITheme

# (heading, [(keys, description), ...]) per section.
HelpSection = tuple[str, tuple[tuple[str, str], ...]]

HELP_PAGE_BASIC: tuple[HelpSection, ...] = (
    (
        "BASIC NAVIGATION",
        (
            ("Up/Down k/j", "move (type a number first to move further)"),
            ("Shift+Up/Down K/J", "move 12 rows"),
            ("Right l", "expand current or selected rows"),
            ("Left h", "collapse current or selected rows"),
            ("Enter", "close, returning current or selected subjects"),
            ("q", "quit, returning nothing"),
        ),
    ),
    (
        "LENS VIEW",
        (
            ("Space", "toggle lens view"),
            (">", "next lens"),
            ("<", "toggle subject (key or value of the row)"),
        ),
    ),
    (
        "MORE NAVIGATION",
        (
            ("w/a/s/d", "move the view window (Alt for bigger steps)"),
            ("0", "reset the view; press again to put the cursor on top"),
            ("t Tab Q !", "new tab, next tab, close tab, restart tab"),
        ),
    ),
)

HELP_PAGE_ADVANCED: tuple[HelpSection, ...] = (
    (
        "DIGGING DEEPER (current or selected rows)",
        (
            ("@", "build attribute rows"),
            (".", "build relationship rows"),
            ("(", "build rows from an iterable"),
            ("o", "quick open: relationships, then attributes, then iterable"),
            (":", "evaluate an expression against the row ('_' is the subject)"),
            ("H", "show or hide rows added by expressions"),
        ),
    ),
    (
        "SELECTING ROWS",
        (
            ("*", "select or deselect all rows"),
            ("|", "select or deselect the siblings of the current row"),
            ("-", "select or deselect the current row"),
        ),
    ),
    (
        "SEARCH AND HANDLES",
        (
            ("/", "search row keys and values (regex)"),
            ("n", "next search result"),
            ("'", "save current or selected subjects under a name"),
            ("Esc", "reset selection, search and count (or leave lens view)"),
        ),
    ),
)

HELP_PAGES: tuple[tuple[HelpSection, ...], ...] = (HELP_PAGE_BASIC, HELP_PAGE_ADVANCED)


def help_page_lines(page: int, theme: UITheme = DEFAULT_THEME) -> list[str]:
    """Return styled lines for 1-based ``page``; out-of-range pages are empty."""
    if page < 1 or page > len(HELP_PAGES):
        return []
    sections = HELP_PAGES[page - 1]
    key_width = max(len(keys) for _heading, rows in sections for keys, _text in rows)
    lines = [
        f"  {theme.help_key}q{theme.reset} quit"
        f"{' ' * 20}{theme.help_key}?{theme.reset} cycle help pages ({page}/{len(HELP_PAGES)})",
        "",
    ]
    for heading, rows in sections:
        lines.append(f"  {theme.help_heading}{heading}{theme.reset}")
        for keys, text in rows:
            lines.append(f"    {theme.help_key}{keys.rjust(key_width)}{theme.reset} : {text}")
        lines.append("")
    return lines
