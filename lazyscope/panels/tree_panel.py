"""Tree panel: the flattened row listing with the cursor kept in view."""

from __future__ import annotations

from ..row_model.rendering import KEY_CLIP_LENGTH, VALUE_CLIP_LENGTH, format_row
from ..ui_theme import DEFAULT_THEME, UITheme
from .viewport import ViewPanel, clamp_to

FLEXIBLE_RANGE = "flexible_range"
DEAD_CENTER = "dead_center"
CURSOR_TRACKING_POLICIES = (FLEXIBLE_RANGE, DEAD_CENTER)


def selected_with_ansi(text: str, theme: UITheme = DEFAULT_THEME) -> str:
    """Apply cursor styling without discarding existing ANSI colors."""
    if not text:
        return text
    # Keep reverse video active even when the text contains internal resets.
    return theme.reverse + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


class TreePanel(ViewPanel):
    coords_attr = "tree_coords"

    def __init__(
        self,
        theme: UITheme = DEFAULT_THEME,
        key_clip: int = KEY_CLIP_LENGTH,
        value_clip: int = VALUE_CLIP_LENGTH,
        cursor_tracking: str = FLEXIBLE_RANGE,
    ) -> None:
        if cursor_tracking not in CURSOR_TRACKING_POLICIES:
            raise ValueError(f"unknown cursor tracking policy: {cursor_tracking!r}")
        self.theme = theme
        self.key_clip = key_clip
        self.value_clip = value_clip
        self.cursor_tracking = cursor_tracking

    def body_lines(self, session, width: int) -> list[str]:
        arena = session.arena
        lines: list[str] = []
        for node_id in session.visible_rows():
            line = format_row(arena, arena[node_id], self.key_clip, self.value_clip, self.theme)
            if node_id == session.cursor:
                line = selected_with_ansi(line, self.theme)
            lines.append(line)
        return lines

    def track_cursor(self, session, height: int) -> None:
        """Scroll vertically so the cursor row sits inside the ``height``-row window."""
        rows = session.visible_rows()
        coords = self.coords(session)
        coords.y_bounds = range(0, len(rows))
        index = session.cursor_index(rows)
        visible = max(1, height)
        if self.cursor_tracking == DEAD_CENTER:
            coords.y = index - visible // 2
        elif index < coords.y:
            coords.y = index
        elif index >= coords.y + visible:
            coords.y = index - visible + 1
        coords.y = clamp_to(coords.y, coords.y_bounds)

    def cursor_to_origin(self, session) -> None:
        """Move the cursor to the first row shown in the window."""
        rows = session.visible_rows()
        if rows:
            session.cursor = rows[clamp_to(self.coords(session).y, range(0, len(rows)))]
