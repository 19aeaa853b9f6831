"""Lens panel: one row rendered through the selected lens, below a context header."""

from __future__ import annotations

from ..lenses import LensRegistry, LensResult
from ..row_model.rendering import plain_row
from ..row_model.types import SubjectType
from ..ui_theme import DEFAULT_THEME, UITheme
from .viewport import ViewPanel

# Keys that change the tree while the lens is shown flag the "VIEWING" label.
TREE_PREVIEW_KEYS = frozenset(
    {"UP", "DOWN", "LEFT", "RIGHT", "SHIFT_UP", "SHIFT_DOWN", "@", ".", "(", "o", "*", "|", "-"}
)
VIEWING_INDENT = " " * 10


class LensPanel(ViewPanel):
    coords_attr = "lens_coords"

    def __init__(self, lenses: LensRegistry, theme: UITheme = DEFAULT_THEME) -> None:
        self.lenses = lenses
        self.theme = theme

    def lens_result(self, session) -> LensResult:
        """Render (or reuse) the current row's output for the active subject and lens."""
        node = session.current_node
        subject_type = session.subject_type
        if subject_type is SubjectType.KEY and not node.has_key:
            return LensResult("")
        lens_id = self.lenses.resolve_index(session.lens_index)
        slot = (subject_type, lens_id)
        cached = node.lens_cache.get(slot)
        if cached is None:
            cached = node.cache_lens(slot, self.lenses.render(lens_id, node.subject(subject_type)))
        return cached

    def body_lines(self, session, width: int) -> list[str]:
        return self.lens_result(session).text.split("\n")

    def header_lines(self, session, width: int) -> list[str]:
        arena = session.arena
        rows = session.visible_rows()
        index = session.cursor_index(rows)
        above = plain_row(arena, arena[rows[index - 1]]) if index > 0 else ""
        below = plain_row(arena, arena[rows[index + 1]]) if index + 1 < len(rows) else ""
        label = "VIEWING:"
        if session.last_key in TREE_PREVIEW_KEYS:
            label = f"{self.theme.reverse}{label}{self.theme.reset}"
        dotted = "·" * width
        return [
            f"{VIEWING_INDENT}{above}",
            f"{label}  {plain_row(arena, session.current_node)}",
            f"{VIEWING_INDENT}{below}",
            dotted,
            self.parameter_line(session),
            dotted,
        ]

    def parameter_line(self, session) -> str:
        reverse, reset = self.theme.reverse, self.theme.reset
        lens_count = len(self.lenses)
        lens_id = self.lenses.resolve_index(session.lens_index)
        subject = session.current_node.subject(session.subject_type)
        subject_part = f"SUBJECT: {session.subject_type.value}".ljust(14)
        class_part = f"   CLASS: {type(subject).__name__}"
        lens_part = f" LENS {lens_id + 1}/{lens_count}: {self.lenses.lens_at(lens_id).name}"
        if session.last_key == "<":
            subject_part = f"{reverse}{subject_part}{reset}"
        elif session.last_key == ">":
            lens_part = f"{reverse}{lens_part}{reset}"
        return f"{subject_part}{class_part}   {lens_part}"
