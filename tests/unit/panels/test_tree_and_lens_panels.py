"""Tests for cursor tracking in the tree panel and caching in the lens panel."""

from __future__ import annotations

import unittest

from lazyscope.lenses import LensRegistry, ReprLens
from lazyscope.panels.lens_panel import LensPanel
from lazyscope.panels.tree_panel import DEAD_CENTER, FLEXIBLE_RANGE, TreePanel, selected_with_ansi
from lazyscope.render.ansi import strip_ansi
from lazyscope.row_model.build import RowBuilder
from lazyscope.row_model.providers import ProviderSet
from lazyscope.row_model.types import BuildMode, SubjectType
from lazyscope.runtime.progress import ProgressSupervisor
from lazyscope.session.state import Session
from lazyscope.ui_theme import PLAIN_THEME


def _session(value) -> Session:
    session = Session.seeded([value])
    RowBuilder(session.arena, ProviderSet(), ProgressSupervisor(alert_seconds=60.0)).expand(
        session.roots[0], BuildMode.QUICK_OPEN
    )
    return session


class CountingLens:
    name = "counting"

    def __init__(self) -> None:
        self.calls = 0

    def apply(self, subject):
        self.calls += 1
        return f"seen {subject!r}"


class FailingLens:
    name = "failing"

    def apply(self, subject):
        raise RuntimeError("lens broke")


class TreePanelTrackingTests(unittest.TestCase):
    def test_flexible_range_scrolls_minimum_amount(self) -> None:
        session = _session(list(range(40)))
        panel = TreePanel(theme=PLAIN_THEME, cursor_tracking=FLEXIBLE_RANGE)
        rows = session.visible_rows()

        session.cursor = rows[15]
        panel.track_cursor(session, 10)
        self.assertEqual(session.tree_coords.y, 6)

        session.cursor = rows[10]
        panel.track_cursor(session, 10)
        self.assertEqual(session.tree_coords.y, 6)

        session.cursor = rows[2]
        panel.track_cursor(session, 10)
        self.assertEqual(session.tree_coords.y, 2)

    def test_dead_center_keeps_cursor_in_middle(self) -> None:
        session = _session(list(range(40)))
        panel = TreePanel(theme=PLAIN_THEME, cursor_tracking=DEAD_CENTER)
        rows = session.visible_rows()

        session.cursor = rows[20]
        panel.track_cursor(session, 10)
        self.assertEqual(session.tree_coords.y, 15)

        session.cursor = rows[1]
        panel.track_cursor(session, 10)
        self.assertEqual(session.tree_coords.y, 0)

    def test_cursor_row_is_reverse_highlighted(self) -> None:
        session = _session([1, 2])
        panel = TreePanel(theme=PLAIN_THEME)

        lines = panel.render(session, 5, 40)

        self.assertTrue(lines[0].startswith("\033[7m"))
        self.assertEqual(strip_ansi(lines[1]), "   • 1")

    def test_cursor_to_origin_picks_first_row_in_window(self) -> None:
        session = _session(list(range(40)))
        panel = TreePanel(theme=PLAIN_THEME)
        session.tree_coords.y_bounds = range(0, 41)
        session.tree_coords.y = 7

        panel.cursor_to_origin(session)

        self.assertEqual(session.cursor_index(), 7)

    def test_unknown_policy_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TreePanel(cursor_tracking="sideways")

    def test_selected_with_ansi_keeps_reverse_after_inner_resets(self) -> None:
        text = selected_with_ansi("\033[31ma\033[0mb")

        self.assertIn("\033[0;7m", text)
        self.assertTrue(text.endswith("\033[0m"))


class LensPanelTests(unittest.TestCase):
    def test_lens_output_cached_per_subject_type_and_lens(self) -> None:
        lens = CountingLens()
        panel = LensPanel(LensRegistry([lens, ReprLens()]), theme=PLAIN_THEME)
        session = _session({"a": 1})
        session.cursor = session.arena[session.roots[0]].children[0]

        first = panel.lens_result(session)
        second = panel.lens_result(session)
        self.assertIs(first, second)
        self.assertEqual(lens.calls, 1)

        session.subject_type = SubjectType.KEY
        self.assertEqual(panel.lens_result(session).text, "seen 'a'")
        self.assertEqual(lens.calls, 2)

        session.lens_index = 3
        self.assertEqual(panel.lens_result(session).text, "'a'")

    def test_keyless_row_in_key_mode_is_empty(self) -> None:
        lens = CountingLens()
        panel = LensPanel(LensRegistry([lens]), theme=PLAIN_THEME)
        session = _session([1])
        session.subject_type = SubjectType.KEY

        self.assertEqual(panel.lens_result(session).text, "")
        self.assertEqual(lens.calls, 0)

    def test_failing_lens_shows_traceback(self) -> None:
        panel = LensPanel(LensRegistry([FailingLens()]), theme=PLAIN_THEME)
        session = _session([1])

        result = panel.lens_result(session)

        self.assertFalse(result.ok)
        self.assertIn("Traceback", result.text)
        self.assertIn("RuntimeError: lens broke", result.text)

    def test_header_has_six_lines_and_parameter_line(self) -> None:
        panel = LensPanel(LensRegistry([CountingLens(), ReprLens()]), theme=PLAIN_THEME)
        session = _session({"a": 1, "b": 2})
        session.cursor = session.arena[session.roots[0]].children[0]

        header = panel.header_lines(session, 30)

        self.assertEqual(len(header), 6)
        self.assertIn("VIEWING:", header[1])
        self.assertIn("a : 1", header[1])
        self.assertIn("b : 2", header[2])
        parameters = strip_ansi(header[4])
        self.assertIn("SUBJECT: value", parameters)
        self.assertIn("CLASS: int", parameters)
        self.assertIn("LENS 1/2: counting", parameters)

    def test_render_places_lens_body_under_header(self) -> None:
        panel = LensPanel(LensRegistry([CountingLens()]), theme=PLAIN_THEME)
        session = _session([5])

        lines = panel.render(session, 10, 40)

        self.assertEqual(len(lines), 10)
        self.assertEqual(lines[6], "seen [5]")


if __name__ == "__main__":
    unittest.main()
