from __future__ import annotations

import unittest

from lazyscope.row_model.providers import ProviderSet
from lazyscope.row_model.types import ExpansionState, SubjectType
from lazyscope.session.registry import ResumableSession, SessionRegistry
from lazyscope.session.state import MAX_TABS, Session, TabSet, ViewMode


class SessionTests(unittest.TestCase):
    def test_seeded_session_has_one_root_per_seed(self) -> None:
        session = Session.seeded(["a", "b"])

        self.assertEqual([session.arena[root].value for root in session.roots], ["a", "b"])
        self.assertEqual(session.cursor, session.roots[0])
        self.assertEqual(session.visible_rows(), session.roots)

    def test_empty_seed_list_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Session.seeded([])

    def test_restart_discards_rows_and_view_state(self) -> None:
        session = Session.seeded([{"a": 1}])
        root = session.arena[session.roots[0]]
        child = session.arena.new_node(1, key="a", has_key=True, parent=root.id)
        root.children.append(child.id)
        root.expansion_state = ExpansionState.BUILT_OPEN
        session.cursor = child.id
        session.selection.add(child.id)
        session.view = ViewMode.LENS
        session.search.pattern = "a"

        session.restart()

        self.assertEqual(len(session.arena), 1)
        self.assertEqual(session.cursor, session.roots[0])
        self.assertFalse(session.selection)
        self.assertFalse(session.search.active)
        self.assertEqual(session.view, ViewMode.TREE)

    def test_returned_subjects_follow_subject_type(self) -> None:
        session = Session.seeded([{"a": 1}])
        root = session.arena[session.roots[0]]
        child = session.arena.new_node(1, key="a", has_key=True, parent=root.id)
        root.children.append(child.id)
        root.expansion_state = ExpansionState.BUILT_OPEN

        session.cursor = child.id
        self.assertEqual(session.returned_subjects(), 1)

        session.subject_type = SubjectType.KEY
        self.assertEqual(session.returned_subjects(), "a")

        session.selection.add(child.id)
        self.assertEqual(session.returned_subjects(), ["a"])

    def test_restore_cursor_moves_to_visible_ancestor(self) -> None:
        session = Session.seeded([[1]])
        root = session.arena[session.roots[0]]
        child = session.arena.new_node(1, parent=root.id)
        root.children.append(child.id)
        root.expansion_state = ExpansionState.BUILT_OPEN
        session.cursor = child.id

        self.assertFalse(session.restore_cursor())
        root.expansion_state = ExpansionState.BUILT_COLLAPSED
        self.assertTrue(session.restore_cursor())
        self.assertEqual(session.cursor, root.id)


class TabSetTests(unittest.TestCase):
    def test_open_inserts_after_current_and_focuses_it(self) -> None:
        tabs = TabSet(Session.seeded([1]))
        tabs.open(Session.seeded([3]))
        tabs.cycle(-1)
        tabs.open(Session.seeded([2]))

        self.assertEqual([tab.seeds for tab in tabs.tabs], [[1], [2], [3]])
        self.assertEqual(tabs.current_index, 1)

    def test_limit_and_last_tab_are_refused(self) -> None:
        tabs = TabSet(Session.seeded([0]))
        self.assertFalse(tabs.close_current())

        for value in range(1, MAX_TABS):
            self.assertTrue(tabs.open(Session.seeded([value])))
        self.assertFalse(tabs.open(Session.seeded(["extra"])))
        self.assertEqual(len(tabs), MAX_TABS)

    def test_closing_the_last_position_focuses_the_new_last_tab(self) -> None:
        tabs = TabSet(Session.seeded([0]))
        tabs.open(Session.seeded([1]))

        self.assertTrue(tabs.close_current())
        self.assertEqual(tabs.current.seeds, [0])

    def test_cycle_wraps_both_ways(self) -> None:
        tabs = TabSet(Session.seeded([0]))
        tabs.open(Session.seeded([1]))
        tabs.open(Session.seeded([2]))

        tabs.cycle(1)
        self.assertEqual(tabs.current_index, 0)
        tabs.cycle(-1)
        self.assertEqual(tabs.current_index, 2)


class SessionRegistryTests(unittest.TestCase):
    def test_set_get_and_clear(self) -> None:
        registry = SessionRegistry()
        self.assertIsNone(registry.get_last())

        entry = ResumableSession(TabSet(Session.seeded([1])), ProviderSet())
        registry.set_last(entry)
        self.assertIs(registry.get_last(), entry)

        registry.clear()
        self.assertIsNone(registry.get_last())


if __name__ == "__main__":
    unittest.main()
