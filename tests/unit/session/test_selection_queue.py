from __future__ import annotations

import unittest

from lazyscope.row_model.types import RowArena
from lazyscope.session.selection import SelectionQueue


def _arena(count: int) -> RowArena:
    arena = RowArena()
    for index in range(count):
        arena.new_root(index)
    return arena


class SelectionQueueTests(unittest.TestCase):
    def test_deselect_and_select_keeps_insertion_order(self) -> None:
        arena = _arena(4)
        a, b, c, d = range(4)
        selection = SelectionQueue(arena)
        for node_id in (a, b, c):
            selection.toggle(node_id)
        selection.toggle(b)
        selection.toggle(d)

        self.assertEqual(selection.ids(), [a, c, d])
        self.assertFalse(arena[b].selected)
        self.assertTrue(all(arena[node_id].selected for node_id in (a, c, d)))

    def test_reselecting_moves_row_to_back(self) -> None:
        selection = SelectionQueue(_arena(3))
        selection.add(0)
        selection.add(1)
        selection.add(0)

        self.assertEqual(selection.ids(), [1, 0])

    def test_toggle_is_self_inverse(self) -> None:
        arena = _arena(3)
        selection = SelectionQueue(arena)
        selection.add(2)
        before = selection.ids()

        selection.toggle(1)
        selection.toggle(1)

        self.assertEqual(selection.ids(), before)
        self.assertFalse(arena[1].selected)

    def test_bulk_toggle_appends_missing_then_clears_all(self) -> None:
        arena = _arena(4)
        selection = SelectionQueue(arena)
        selection.add(2)

        self.assertTrue(selection.toggle_all([0, 1, 2, 3]))
        self.assertEqual(selection.ids(), [2, 0, 1, 3])

        self.assertFalse(selection.toggle_all([0, 1, 2, 3]))
        self.assertEqual(selection.ids(), [])
        self.assertFalse(any(node.selected for node in arena))

    def test_bulk_toggle_leaves_other_rows_alone(self) -> None:
        selection = SelectionQueue(_arena(4))
        selection.add(3)
        selection.toggle_all([0, 1])
        selection.toggle_all([0, 1])

        self.assertEqual(selection.ids(), [3])

    def test_clear_resets_flags(self) -> None:
        arena = _arena(2)
        selection = SelectionQueue(arena)
        selection.toggle_all([0, 1])
        selection.clear()

        self.assertFalse(selection)
        self.assertFalse(arena[0].selected or arena[1].selected)


if __name__ == "__main__":
    unittest.main()
