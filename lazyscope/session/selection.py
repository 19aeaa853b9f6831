"""Insertion-ordered selection set with bulk toggles."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..row_model.types import RowArena


class SelectionQueue:
    """Ordered set of row ids; re-selecting a row moves it to the back.

    Row ``selected`` flags in the arena are kept in sync with membership.
    """

    def __init__(self, arena: RowArena) -> None:
        self._arena = arena
        self._order: dict[int, None] = {}

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._order

    def __iter__(self) -> Iterator[int]:
        return iter(self._order)

    def __len__(self) -> int:
        return len(self._order)

    def __bool__(self) -> bool:
        return bool(self._order)

    def ids(self) -> list[int]:
        return list(self._order)

    def add(self, node_id: int) -> None:
        self._order.pop(node_id, None)
        self._order[node_id] = None
        self._arena[node_id].selected = True

    def discard(self, node_id: int) -> None:
        if node_id in self._order:
            del self._order[node_id]
            self._arena[node_id].selected = False

    def toggle(self, node_id: int) -> bool:
        """Flip one row; return whether it ended up selected."""
        if node_id in self._order:
            self.discard(node_id)
            return False
        self.add(node_id)
        return True

    def toggle_all(self, targets: Iterable[int]) -> bool:
        """Deselect ``targets`` if all are selected, else append the missing ones in order.

        Returns whether the targets ended up selected.
        """
        target_list = list(targets)
        if target_list and all(node_id in self._order for node_id in target_list):
            for node_id in target_list:
                self.discard(node_id)
            return False
        for node_id in target_list:
            if node_id not in self._order:
                self.add(node_id)
        return True

    def clear(self) -> None:
        for node_id in self._order:
            self._arena[node_id].selected = False
        self._order.clear()
