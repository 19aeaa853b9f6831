"""Per-tab session state and the tab set that holds it."""

from __future__ import annotations

import enum
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..panels.viewport import ViewCoords
from ..row_model.navigation import flatten_rows, nearest_visible
from ..row_model.types import RowArena, RowNode, SubjectType
from .search import SearchState
from .selection import SelectionQueue

MAX_TABS = 9
HELP_PAGE_COUNT = 2


class ViewMode(enum.Enum):
    TREE = "tree"
    LENS = "lens"


@dataclass
class Session:
    """Everything one tab knows: its row arena, cursor, selection and UI toggles."""

    seeds: list[Any]
    arena: RowArena
    roots: list[int]
    cursor: int
    selection: SelectionQueue
    subject_type: SubjectType = SubjectType.VALUE
    lens_index: int = 0
    numeric_prefix: str = ""
    search: SearchState = field(default_factory=SearchState)
    view: ViewMode = ViewMode.TREE
    help_page: int = 0
    show_user_added: bool = False
    status_message: str = ""
    last_key: str = ""
    tree_coords: ViewCoords = field(default_factory=ViewCoords)
    lens_coords: ViewCoords = field(default_factory=ViewCoords)

    @classmethod
    def seeded(cls, seeds: Sequence[Any]) -> Session:
        """Create a session with one root row per seed value."""
        if not seeds:
            raise ValueError("a session needs at least one seed")
        arena = RowArena()
        roots = [arena.new_root(seed).id for seed in seeds]
        return cls(
            seeds=list(seeds),
            arena=arena,
            roots=roots,
            cursor=roots[0],
            selection=SelectionQueue(arena),
        )

    def restart(self) -> None:
        """Replace the whole row tree with fresh roots for the same seeds."""
        fresh = Session.seeded(self.seeds)
        self.arena = fresh.arena
        self.roots = fresh.roots
        self.cursor = fresh.cursor
        self.selection = fresh.selection
        self.numeric_prefix = ""
        self.search.clear()
        self.view = ViewMode.TREE
        self.tree_coords = ViewCoords()
        self.lens_coords = ViewCoords()

    @property
    def current_node(self) -> RowNode:
        return self.arena[self.cursor]

    def visible_rows(self) -> list[int]:
        return flatten_rows(self.arena, self.roots, self.show_user_added)

    def cursor_index(self, rows: Sequence[int] | None = None) -> int:
        rows = self.visible_rows() if rows is None else rows
        return rows.index(self.cursor)

    def restore_cursor(self) -> bool:
        """Move a hidden cursor to its nearest visible ancestor; return whether it moved."""
        target = nearest_visible(self.arena, self.cursor, self.show_user_added)
        if target == self.cursor:
            return False
        self.cursor = target
        return True

    def target_nodes(self) -> list[int]:
        """Rows a bulk command applies to: the selection if any, else the cursor."""
        return self.selection.ids() if self.selection else [self.cursor]

    def returned_subjects(self) -> Any:
        """Value handed back on return: a list for a selection, else one subject."""
        if self.selection:
            return [self.arena[node_id].subject(self.subject_type) for node_id in self.selection]
        return self.current_node.subject(self.subject_type)

    def set_status(self, message: str) -> None:
        self.status_message = message


class TabSet:
    """Ordered tabs with exactly one current."""

    def __init__(self, first: Session) -> None:
        self.tabs: list[Session] = [first]
        self.current_index = 0

    def __len__(self) -> int:
        return len(self.tabs)

    @property
    def current(self) -> Session:
        return self.tabs[self.current_index]

    def open(self, session: Session) -> bool:
        if len(self.tabs) >= MAX_TABS:
            return False
        self.tabs.insert(self.current_index + 1, session)
        self.current_index += 1
        return True

    def close_current(self) -> bool:
        if len(self.tabs) <= 1:
            return False
        del self.tabs[self.current_index]
        self.current_index = min(self.current_index, len(self.tabs) - 1)
        return True

    def cycle(self, step: int = 1) -> None:
        self.current_index = (self.current_index + step) % len(self.tabs)
