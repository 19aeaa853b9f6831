"""Flattening and visibility helpers over a row arena."""

from __future__ import annotations

from collections.abc import Sequence

from .types import RowArena


def _row_shown(arena: RowArena, node_id: int, show_user_added: bool) -> bool:
    return show_user_added or not arena[node_id].user_added


def flatten_rows(arena: RowArena, roots: Sequence[int], show_user_added: bool) -> list[int]:
    """Return rows in top-to-bottom order, descending only into open nodes.

    Hidden user-added rows are skipped along with their subtrees.
    """
    rows: list[int] = []
    stack = [root for root in reversed(roots)]
    while stack:
        node_id = stack.pop()
        if not _row_shown(arena, node_id, show_user_added):
            continue
        rows.append(node_id)
        node = arena[node_id]
        if node.is_open:
            stack.extend(reversed(node.children))
    return rows


def is_visible(arena: RowArena, node_id: int, show_user_added: bool) -> bool:
    """Visible iff every ancestor is open and no row on the path is a hidden user-added row."""
    if not _row_shown(arena, node_id, show_user_added):
        return False
    for ancestor in arena.ancestors(node_id):
        if not ancestor.is_open or not _row_shown(arena, ancestor.id, show_user_added):
            return False
    return True


def nearest_visible(arena: RowArena, node_id: int, show_user_added: bool) -> int:
    """Return ``node_id`` if visible, otherwise its closest visible ancestor."""
    if is_visible(arena, node_id, show_user_added):
        return node_id
    for ancestor in arena.ancestors(node_id):
        if is_visible(arena, ancestor.id, show_user_added):
            return ancestor.id
    # Roots are always visible; only reached for a hidden user-added root.
    path = [node_id, *(ancestor.id for ancestor in arena.ancestors(node_id))]
    return path[-1]


def sibling_rows(arena: RowArena, roots: Sequence[int], node_id: int, show_user_added: bool) -> list[int]:
    """Return the rows sharing ``node_id``'s parent, in tree order."""
    parent = arena[node_id].parent
    candidates = list(roots) if parent is None else arena[parent].children
    return [candidate for candidate in candidates if _row_shown(arena, candidate, show_user_added)]
