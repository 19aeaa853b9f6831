"""Row-node datatypes and the arena that owns them.

Nodes reference each other by integer id instead of object identity, so the
same underlying object reached through two paths always gets two nodes.
"""

from __future__ import annotations

import enum
import threading
from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field
from typing import Any


class ExpansionState(enum.Enum):
    UNBUILT = "unbuilt"
    BUILT_COLLAPSED = "built_collapsed"
    BUILT_OPEN = "built_open"


class SubjectType(enum.Enum):
    KEY = "key"
    VALUE = "value"

    def toggled(self) -> SubjectType:
        return SubjectType.VALUE if self is SubjectType.KEY else SubjectType.KEY


class BuildMode(enum.Enum):
    ATTRIBUTES = "attributes"
    RELATIONSHIPS = "relationships"
    SMART_ENUMERABLE = "smart_enumerable"
    QUICK_OPEN = "quick_open"
    EVALUATION = "evaluation"


class BuildErrorKind(enum.Enum):
    FAILURE = "failure"
    TIMEOUT = "timeout"


@dataclass(frozen=True)
class BuildError:
    """Why the most recent build attempt on a node did not succeed."""

    kind: BuildErrorKind
    mode: BuildMode
    message: str


@dataclass(eq=False)
class RowNode:
    """One entry of the lazily built tree.

    ``key`` is only meaningful when ``has_key`` is true; a bare value row
    reports ``None`` for its key subject.
    """

    id: int
    value: Any
    key: Any = None
    has_key: bool = False
    parent: int | None = None
    depth: int = 0
    children: list[int] = field(default_factory=list)
    expansion_state: ExpansionState = ExpansionState.UNBUILT
    selected: bool = False
    user_added: bool = False
    is_error_row: bool = False
    structure_built: bool = False
    origin: tuple[BuildMode, Hashable] | None = None
    build_error: BuildError | None = None
    lens_cache: dict[tuple[SubjectType, int], Any] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def subject(self, subject_type: SubjectType) -> Any:
        """Return the key or value subject; keyless rows yield ``None`` for key."""
        if subject_type is SubjectType.KEY:
            return self.key if self.has_key else None
        return self.value

    @property
    def is_open(self) -> bool:
        return self.expansion_state is ExpansionState.BUILT_OPEN

    @property
    def is_built(self) -> bool:
        return self.expansion_state is not ExpansionState.UNBUILT

    def cache_lens(self, slot: tuple[SubjectType, int], result: Any) -> Any:
        """Store ``result`` for ``slot`` unless already cached; return the cached value."""
        return self.lens_cache.setdefault(slot, result)


class RowArena:
    """Owner of every ``RowNode`` in one tab, addressed by integer id."""

    def __init__(self) -> None:
        self._nodes: list[RowNode] = []

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[RowNode]:
        return iter(self._nodes)

    def __getitem__(self, node_id: int) -> RowNode:
        return self._nodes[node_id]

    def new_node(
        self,
        value: Any,
        *,
        key: Any = None,
        has_key: bool = False,
        parent: int | None = None,
        user_added: bool = False,
        is_error_row: bool = False,
        origin: tuple[BuildMode, Hashable] | None = None,
    ) -> RowNode:
        """Create and register a node; it is not attached to ``parent.children``."""
        depth = 0 if parent is None else self._nodes[parent].depth + 1
        node = RowNode(
            id=len(self._nodes),
            value=value,
            key=key,
            has_key=has_key,
            parent=parent,
            depth=depth,
            user_added=user_added,
            is_error_row=is_error_row,
            origin=origin,
        )
        self._nodes.append(node)
        return node

    def new_root(self, value: Any) -> RowNode:
        return self.new_node(value)

    def parent_of(self, node_id: int) -> RowNode | None:
        parent = self._nodes[node_id].parent
        return None if parent is None else self._nodes[parent]

    def ancestors(self, node_id: int) -> Iterator[RowNode]:
        """Yield ancestors from nearest parent up to the root."""
        parent = self._nodes[node_id].parent
        while parent is not None:
            node = self._nodes[parent]
            yield node
            parent = node.parent

    def children_of(self, node_id: int) -> list[RowNode]:
        return [self._nodes[child] for child in self._nodes[node_id].children]

    def descendant_count(self, node_id: int) -> int:
        """Count every built descendant regardless of expansion state."""
        total = 0
        stack = list(self._nodes[node_id].children)
        while stack:
            child = stack.pop()
            total += 1
            stack.extend(self._nodes[child].children)
        return total
