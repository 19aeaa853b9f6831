"""Key dispatch for one tab set: turns key tokens into tree, selection, and view changes.

The controller is the single writer of session and row state. Slow work
(builds, evaluations, searches) goes through the builder and search engine,
which run under the progress supervisor.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..input.key_registry import KeyComboBinding, KeyComboRegistry
from ..lenses import LensRegistry
from ..panels.lens_panel import LensPanel
from ..panels.tree_panel import TreePanel
from ..panels.viewport import FAST_SCROLL_STEP, SCROLL_STEP, ViewPanel
from ..row_model.build import BuildResult, RowBuilder
from ..row_model.navigation import flatten_rows, sibling_rows
from ..row_model.providers import ProviderSet
from ..row_model.types import BuildErrorKind, BuildMode, ExpansionState
from ..runtime.progress import ProgressSupervisor
from .search import SearchEngine
from .state import HELP_PAGE_COUNT, Session, TabSet, ViewMode

logger = logging.getLogger(__name__)

WIDE_STEP = 12
BUILD_KEYS: dict[str, BuildMode] = {
    "@": BuildMode.ATTRIBUTES,
    ".": BuildMode.RELATIONSHIPS,
    "(": BuildMode.SMART_ENUMERABLE,
    "o": BuildMode.QUICK_OPEN,
}
SCROLL_KEYS: dict[str, tuple[int, int]] = {
    "w": (0, -1),
    "s": (0, 1),
    "a": (-1, 0),
    "d": (1, 0),
}


@dataclass(frozen=True)
class ExitRequest:
    """Ask the runtime to close the UI; ``returned`` distinguishes ENTER from quit."""

    value: Any = None
    returned: bool = False


class SessionController:
    """Interpret key tokens against the current tab."""

    def __init__(
        self,
        tabs: TabSet,
        providers: ProviderSet,
        lenses: LensRegistry,
        supervisor: ProgressSupervisor,
        tree_panel: TreePanel,
        lens_panel: LensPanel,
        prompt: Callable[[str], str | None],
        screen_size: Callable[[], tuple[int, int]],
    ) -> None:
        self.tabs = tabs
        self.providers = providers
        self.lenses = lenses
        self.supervisor = supervisor
        self.tree_panel = tree_panel
        self.lens_panel = lens_panel
        self.prompt = prompt
        self.screen_size = screen_size
        self._count: int | None = None
        self._bindings = KeyComboRegistry().register_bindings(
            KeyComboBinding(("UP", "k"), lambda _key: self.move_cursor(-self._repeat())),
            KeyComboBinding(("DOWN", "j"), lambda _key: self.move_cursor(self._repeat())),
            KeyComboBinding(("SHIFT_UP", "K"), lambda _key: self.move_cursor(-WIDE_STEP * self._repeat())),
            KeyComboBinding(("SHIFT_DOWN", "J"), lambda _key: self.move_cursor(WIDE_STEP * self._repeat())),
            KeyComboBinding(("RIGHT", "l"), lambda _key: self.expand_targets()),
            KeyComboBinding(("LEFT", "h"), lambda _key: self.collapse_targets()),
            KeyComboBinding(tuple(BUILD_KEYS), lambda key: self.build_targets(BUILD_KEYS[key])),
            KeyComboBinding(("ENTER",), lambda _key: ExitRequest(self.session.returned_subjects(), returned=True)),
            KeyComboBinding(("q", "CTRL_C"), lambda _key: ExitRequest()),
            KeyComboBinding(("SPACE",), lambda _key: self.toggle_view()),
            KeyComboBinding((">",), lambda _key: self.cycle_lens()),
            KeyComboBinding(("<",), lambda _key: self.toggle_subject_type()),
            KeyComboBinding(("?",), lambda _key: self.cycle_help()),
            KeyComboBinding(("H",), lambda _key: self.toggle_user_added()),
            KeyComboBinding(("-",), lambda _key: self.toggle_current_selection()),
            KeyComboBinding(("*",), lambda _key: self.toggle_all_selection()),
            KeyComboBinding(("|",), lambda _key: self.toggle_sibling_selection()),
            KeyComboBinding(("/",), lambda _key: self.begin_search()),
            KeyComboBinding(("n",), lambda _key: self.next_match()),
            KeyComboBinding(("ESC",), lambda _key: self.escape()),
            KeyComboBinding(
                tuple(SCROLL_KEYS) + tuple(f"ALT_{key}" for key in SCROLL_KEYS),
                self.scroll_view,
            ),
            KeyComboBinding(("0",), lambda _key: self.reset_view()),
            KeyComboBinding(("'",), lambda _key: self.save_handle()),
            KeyComboBinding((":",), lambda _key: self.evaluate_expression()),
            KeyComboBinding(("t",), lambda _key: self.open_tab()),
            KeyComboBinding(("TAB",), lambda _key: self.tabs.cycle(1)),
            KeyComboBinding(("SHIFT_TAB",), lambda _key: self.tabs.cycle(-1)),
            KeyComboBinding(("Q",), lambda _key: self.close_tab()),
            KeyComboBinding(("!",), lambda _key: self.restart_tab()),
        )

    @property
    def session(self) -> Session:
        return self.tabs.current

    def builder(self) -> RowBuilder:
        return RowBuilder(self.session.arena, self.providers, self.supervisor)

    def search_engine(self) -> SearchEngine:
        return SearchEngine(
            self.session.arena,
            self.supervisor,
            key_clip=self.tree_panel.key_clip,
            value_clip=self.tree_panel.value_clip,
        )

    def panel_height(self) -> int:
        rows, _cols = self.screen_size()
        return max(1, rows - 1)

    def active_panel(self) -> ViewPanel:
        return self.lens_panel if self.session.view is ViewMode.LENS else self.tree_panel

    def _repeat(self) -> int:
        return self._count if self._count else 1

    def handle_key(self, key: str) -> ExitRequest | None:
        """Apply one key to the current tab; return an ``ExitRequest`` to close the UI."""
        session = self.session
        session.status_message = ""
        session.last_key = key
        if session.help_page and key != "?":
            session.help_page = 0
            if key == "ESC":
                return None

        if key.isdigit() and len(key) == 1 and (key != "0" or session.numeric_prefix):
            session.numeric_prefix += key
            return None
        self._count = int(session.numeric_prefix) if session.numeric_prefix else None
        session.numeric_prefix = ""

        handled, result = self._bindings.dispatch(key)
        if not handled:
            return None
        if isinstance(result, ExitRequest):
            return result
        return None

    def _track(self) -> None:
        self.tree_panel.track_cursor(self.session, self.panel_height())

    def move_cursor(self, delta: int) -> None:
        """Move within the visible rows, clamping at either end."""
        session = self.session
        rows = session.visible_rows()
        index = session.cursor_index(rows)
        target = max(0, min(len(rows) - 1, index + delta))
        session.cursor = rows[target]
        self._track()

    def _report_build(self, result: BuildResult) -> None:
        if result.error is not None:
            label = "timed out" if result.error.kind is BuildErrorKind.TIMEOUT else "failed"
            self.session.set_status(f"{result.error.mode.value} {label}: {result.error.message}")
        elif result.alerted:
            self.session.set_status(f"slow build ({self.supervisor.alert_seconds:g}s+), {len(result.added)} rows added")

    def _has_shown_children(self, node_id: int) -> bool:
        session = self.session
        return any(
            session.show_user_added or not child.user_added
            for child in session.arena.children_of(node_id)
        )

    def expand_targets(self) -> None:
        """Open targets, building them with quick-open when they were never built."""
        session = self.session
        for node_id in session.target_nodes():
            node = session.arena[node_id]
            if not node.structure_built:
                self._report_build(self.builder().expand(node_id, BuildMode.QUICK_OPEN))
            elif node.children:
                node.expansion_state = ExpansionState.BUILT_OPEN
        self._track()

    def collapse_targets(self) -> None:
        """Collapse targets; a closed or childless target collapses its parent instead."""
        session = self.session
        arena = session.arena
        single = not session.selection
        for node_id in session.target_nodes():
            node = arena[node_id]
            if node.is_open and self._has_shown_children(node_id):
                node.expansion_state = ExpansionState.BUILT_COLLAPSED
                continue
            if node.parent is None:
                continue
            arena[node.parent].expansion_state = ExpansionState.BUILT_COLLAPSED
            if single:
                session.cursor = node.parent
        session.restore_cursor()
        self._track()

    def build_targets(self, mode: BuildMode) -> None:
        session = self.session
        added = 0
        for node_id in session.target_nodes():
            result = self.builder().expand(node_id, mode)
            added += len(result.added)
            self._report_build(result)
        if not session.status_message:
            session.set_status(f"{mode.value}: {added} new rows")
        self._track()

    def toggle_view(self) -> None:
        session = self.session
        session.view = ViewMode.TREE if session.view is ViewMode.LENS else ViewMode.LENS

    def cycle_lens(self) -> None:
        self.session.lens_index = (self.session.lens_index + self._repeat()) % len(self.lenses)

    def toggle_subject_type(self) -> None:
        self.session.subject_type = self.session.subject_type.toggled()

    def cycle_help(self) -> None:
        self.session.help_page = (self.session.help_page + 1) % (HELP_PAGE_COUNT + 1)

    def toggle_user_added(self) -> None:
        session = self.session
        session.show_user_added = not session.show_user_added
        session.restore_cursor()
        self._track()

    def toggle_current_selection(self) -> None:
        self.session.selection.toggle(self.session.cursor)

    def toggle_all_selection(self) -> None:
        session = self.session
        session.selection.toggle_all(flatten_rows(session.arena, session.roots, show_user_added=True))

    def toggle_sibling_selection(self) -> None:
        session = self.session
        session.selection.toggle_all(
            sibling_rows(session.arena, session.roots, session.cursor, session.show_user_added)
        )

    def _prompt(self, label: str) -> str | None:
        with self.supervisor.paused():
            return self.prompt(label)

    def begin_search(self) -> None:
        if self.session.view is not ViewMode.TREE:
            return
        pattern = self._prompt("/")
        if not pattern:
            return
        self.session.search.pattern = pattern
        self._run_search()

    def next_match(self) -> None:
        if not self.session.search.active:
            self.session.set_status("no search pattern (use /)")
            return
        self._run_search()

    def _run_search(self) -> None:
        session = self.session
        rows = session.visible_rows()
        pattern = session.search.pattern
        found = self.search_engine().search(rows, session.cursor_index(rows), pattern)
        if found is None:
            session.set_status(f"no match for {pattern!r}")
            return
        session.cursor = rows[found]
        session.search.last_match = session.cursor
        self._track()

    def escape(self) -> None:
        session = self.session
        if session.view is ViewMode.LENS:
            session.view = ViewMode.TREE
            return
        session.numeric_prefix = ""
        session.search.clear()
        session.selection.clear()

    def scroll_view(self, key: str) -> None:
        fast = key.startswith("ALT_")
        dx, dy = SCROLL_KEYS[key[-1]]
        step = (FAST_SCROLL_STEP if fast else SCROLL_STEP) * self._repeat()
        _rows, cols = self.screen_size()
        self.active_panel().scroll(self.session, dx * step, dy * step, cols)

    def reset_view(self) -> None:
        session = self.session
        panel = self.active_panel()
        if not panel.reset(session) and session.view is ViewMode.TREE:
            self.tree_panel.cursor_to_origin(session)

    def _target_subjects(self) -> list[Any]:
        session = self.session
        return [session.arena[node_id].subject(session.subject_type) for node_id in session.target_nodes()]

    def save_handle(self) -> None:
        name = self._prompt("handle name: ")
        if not name:
            return
        result = self.providers.handles.save(self._target_subjects(), name)
        self.session.set_status(result.message)
        logger.info("handle save %r: %s", name, result.message)

    def evaluate_expression(self) -> None:
        expression = self._prompt(":")
        if not expression or not expression.strip():
            return
        session = self.session
        result = self.builder().evaluate(session.cursor, expression)
        session.show_user_added = True
        session.cursor = result.added[0]
        if result.error is not None:
            session.set_status(f"evaluation failed: {result.error.message}")
        self._track()

    def open_tab(self) -> None:
        if not self.tabs.open(Session.seeded(self._target_subjects())):
            self.session.set_status("tab limit reached")

    def close_tab(self) -> None:
        if not self.tabs.close_current():
            self.session.set_status("cannot close the last tab")

    def restart_tab(self) -> None:
        self.session.restart()
        self.session.set_status("tab restarted")
