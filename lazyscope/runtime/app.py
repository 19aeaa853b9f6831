"""Session bootstrap: wires settings, providers, panels and the event loop.

``run_session`` drives a tab set either interactively on the terminal or
headlessly from a key script, and records the tab set for later resume.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Sequence
from typing import Any

from ..errors import InvalidCommandError
from ..input.sources import KeySource, ScriptedKeySource, TerminalKeySource, parse_action_script, read_line
from ..lenses import LensRegistry, builtin_lenses
from ..panels.lens_panel import LensPanel
from ..panels.tree_panel import TreePanel
from ..render.frame import FrameContext, compose_frame, write_frame
from ..row_model.providers import ProviderSet
from ..session.controller import ExitRequest, SessionController
from ..session.registry import DEFAULT_REGISTRY, ResumableSession, SessionRegistry
from ..session.state import TabSet, ViewMode
from ..ui_theme import UITheme, resolve_theme
from .config import Settings, load_settings
from .loop import HeadlessScreen, Screen, run_main_loop
from .progress import ProgressSupervisor
from .terminal import TerminalController

logger = logging.getLogger(__name__)


class TerminalScreen:
    """Screen backed by a raw-mode terminal."""

    def __init__(self, terminal: TerminalController) -> None:
        self.terminal = terminal

    def size(self) -> tuple[int, int]:
        return self.terminal.size()

    def draw(self, lines: Sequence[str]) -> None:
        write_frame(self.terminal.stdout_fd, lines)

    def bell(self) -> None:
        self.terminal.bell()


class SessionRuntime:
    """One running UI over a tab set: controller, panels, supervisor and screen."""

    def __init__(
        self,
        tabs: TabSet,
        providers: ProviderSet,
        settings: Settings,
        screen: Screen,
        keys: KeySource,
        theme: UITheme,
        no_color: bool = False,
    ) -> None:
        self.tabs = tabs
        self.screen = screen
        self.keys = keys
        self.theme = theme
        self._alert_shown = False
        self.supervisor = ProgressSupervisor(
            alert_seconds=settings.alert_seconds,
            on_alert=self._on_alert,
            on_progress=lambda _supervisor: self.redraw(),
        )
        lenses = LensRegistry(builtin_lenses(settings.lens_names, settings.pygments_style, no_color))
        self.tree_panel = TreePanel(
            theme=theme,
            key_clip=settings.key_clip_length,
            value_clip=settings.value_clip_length,
            cursor_tracking=settings.cursor_tracking,
        )
        self.lens_panel = LensPanel(lenses, theme)
        self.controller = SessionController(
            tabs,
            providers,
            lenses,
            self.supervisor,
            self.tree_panel,
            self.lens_panel,
            prompt=self.prompt,
            screen_size=screen.size,
        )

    def _on_alert(self, label: str) -> None:
        # Runs on the watcher thread: only ring, the flag is read at the next redraw.
        self.screen.bell()

    def redraw(self, prompt: str | None = None) -> None:
        rows, columns = self.screen.size()
        session = self.tabs.current
        panel = self.lens_panel if session.view is ViewMode.LENS else self.tree_panel
        bar_width = max(10, columns // 3)
        context = FrameContext(
            session=session,
            panel=panel,
            height=rows,
            width=columns,
            tab_index=self.tabs.current_index,
            tab_count=len(self.tabs),
            theme=self.theme,
            progress_bar=self.supervisor.render_bar(bar_width, self.theme),
            alert=self._alert_shown or self.supervisor.alert_pending,
            prompt=prompt,
        )
        self.screen.draw(compose_frame(context))

    def prompt(self, label: str) -> str | None:
        return read_line(self.keys, on_change=lambda text: self.redraw(prompt=f"{label}{text}"))

    def _after_key(self) -> None:
        self._alert_shown = self.supervisor.consume_alert()

    def run(self) -> ExitRequest | None:
        return run_main_loop(self.controller, self.keys, self.redraw, after_key=self._after_key)


def _returned_value(request: ExitRequest | None) -> Any:
    if request is None or not request.returned:
        return None
    return request.value


def run_session(
    tabs: TabSet,
    providers: ProviderSet,
    *,
    actions: str | Sequence[str] | None = None,
    settings: Settings | None = None,
    registry: SessionRegistry = DEFAULT_REGISTRY,
    theme_name: str | None = None,
    no_color: bool = False,
    screen: Screen | None = None,
) -> Any:
    """Drive ``tabs`` until return or quit and hand back the returned subject(s).

    With ``actions`` the keys are replayed headlessly; otherwise the session
    takes over the terminal. Either way the tab set stays resumable.
    """
    settings = (settings or load_settings()).validate()
    theme = resolve_theme(theme_name or settings.theme, no_color=no_color)
    registry.set_last(ResumableSession(tabs, providers))

    if actions is not None:
        keys = ScriptedKeySource(parse_action_script(actions))
        runtime = SessionRuntime(tabs, providers, settings, screen or HeadlessScreen(), keys, theme, no_color)
        return _returned_value(runtime.run())

    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    if not (os.isatty(stdin_fd) and os.isatty(stdout_fd)):
        raise InvalidCommandError("interactive mode needs a terminal; pass an action script instead")
    terminal = TerminalController(stdin_fd, stdout_fd)
    runtime = SessionRuntime(
        tabs,
        providers,
        settings,
        screen or TerminalScreen(terminal),
        TerminalKeySource(stdin_fd),
        theme,
        no_color,
    )
    try:
        with terminal.raw_mode():
            request = runtime.run()
    except Exception:
        terminal.move_cursor_to_bottom()
        logger.exception("session crashed")
        raise
    return _returned_value(request)


def resume_session(
    *,
    actions: str | Sequence[str] | None = None,
    registry: SessionRegistry = DEFAULT_REGISTRY,
    **kwargs: Any,
) -> Any:
    """Re-enter the most recent tab set with its original providers."""
    entry = registry.get_last()
    if entry is None:
        raise InvalidCommandError("no previous session to resume")
    return run_session(entry.tabs, entry.providers, actions=actions, registry=registry, **kwargs)
