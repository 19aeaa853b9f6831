"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle, alternate-screen switching, the alert bell and the
cursor placement used when leaving after a crash.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty


class TerminalController:
    """Manage terminal mode transitions for one interactive session."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def size(self) -> tuple[int, int]:
        """Return ``(rows, columns)``."""
        columns, rows = shutil.get_terminal_size((80, 24))
        return rows, columns

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Show the cursor, restore the main screen buffer and the saved tty state."""
        os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def bell(self) -> None:
        os.write(self.stdout_fd, b"\a")

    def move_cursor_to_bottom(self) -> None:
        """Park the cursor on the last row so a traceback prints below the frame."""
        rows, _columns = self.size()
        os.write(self.stdout_fd, f"\x1b[{max(1, rows)};1H\r\n".encode("ascii"))

    def write(self, data: str) -> None:
        os.write(self.stdout_fd, data.encode("utf-8", errors="replace"))

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
