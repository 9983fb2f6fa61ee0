"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle and alternate-screen switching.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty
from collections.abc import Iterator


class TerminalController:
    """Enter and leave the full-screen UI, restoring the saved tty state."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        self._active = True
        # Enter alternate screen, clear it and hide the cursor.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[2J\x1b[?25l")

    def disable_tui_mode(self) -> None:
        """Restore the saved terminal; a no-op unless TUI mode is active."""
        if not self.active:
            return
        self._active = False
        try:
            # Show cursor and restore the main screen buffer.
            os.write(self.stdout_fd, b"\x1b[0m\x1b[?25h\x1b[?1049l")
        finally:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
