"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle and alternate-screen switching. All output goes
through one lock, so frame redraws on the main thread and image overlay
writes from the command worker never interleave.
"""

from __future__ import annotations

import contextlib
import os
import threading
import termios
import tty
from collections.abc import Callable

# Alternate screen, hidden cursor, SGR mouse reporting (wheel events).
ENTER_TUI = b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1006h"
LEAVE_TUI = b"\x1b[?1000l\x1b[?1006l\x1b[?25h\x1b[?1049l"

KITTY_TERMS = frozenset({"xterm-kitty", "xterm-ghostty"})
KITTY_TERM_PROGRAMS = frozenset({"WezTerm", "ghostty"})


class TerminalController:
    """Serialize writes to the tty and switch it in and out of TUI mode."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._write_lock = threading.Lock()
        self.active = False

    def _write_all(self, data: bytes) -> None:
        pending = memoryview(data)
        while pending:
            pending = pending[os.write(self.stdout_fd, pending):]

    def write(self, data: bytes) -> None:
        """Write ``data`` as one uninterrupted unit."""
        with self._write_lock:
            self._write_all(data)

    def write_if(self, data: bytes, still_wanted: Callable[[], bool]) -> bool:
        """Write ``data`` only if ``still_wanted()`` holds once the lock is held."""
        with self._write_lock:
            if not still_wanted():
                return False
            self._write_all(data)
            return True

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        self.write(ENTER_TUI)
        self.active = True

    def disable_tui_mode(self) -> None:
        with self._write_lock:
            self.active = False
            self._write_all(LEAVE_TUI)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @staticmethod
    def supports_kitty_graphics() -> bool:
        """Best-effort guess from the environment; there is no reliable query in raw mode."""
        if os.environ.get("TERM", "") in KITTY_TERMS:
            return True
        if os.environ.get("TERM_PROGRAM", "") in KITTY_TERM_PROGRAMS:
            return True
        return bool(os.environ.get("KITTY_WINDOW_ID"))

    @contextlib.contextmanager
    def raw_mode(self):
        """Bracket the TUI session; the tty is restored however it ends."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

    @contextlib.contextmanager
    def suspended(self):
        """Hand the terminal to a child process, then re-enter TUI mode."""
        self.disable_tui_mode()
        try:
            yield
        finally:
            self.enable_tui_mode()
