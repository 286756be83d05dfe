"""External editor launch.

The editor inherits the terminal, so the TUI is suspended around it.
Failures come back as an error string instead of raising.
"""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from .runtime.terminal import TerminalController

logger = logging.getLogger(__name__)

DEFAULT_EDITOR = "nvim"


def resolve_editor_command(configured: str | None = None) -> list[str]:
    """Return the editor argv: ``$EDITOR``, else ``configured``, else nvim."""
    for candidate in (os.environ.get("EDITOR", ""), configured or ""):
        try:
            argv = shlex.split(candidate.strip())
        except ValueError as exc:
            logger.warning("cannot parse editor command %r: %s", candidate, exc)
            continue
        if argv:
            return argv
    return [DEFAULT_EDITOR]


def launch_editor(
    argv: Sequence[str],
    target: Path,
    terminal: TerminalController,
    run_process: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> str | None:
    """Edit ``target`` with ``argv``; return an error message or ``None``."""
    with terminal.suspended():
        try:
            completed = run_process([*argv, str(target)], check=False)
        except OSError as exc:
            return f"failed to launch editor: {exc}"
    if completed.returncode != 0:
        return f"editor exited with status {completed.returncode}"
    return None
