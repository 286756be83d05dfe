"""Runtime bootstrap: build the components and run the loop."""

from __future__ import annotations

import logging
import os
import shutil
import sys
from functools import partial
from pathlib import Path

from ..editor import launch_editor, resolve_editor_command
from ..interaction.controller import Controller
from ..modes import BucketMode
from ..preview.loader import PreviewLoader
from ..vault import DescriptionStore, NoteStore, VaultIndex, ensure_vault_layout
from .commands import CommandRunner
from .config import (
    load_editor,
    load_rasterizer,
    load_show_preview,
    load_sort_mode,
    save_show_preview,
    save_sort_mode,
)
from .loop import RuntimeLoopCallbacks, run_main_loop
from .overlay import DEFAULT_RASTERIZER, ImageOverlay
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def run_app(vault_root: Path, bucket: BucketMode, style: str, no_color: bool) -> None:
    """Prepare the vault, wire subsystems, and run the interactive loop.

    Raises ``SystemExit`` when the vault root cannot be created or the
    session is not attached to a terminal.
    """
    try:
        ensure_vault_layout(vault_root)
    except OSError as exc:
        raise SystemExit(f"error: cannot use vault {vault_root}: {exc}") from exc
    if not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        raise SystemExit("error: yappad needs an interactive terminal")

    descriptions = DescriptionStore(vault_root)
    index = VaultIndex(vault_root, descriptions)
    notes = NoteStore(vault_root, descriptions)

    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    overlay = ImageOverlay(terminal, load_rasterizer() or DEFAULT_RASTERIZER)
    images_enabled = terminal.supports_kitty_graphics()
    loader = PreviewLoader(overlay, style=style, no_color=no_color, images_enabled=images_enabled)

    term = shutil.get_terminal_size((80, 24))
    controller = Controller(
        index,
        notes,
        loader,
        bucket=bucket,
        sort_mode=load_sort_mode(),
        show_preview=load_show_preview(),
        width=term.columns,
        height=term.lines,
        on_sort_change=save_sort_mode,
        on_preview_toggle=save_show_preview,
    )

    editor_argv = resolve_editor_command(load_editor())

    def clear_overlay() -> None:
        overlay.invalidate()
        overlay.clear()

    callbacks = RuntimeLoopCallbacks(
        launch_editor=partial(launch_editor, editor_argv, terminal=terminal),
        clear_overlay=clear_overlay,
    )
    logger.info(
        "starting in %s (mode=%s, images=%s, editor=%s)",
        vault_root,
        bucket.label,
        images_enabled,
        editor_argv[0],
    )
    run_main_loop(controller, CommandRunner(), terminal, callbacks)
