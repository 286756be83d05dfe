"""Main interactive event loop for the terminal UI.

One iteration: poll the terminal size, redraw if dirty, read one key with a
timeout, then drain events posted by the command worker. All controller
state is touched from this thread only; the worker talks back through
events. Editor launches run here because they take over the terminal.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ..input import read_key
from ..interaction.controller import Controller
from ..render import compose_frame
from .commands import CommandRunner, Effect, OpenEditor
from .events import EditorFinished, Resize
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int = 100


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Side effects the loop performs outside the controller."""

    launch_editor: Callable[[Path], str | None]
    clear_overlay: Callable[[], None]
    get_terminal_size: Callable[[tuple[int, int]], os.terminal_size] = shutil.get_terminal_size


def frame_bytes(rows: list[str]) -> bytes:
    """Encode a composed frame as absolute-positioned row writes."""
    out = [f"\033[{idx};1H\033[K{row}" for idx, row in enumerate(rows, start=1)]
    return "".join(out).encode("utf-8", errors="replace")


def dispatch_effects(
    effects: list[Effect],
    runner: CommandRunner,
    callbacks: RuntimeLoopCallbacks,
) -> None:
    """Queue worker commands; run editor launches inline.

    Any pending image render is retired before the editor takes the screen;
    ``EditorFinished`` makes the controller reload the preview afterwards.
    """
    for effect in effects:
        if isinstance(effect, OpenEditor):
            callbacks.clear_overlay()
            error = callbacks.launch_editor(effect.path)
            runner.post(EditorFinished(effect.path, error))
        else:
            runner.submit(effect)


def run_main_loop(
    controller: Controller,
    runner: CommandRunner,
    terminal: TerminalController,
    callbacks: RuntimeLoopCallbacks,
    timing: RuntimeLoopTiming = RuntimeLoopTiming(),
) -> None:
    """Run the TUI until the controller requests quit.

    The overlay is cleared on the way out regardless of how the loop ends.
    """
    with terminal.raw_mode():
        try:
            dispatch_effects(controller.start(), runner, callbacks)
            while not controller.quit_requested:
                term = callbacks.get_terminal_size((80, 24))
                dispatch_effects(controller.handle_event(Resize(term.columns, term.lines)), runner, callbacks)
                controller.tick()

                if controller.dirty:
                    controller.dirty = False
                    terminal.write(frame_bytes(compose_frame(controller.frame_model())))

                key = read_key(terminal.stdin_fd, timing.key_timeout_ms)
                if key:
                    dispatch_effects(controller.handle_key(key), runner, callbacks)

                for event in runner.drain_events():
                    dispatch_effects(controller.handle_event(event), runner, callbacks)
        finally:
            try:
                callbacks.clear_overlay()
            except OSError as exc:
                logger.debug("could not clear overlay on exit: %s", exc)
