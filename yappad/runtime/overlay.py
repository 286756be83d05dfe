"""Inline image overlay written straight to the terminal stream.

An external rasterizer turns the image into a kitty graphics escape payload
sized to a cell box. The payload is wrapped in save-cursor / move-cursor /
restore-cursor sequences and written in one call, so the UI's own cursor is
left where the frame renderer expects it.

Each preview switch bumps ``generation``. A render task captures the
generation it was scheduled for and only writes while that generation is
still current, so a slow rasterizer cannot paint a stale image.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from .commands import Command
from .events import ImageRendered
from .terminal import TerminalController

logger = logging.getLogger(__name__)

SAVE_CURSOR = b"\x1b7"
RESTORE_CURSOR = b"\x1b8"
# Delete all images and placements from the current screen.
KITTY_CLEAR_IMAGES = b"\x1b_Ga=d,d=A,q=2;\x1b\\"
DEFAULT_RASTERIZER: tuple[str, ...] = ("chafa", "-f", "kitty")
RASTERIZE_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class OverlayBox:
    """1-based terminal cell box the image is fitted into."""

    col: int
    row: int
    width: int
    height: int


def move_cursor(row: int, col: int) -> bytes:
    return f"\x1b[{max(1, row)};{max(1, col)}H".encode("ascii")


def build_overlay_payload(raster: bytes, box: OverlayBox) -> bytes:
    """Wrap ``raster`` so it is drawn at ``box`` without moving the UI cursor."""
    return b"".join((SAVE_CURSOR, move_cursor(box.row, box.col), raster, RESTORE_CURSOR))


class ImageOverlay:
    """Owns overlay drawing/clearing and the stale-render guard."""

    def __init__(
        self,
        terminal: TerminalController,
        rasterizer: Sequence[str] = DEFAULT_RASTERIZER,
        run_process: Callable[..., subprocess.CompletedProcess] = subprocess.run,
    ) -> None:
        self.terminal = terminal
        self.rasterizer = tuple(rasterizer)
        self._run_process = run_process
        self._lock = threading.Lock()
        self._generation = 0

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def invalidate(self) -> int:
        """Retire every scheduled render and return the new generation."""
        with self._lock:
            self._generation += 1
            return self._generation

    def is_current(self, generation: int) -> bool:
        with self._lock:
            return self._generation == generation

    def clear(self) -> None:
        """Delete every overlay image, unless a child process owns the terminal."""
        self.terminal.write_if(KITTY_CLEAR_IMAGES, lambda: self.terminal.active)

    def clear_command(self) -> Command:
        return Command.task("clear-overlay", self.clear)

    def rasterize(self, path: Path, box: OverlayBox) -> bytes | None:
        """Run the rasterizer; ``None`` means no image can be shown."""
        argv = [*self.rasterizer, "-s", f"{max(1, box.width)}x{max(1, box.height)}", str(path)]
        try:
            completed = self._run_process(
                argv,
                capture_output=True,
                check=True,
                timeout=RASTERIZE_TIMEOUT_SECONDS,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            logger.debug("image rasterizer failed for %s: %s", path, exc)
            return None
        output = completed.stdout
        return output if output else None

    def draw(self, path: Path, box: OverlayBox, generation: int) -> bool:
        """Rasterize and draw ``path`` if ``generation`` is still current."""
        if not self.is_current(generation):
            return False
        raster = self.rasterize(path, box)
        if raster is None:
            return False
        payload = build_overlay_payload(raster, box)
        return self.terminal.write_if(payload, lambda: self.terminal.active and self.is_current(generation))

    def render_command(self, path: Path, box: OverlayBox, request_id: int, generation: int) -> Command:
        return Command.task(
            "render-image",
            lambda: ImageRendered(request_id=request_id, drawn=self.draw(path, box, generation)),
        )
