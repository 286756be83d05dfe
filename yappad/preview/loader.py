"""Preview classification and load commands.

``PreviewLoader.load`` touches no files: it returns an overlay clear followed
by a task that classifies the path on the worker, then either reads and
highlights text or blanks the pane and draws an image overlay.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from ..runtime.commands import Command, sequence
from ..runtime.events import PreviewCleared, PreviewLoaded
from ..runtime.overlay import ImageOverlay, OverlayBox
from .sniff import OCTET_STREAM, sniff_content_type, sniff_path
from .syntax import DEFAULT_STYLE, read_note_bytes, render_note_text

IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".svg", ".ico", ".tiff"})
TEXT_EXTENSIONS = frozenset(
    {
        ".md",
        ".markdown",
        ".txt",
        ".go",
        ".c",
        ".cpp",
        ".h",
        ".py",
        ".js",
        ".ts",
        ".html",
        ".css",
        ".json",
        ".yaml",
        ".yml",
        ".toml",
        ".sh",
        ".mod",
        ".sum",
    }
)
BINARY_CONTENT_TYPES = frozenset(
    {
        OCTET_STREAM,
        "application/ogg",
        "application/pdf",
        "application/zip",
        "application/x-gzip",
        "application/x-executable",
    }
)
READ_ERROR_TEXT = "Error reading file"


class PreviewKind(Enum):
    TEXT = "text"
    IMAGE = "image"


def is_image_path(path: Path) -> bool:
    """Return whether ``path`` is an image by extension or leading bytes."""
    if path.suffix.lower() in IMAGE_EXTENSIONS:
        return True
    content_type = sniff_path(path)
    return content_type is not None and content_type.startswith("image/")


def is_binary_content_type(content_type: str) -> bool:
    return (
        content_type.startswith("audio/")
        or content_type.startswith("video/")
        or content_type in BINARY_CONTENT_TYPES
    )


def render_preview_text(path: Path, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Read ``path`` and return preview text (highlighted, placeholder, or error)."""
    raw = read_note_bytes(path)
    if raw is None:
        return READ_ERROR_TEXT
    if path.suffix.lower() not in TEXT_EXTENSIONS:
        content_type = sniff_content_type(raw)
        if is_binary_content_type(content_type):
            return f"[Binary file: {content_type}]"
    return render_note_text(raw, style=style, no_color=no_color)


class PreviewLoader:
    """Builds the command sequence that shows one path in the preview pane."""

    def __init__(
        self,
        overlay: ImageOverlay,
        style: str = DEFAULT_STYLE,
        no_color: bool = False,
        images_enabled: bool = True,
    ) -> None:
        self.overlay = overlay
        self.style = style
        self.no_color = no_color
        self.images_enabled = images_enabled

    def classify(self, path: Path) -> PreviewKind:
        if is_image_path(path):
            return PreviewKind.IMAGE
        return PreviewKind.TEXT

    def clear(self) -> Command:
        """Retire pending renders and clear any visible overlay."""
        self.overlay.invalidate()
        return self.overlay.clear_command()

    def load(self, path: Path, request_id: int, box: OverlayBox) -> Command:
        """Return the clear-then-load sequence for ``path``."""
        generation = self.overlay.invalidate()
        return sequence(
            self.overlay.clear_command(),
            Command.task("load-preview", lambda: self.content_command(path, request_id, box, generation)),
        )

    def content_command(self, path: Path, request_id: int, box: OverlayBox, generation: int) -> Command:
        """Classify ``path`` and return the command that shows it. Runs on the worker."""
        if self.classify(path) is PreviewKind.IMAGE:
            if not self.images_enabled:
                placeholder = f"[Image file: {path.name}]\n\nInline images need a terminal with kitty graphics support."
                return Command.task("show-placeholder", lambda: PreviewLoaded(request_id, placeholder))
            return sequence(
                Command.task("clear-viewport", lambda: PreviewCleared(request_id)),
                self.overlay.render_command(path, box, request_id, generation),
            )

        style = self.style
        no_color = self.no_color
        return Command.task(
            "read-file",
            lambda: PreviewLoaded(request_id, render_preview_text(path, style=style, no_color=no_color)),
        )
