"""Scroll state for the preview pane's text."""

from __future__ import annotations

from dataclasses import dataclass, field

from ..render.ansi import split_preview_lines


@dataclass
class PreviewPane:
    lines: list[str] = field(default_factory=list)
    start: int = 0
    showing_image: bool = False

    def reset(self) -> None:
        self.lines = []
        self.start = 0
        self.showing_image = False

    def set_text(self, text: str) -> None:
        self.lines = split_preview_lines(text)
        self.start = 0
        self.showing_image = False

    def show_image(self) -> None:
        self.lines = []
        self.start = 0
        self.showing_image = True

    def scroll(self, delta: int, rows: int) -> bool:
        """Scroll by ``delta`` lines within ``rows`` visible rows."""
        max_start = max(0, len(self.lines) - max(1, rows))
        target = max(0, min(self.start + delta, max_start))
        if target == self.start:
            return False
        self.start = target
        return True
