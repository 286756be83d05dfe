"""Screen geometry shared by the frame composer and overlay placement.

Rows and columns are 1-based terminal cells. The header takes the first
three rows; the body starts on row 4 and the footer (status line plus help)
takes the bottom rows.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..runtime.overlay import OverlayBox

HEADER_ROWS = 3
BODY_TOP_ROW = HEADER_ROWS + 1
STATUS_ROWS = 1
MIN_PREVIEW_WIDTH = 80
# Border plus one column of padding on each side of the preview box.
PREVIEW_CHROME_COLS = 4
PREVIEW_CHROME_ROWS = 2


@dataclass(frozen=True)
class PaneLayout:
    width: int
    height: int
    body_height: int
    list_width: int
    preview_visible: bool
    preview_col: int = 0
    preview_width: int = 0

    @property
    def preview_inner_width(self) -> int:
        return max(0, self.preview_width - PREVIEW_CHROME_COLS)

    @property
    def preview_inner_height(self) -> int:
        return max(0, self.body_height - PREVIEW_CHROME_ROWS)

    @property
    def image_box(self) -> OverlayBox | None:
        """Cell box for the inline image, inside the preview border."""
        if not self.preview_visible:
            return None
        return OverlayBox(
            col=self.preview_col + PREVIEW_CHROME_COLS // 2,
            row=BODY_TOP_ROW + 1,
            width=max(1, self.preview_inner_width),
            height=max(1, self.preview_inner_height),
        )

    def in_preview(self, col: int) -> bool:
        return self.preview_visible and col >= self.preview_col


def pane_layout(width: int, height: int, show_preview: bool, footer_rows: int = 1) -> PaneLayout:
    """Compute pane geometry for a ``width`` x ``height`` terminal.

    The preview pane is only shown when enabled and the terminal is at least
    80 columns wide; the list then gets half the width.
    """
    width = max(1, width)
    height = max(1, height)
    body_height = max(1, height - HEADER_ROWS - STATUS_ROWS - max(0, footer_rows))
    if not show_preview or width < MIN_PREVIEW_WIDTH:
        return PaneLayout(
            width=width,
            height=height,
            body_height=body_height,
            list_width=width,
            preview_visible=False,
        )

    list_width = width // 2
    # One gap column after the list; the last terminal column stays empty.
    preview_col = list_width + 2
    return PaneLayout(
        width=width,
        height=height,
        body_height=body_height,
        list_width=list_width,
        preview_visible=True,
        preview_col=preview_col,
        preview_width=width - list_width - 2,
    )
