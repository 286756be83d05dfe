"""Frame rendering: layout geometry and pure row composition."""

from .frame import DELETE_PROMPT, ENTRY_ROWS, FrameModel, InputView, ListView, PromptView, compose_frame
from .layout import PaneLayout, pane_layout

__all__ = [
    "DELETE_PROMPT",
    "ENTRY_ROWS",
    "FrameModel",
    "InputView",
    "ListView",
    "PaneLayout",
    "PromptView",
    "compose_frame",
    "pane_layout",
]
