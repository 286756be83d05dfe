"""Interaction layer: UI state and the key/event controller."""

from .controller import Controller
from .note_list import FilterState, NoteList
from .preview_pane import PreviewPane
from .state import InteractionState, Mode

__all__ = [
    "Controller",
    "FilterState",
    "InteractionState",
    "Mode",
    "NoteList",
    "PreviewPane",
]
