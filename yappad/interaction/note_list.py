"""Scrollable note list with an optional title filter."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from ..input.text_field import TextField
from ..vault.types import NoteEntry


class FilterState(Enum):
    OFF = "off"
    EDITING = "editing"
    APPLIED = "applied"


class NoteList:
    """Visible entries, cursor and viewport start for the list pane.

    The filter narrows ``items`` to titles containing the query
    (case-insensitive); clearing it restores the full listing.
    """

    def __init__(self) -> None:
        self._all: list[NoteEntry] = []
        self.items: list[NoteEntry] = []
        self.cursor = 0
        self.start = 0
        self.filter_state = FilterState.OFF
        self.filter_field = TextField(placeholder="filter")

    @property
    def filter_editing(self) -> bool:
        return self.filter_state is FilterState.EDITING

    @property
    def filter_active(self) -> bool:
        return self.filter_state is not FilterState.OFF

    def selected(self) -> NoteEntry | None:
        if not self.items:
            return None
        return self.items[self.cursor]

    def set_items(self, entries: Sequence[NoteEntry]) -> None:
        """Replace the listing, keeping the selected title when it survives."""
        previous = self.selected()
        self._all = list(entries)
        self._apply_filter()
        if previous is not None:
            for idx, entry in enumerate(self.items):
                if entry.title == previous.title:
                    self.cursor = idx
                    break
        self._clamp()

    def _apply_filter(self) -> None:
        query = self.filter_field.value.casefold()
        if not self.filter_active or not query:
            self.items = list(self._all)
            return
        self.items = [entry for entry in self._all if query in entry.title.casefold()]

    def _clamp(self) -> None:
        if not self.items:
            self.cursor = 0
            self.start = 0
            return
        self.cursor = max(0, min(self.cursor, len(self.items) - 1))
        self.start = max(0, min(self.start, self.cursor))

    def move(self, delta: int) -> bool:
        """Move the cursor by ``delta``; return ``True`` when it moved."""
        return self.move_to(self.cursor + delta)

    def move_to(self, index: int) -> bool:
        if not self.items:
            return False
        target = max(0, min(index, len(self.items) - 1))
        if target == self.cursor:
            return False
        self.cursor = target
        return True

    def ensure_visible(self, rows: int) -> None:
        """Scroll the viewport so the cursor row is among ``rows`` rows."""
        rows = max(1, rows)
        if self.cursor < self.start:
            self.start = self.cursor
        elif self.cursor >= self.start + rows:
            self.start = self.cursor - rows + 1
        self.start = max(0, min(self.start, max(0, len(self.items) - rows)))

    def start_filter(self) -> None:
        if self.filter_state is FilterState.OFF:
            self.filter_field.reset()
        self.filter_state = FilterState.EDITING

    def apply_filter(self) -> None:
        if not self.filter_field.value:
            self.clear_filter()
            return
        self.filter_state = FilterState.APPLIED

    def clear_filter(self) -> None:
        self.filter_state = FilterState.OFF
        self.filter_field.reset()
        self._refilter()

    def edit_filter(self, key: str) -> bool:
        changed = self.filter_field.handle_key(key)
        if changed:
            self._refilter()
        return changed

    def _refilter(self) -> None:
        previous = self.selected()
        self._apply_filter()
        self.cursor = 0
        if previous is not None:
            for idx, entry in enumerate(self.items):
                if entry.title == previous.title:
                    self.cursor = idx
                    break
        self._clamp()
