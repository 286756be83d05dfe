"""Key and event handling for the note browser.

The controller owns all UI state and runs on the main thread only. Input
keys and runtime events go in; effects come out (worker commands and editor
launches) for the runtime loop to execute. Filesystem mutations run inline
and report through one result policy: failures are logged, never shown.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import date
from pathlib import Path

from ..input.key_registry import KeyComboRegistry
from ..input.text_field import TextField
from ..modes import BucketMode, SortMode, with_note_suffix
from ..preview.loader import PreviewLoader
from ..render import ENTRY_ROWS, FrameModel, InputView, ListView, PaneLayout, PromptView, pane_layout
from ..render.help import (
    CREATE_PROMPT_HELP,
    DELETE_PROMPT_HELP,
    FILTER_HELP,
    PROMPT_HELP,
    full_help_row_count,
)
from ..runtime.commands import Effect, OpenEditor
from ..runtime.events import EditorFinished, ImageRendered, PreviewCleared, PreviewLoaded, Resize
from ..vault.index import VaultIndex
from ..vault.notes import NoteStore
from ..vault.types import MutationResult
from .note_list import NoteList
from .preview_pane import PreviewPane
from .state import InteractionState, Mode

logger = logging.getLogger(__name__)

STATUS_SECONDS = 3.0
WHEEL_STEP = 3
CREATE_DESCRIPTION_PLACEHOLDER = "Description (optional, enter to skip)"
RENAME_DESCRIPTION_PLACEHOLDER = "New description (optional, enter to skip)"


class Controller:
    """Interaction state machine: BROWSE, CREATING, RENAMING, DELETE_CONFIRM."""

    def __init__(
        self,
        index: VaultIndex,
        notes: NoteStore,
        loader: PreviewLoader,
        *,
        bucket: BucketMode = BucketMode.ALL,
        sort_mode: SortMode = SortMode.MODIFIED_DESC,
        show_preview: bool = True,
        width: int = 80,
        height: int = 24,
        today: Callable[[], date] = date.today,
        clock: Callable[[], float] = time.monotonic,
        on_sort_change: Callable[[SortMode], None] | None = None,
        on_preview_toggle: Callable[[bool], None] | None = None,
    ) -> None:
        self.index = index
        self.notes = notes
        self.loader = loader
        self.bucket = bucket
        self.sort_mode = sort_mode
        self.show_preview = show_preview
        self.width = width
        self.height = height
        self._today = today
        self._clock = clock
        self._on_sort_change = on_sort_change
        self._on_preview_toggle = on_preview_toggle

        self.state = InteractionState()
        self.note_list = NoteList()
        self.preview = PreviewPane()
        self.name_field = TextField()
        self.description_field = TextField()
        self.show_help = False
        self.quit_requested = False
        self.dirty = True

        self._listing_bucket = bucket
        self._status = ""
        self._status_expires = 0.0
        self._request_id = 0
        self._preview_key: tuple[Path, object] | None = None
        self._browse_keys = self._build_browse_keys()

    # Listing and geometry

    def layout(self) -> PaneLayout:
        footer = full_help_row_count(len(self.help_entries())) if self.show_help else 1
        show = self.show_preview and self.state.mode is Mode.BROWSE
        return pane_layout(self.width, self.height, show, footer_rows=footer)

    def refresh(self) -> None:
        """Reload the listing for the current mode from disk."""
        query = self.name_field.value.strip()
        if self.state.mode is Mode.CREATING and self.state.step == 0 and query:
            entries = self.index.search(query, self.sort_mode)
            self._listing_bucket = BucketMode.ALL
        else:
            entries = self.index.list_notes(self.sort_mode, self.bucket)
            self._listing_bucket = self.bucket
        self.note_list.set_items(entries)
        self.dirty = True

    def selected_path(self) -> Path | None:
        entry = self.note_list.selected()
        if entry is None:
            return None
        return self.index.resolve(entry.title, self._listing_bucket)

    def start(self) -> list[Effect]:
        self.refresh()
        return self._sync_preview()

    # Preview

    def _sync_preview(self, force: bool = False) -> list[Effect]:
        """Issue a clear or a load when the preview target or its box changed."""
        layout = self.layout()
        target = self.selected_path() if self.state.mode is Mode.BROWSE else None
        box = layout.image_box
        key = (target, box) if target is not None and box is not None else None
        if key == self._preview_key and not force:
            return []
        self._preview_key = key
        self._request_id += 1
        self.preview.reset()
        self.dirty = True
        if key is None:
            return [self.loader.clear()]
        return [self.loader.load(target, self._request_id, box)]

    # Status line

    def _set_status(self, message: str) -> None:
        self._status = message
        self._status_expires = self._clock() + STATUS_SECONDS
        self.dirty = True

    def status_text(self) -> str:
        if self._status and self._clock() >= self._status_expires:
            return ""
        return self._status

    def tick(self) -> None:
        """Expire the status message; marks the frame dirty when it goes."""
        if self._status and self._clock() >= self._status_expires:
            self._status = ""
            self.dirty = True

    def _apply_result(self, result: MutationResult, success_status: str = "") -> bool:
        if not result.ok:
            logger.warning("note operation failed: %s", result.error)
            return False
        if success_status:
            self._set_status(success_status)
        return True

    # Key handling

    def handle_key(self, key: str) -> list[Effect]:
        if not key:
            return []
        self.dirty = True
        if key == "CTRL_C":
            self.quit_requested = True
            return []
        mode = self.state.mode
        if mode is Mode.DELETE_CONFIRM:
            return self._handle_delete_key(key)
        if mode.prompting:
            return self._handle_prompt_key(key)
        return self._handle_browse_key(key)

    def _build_browse_keys(self) -> KeyComboRegistry:
        registry = KeyComboRegistry()
        registry.register("CTRL_N", handler=self._begin_create, label="ctrl+n", summary="new note")
        registry.register("ENTER", handler=self._open_selected, label="enter", summary="edit")
        registry.register("CTRL_R", handler=self._begin_rename, label="ctrl+r", summary="rename")
        registry.register("CTRL_D", handler=self._begin_delete, label="ctrl+d", summary="delete")
        registry.register("/", handler=self._start_filter, label="/", summary="filter")
        registry.register("ESC", handler=self._clear_filter)
        registry.register("CTRL_S", handler=self._cycle_sort, label="ctrl+s", summary="sort")
        registry.register("CTRL_P", handler=self._toggle_preview, label="ctrl+p", summary="preview")
        for bucket in BucketMode:
            registry.register(bucket.hotkey, handler=lambda bucket=bucket: self._set_bucket(bucket))
        registry.register("UP", "k", handler=lambda: self._move(-1), label="↑/k", summary="up")
        registry.register("DOWN", "j", handler=lambda: self._move(1), label="↓/j", summary="down")
        registry.register("HOME", "g", handler=lambda: self._move_to(0), label="g/home", summary="first")
        registry.register(
            "END", "G", handler=lambda: self._move_to(len(self.note_list.items) - 1), label="G/end", summary="last"
        )
        registry.register("PAGE_UP", handler=lambda: self._scroll_preview(-self._preview_page()))
        registry.register(
            "PAGE_DOWN",
            handler=lambda: self._scroll_preview(self._preview_page()),
            label="pgup/pgdn",
            summary="scroll preview",
        )
        registry.register("?", handler=self._toggle_help, label="?", summary="help")
        registry.register("q", handler=self._quit, label="q", summary="quit")
        return registry

    def help_entries(self) -> list[tuple[str, str]]:
        mode = self.state.mode
        if mode is Mode.DELETE_CONFIRM:
            return list(DELETE_PROMPT_HELP)
        if mode is Mode.CREATING and self.state.step == 0:
            return list(CREATE_PROMPT_HELP)
        if mode.prompting:
            return list(PROMPT_HELP)
        if self.note_list.filter_editing:
            return list(FILTER_HELP)
        entries = self._browse_keys.help_entries()
        entries.insert(7, ("0-4", "all/daily/weekly/monthly/yearly"))
        return entries

    def _handle_browse_key(self, key: str) -> list[Effect]:
        if self.note_list.filter_editing:
            return self._handle_filter_key(key)
        if key.startswith("MOUSE_WHEEL_"):
            return self._handle_wheel(key)
        return self._browse_keys.dispatch(key) or []

    def _handle_filter_key(self, key: str) -> list[Effect]:
        if key == "ESC":
            self.note_list.clear_filter()
        elif key == "ENTER":
            self.note_list.apply_filter()
        elif key == "UP":
            self.note_list.move(-1)
        elif key == "DOWN":
            self.note_list.move(1)
        elif key.startswith("MOUSE_WHEEL_"):
            return self._handle_wheel(key)
        else:
            self.note_list.edit_filter(key)
        return self._sync_preview()

    def _handle_wheel(self, key: str) -> list[Effect]:
        direction, _, position = key.partition(":")
        col_text, _, _row = position.partition(":")
        try:
            col = int(col_text)
        except ValueError:
            col = 1
        step = -1 if direction == "MOUSE_WHEEL_UP" else 1
        if self.layout().in_preview(col):
            return self._scroll_preview(step * WHEEL_STEP)
        return self._move(step)

    def _move(self, delta: int) -> list[Effect]:
        self.note_list.move(delta)
        return self._sync_preview()

    def _move_to(self, index: int) -> list[Effect]:
        self.note_list.move_to(index)
        return self._sync_preview()

    def _preview_page(self) -> int:
        return max(1, self.layout().preview_inner_height - 1)

    def _scroll_preview(self, delta: int) -> list[Effect]:
        if not self.preview.showing_image:
            self.preview.scroll(delta, self.layout().preview_inner_height)
        return []

    def _start_filter(self) -> list[Effect]:
        self.note_list.start_filter()
        return []

    def _clear_filter(self) -> list[Effect]:
        if not self.note_list.filter_active:
            return []
        self.note_list.clear_filter()
        return self._sync_preview()

    def _toggle_help(self) -> list[Effect]:
        self.show_help = not self.show_help
        return self._sync_preview()

    def _quit(self) -> list[Effect]:
        self.quit_requested = True
        return []

    def _cycle_sort(self) -> list[Effect]:
        self.sort_mode = self.sort_mode.next()
        if self._on_sort_change is not None:
            self._on_sort_change(self.sort_mode)
        self.refresh()
        return self._sync_preview(force=True)

    def _toggle_preview(self) -> list[Effect]:
        self.show_preview = not self.show_preview
        if self._on_preview_toggle is not None:
            self._on_preview_toggle(self.show_preview)
        return self._sync_preview()

    def _set_bucket(self, bucket: BucketMode) -> list[Effect]:
        self.bucket = bucket
        self.note_list.cursor = 0
        self.note_list.start = 0
        self.refresh()
        return self._sync_preview(force=True)

    def _open_selected(self) -> list[Effect]:
        path = self.selected_path()
        if path is None:
            return []
        return [OpenEditor(path)]

    # Prompts

    def _begin_create(self) -> list[Effect]:
        self.state.begin(Mode.CREATING)
        self.name_field.reset()
        self.name_field.placeholder = self.bucket.default_placeholder(self._today())
        self.description_field.reset()
        self.description_field.placeholder = CREATE_DESCRIPTION_PLACEHOLDER
        self.note_list.clear_filter()
        self.refresh()
        return self._sync_preview()

    def _begin_rename(self) -> list[Effect]:
        entry = self.note_list.selected()
        path = self.selected_path()
        if entry is None or path is None:
            return []
        self.state.begin(
            Mode.RENAMING,
            target=path,
            title=entry.title,
            base=self.index.scan_dir(self._listing_bucket),
        )
        self.name_field.set_value(entry.title)
        self.name_field.placeholder = "New name"
        self.description_field.set_value(entry.description)
        self.description_field.placeholder = RENAME_DESCRIPTION_PLACEHOLDER
        return self._sync_preview()

    def _begin_delete(self) -> list[Effect]:
        entry = self.note_list.selected()
        path = self.selected_path()
        if entry is None or path is None:
            return []
        self.state.begin(Mode.DELETE_CONFIRM, target=path, title=entry.title)
        return self._sync_preview()

    def _back_to_browse(self) -> list[Effect]:
        self.state.reset()
        self.name_field.reset()
        self.description_field.reset()
        self.refresh()
        return self._sync_preview(force=True)

    def _handle_delete_key(self, key: str) -> list[Effect]:
        if key in {"y", "Y"}:
            target = self.state.target
            title = self.state.target_title
            if target is not None:
                self._apply_result(self.notes.delete_note(target), success_status=f"Deleted {title}")
            return self._back_to_browse()
        if key in {"n", "N", "ESC"}:
            return self._back_to_browse()
        return []

    def _handle_prompt_key(self, key: str) -> list[Effect]:
        if key == "ESC":
            return self._back_to_browse()
        if key == "ENTER":
            if self.state.step == 0:
                return self._confirm_name()
            return self._commit_prompt()
        if self.state.step == 0:
            if key == "TAB" and self.state.mode is Mode.CREATING:
                self.bucket = self.bucket.next_journal()
                self.name_field.placeholder = self.bucket.default_placeholder(self._today())
                self.refresh()
                return []
            if self.name_field.handle_key(key) and self.state.mode is Mode.CREATING:
                self.refresh()
            return []
        self.description_field.handle_key(key)
        return []

    def _confirm_name(self) -> list[Effect]:
        if self.state.mode is Mode.RENAMING and not self.name_field.value.strip():
            return []
        self.state.step = 1
        return []

    def pending_filename(self) -> str:
        """Filename the open prompt will create or rename to."""
        name = self.name_field.value.strip()
        if self.state.mode is Mode.CREATING and not name:
            return f"{self.bucket.default_note_dir}/{self.bucket.default_note_name(self._today())}"
        if self.state.mode is Mode.RENAMING and name == self.state.target_title:
            return name
        return with_note_suffix(name)

    def _commit_prompt(self) -> list[Effect]:
        name = self.name_field.value
        description = self.description_field.value.strip()
        if self.state.mode is Mode.CREATING:
            result = self.notes.create_note(name, description, self.bucket, today=self._today())
            effects = self._back_to_browse()
            if self._apply_result(result) and result.path is not None:
                effects.append(OpenEditor(result.path))
            return effects

        target = self.state.target
        base = self.state.target_base
        if target is not None and base is not None:
            self._apply_result(self.notes.rename_note(target, name, base, description))
        return self._back_to_browse()

    # Runtime events

    def handle_event(self, event: object) -> list[Effect]:
        if isinstance(event, Resize):
            if (event.width, event.height) == (self.width, self.height):
                return []
            self.width = event.width
            self.height = event.height
            self.dirty = True
            return self._sync_preview()
        if isinstance(event, PreviewLoaded):
            if event.request_id == self._request_id:
                self.preview.set_text(event.text)
                self.dirty = True
            return []
        if isinstance(event, PreviewCleared):
            if event.request_id == self._request_id:
                self.preview.show_image()
                self.dirty = True
            return []
        if isinstance(event, ImageRendered):
            if event.request_id == self._request_id and not event.drawn:
                logger.debug("image preview not drawn for request %d", event.request_id)
            return []
        if isinstance(event, EditorFinished):
            if event.error:
                logger.warning("editor failed for %s: %s", event.path, event.error)
            self.refresh()
            return self._sync_preview(force=True)
        logger.debug("ignoring unknown event %r", event)
        return []

    # Frame snapshot

    def frame_model(self) -> FrameModel:
        layout = self.layout()
        list_rows = layout.body_height
        filter_view = None
        if self.note_list.filter_active and self.state.mode is Mode.BROWSE:
            field = self.note_list.filter_field
            filter_view = InputView(field.value, field.cursor, field.placeholder, self.note_list.filter_editing)
            list_rows -= 1
        prompt = None
        if self.state.mode.prompting:
            # Title, blank, name and blank rows sit above the list.
            list_rows -= 4
            prompt = PromptView(
                title=self._prompt_title(),
                step=self.state.step,
                name=InputView(
                    self.name_field.value,
                    self.name_field.cursor,
                    self.name_field.placeholder,
                    self.state.step == 0,
                ),
                description=InputView(
                    self.description_field.value,
                    self.description_field.cursor,
                    self.description_field.placeholder,
                    self.state.step == 1,
                ),
                filename=self.pending_filename() if self.state.step == 1 else "",
            )
        self.note_list.ensure_visible(list_rows // ENTRY_ROWS)
        delete_target = self.state.target_title if self.state.mode is Mode.DELETE_CONFIRM else None
        return FrameModel(
            layout=layout,
            bucket_label=self.bucket.label,
            sort_label=self.sort_mode.label,
            notes=ListView(
                items=self.note_list.items,
                cursor=self.note_list.cursor,
                start=self.note_list.start,
                filter_query=filter_view,
            ),
            preview_lines=self.preview.lines,
            preview_start=self.preview.start,
            preview_image=self.preview.showing_image,
            prompt=prompt,
            delete_target=delete_target,
            status=self.status_text(),
            help_entries=self.help_entries(),
            show_help=self.show_help,
        )

    def _prompt_title(self) -> str:
        if self.state.mode is Mode.RENAMING:
            return f"Rename {self.state.target_title}"
        return f"New {self.bucket.label} note"
