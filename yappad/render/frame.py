"""Pure frame composition.

``compose_frame`` turns a :class:`FrameModel` snapshot into exactly
``layout.height`` screen rows. It never touches the terminal; the runtime
loop writes the rows and the image overlay is drawn separately on top of
the preview box.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from ..vault.types import NoteEntry
from .ansi import display_width, fit_ansi_line
from .help import full_help_lines, short_entries, short_help_line
from .layout import PaneLayout

TITLE = "YapPad"
DELETE_PROMPT = "Are you sure you want to delete this file? (y/n)"
ENTRY_ROWS = 2
MODIFIED_FORMAT = "%d %b %y %H:%M %Z"

TITLE_STYLE = "\033[1;38;5;81m"
HEADER_STYLE = "\033[38;5;245m"
SELECTED_STYLE = "\033[1;38;5;229m"
DESCRIPTION_STYLE = "\033[38;5;245m"
PLACEHOLDER_STYLE = "\033[2m"
CURSOR_STYLE = "\033[7m"
BORDER_STYLE = "\033[38;5;240m"
STATUS_STYLE = "\033[38;5;114m"
WARNING_STYLE = "\033[1;38;5;203m"
RESET = "\033[0m"


@dataclass(frozen=True)
class InputView:
    """One text field as shown in a prompt."""

    value: str
    cursor: int
    placeholder: str = ""
    focused: bool = True


@dataclass(frozen=True)
class PromptView:
    """Two-step create/rename prompt.

    Step 0 shows ``name`` above the list; step 1 shows the chosen
    ``filename`` and the ``description`` field.
    """

    title: str
    step: int
    name: InputView
    description: InputView
    filename: str = ""


@dataclass(frozen=True)
class ListView:
    items: Sequence[NoteEntry]
    cursor: int
    start: int
    filter_query: InputView | None = None


@dataclass(frozen=True)
class FrameModel:
    layout: PaneLayout
    bucket_label: str
    sort_label: str
    notes: ListView
    preview_lines: Sequence[str] = ()
    preview_start: int = 0
    preview_image: bool = False
    prompt: PromptView | None = None
    delete_target: str | None = None
    status: str = ""
    help_entries: Sequence[tuple[str, str]] = field(default_factory=tuple)
    show_help: bool = False


def render_input(view: InputView) -> str:
    """Render a field; the focused one shows a reverse-video cursor cell."""
    if not view.value and view.placeholder:
        if view.focused:
            return f"{CURSOR_STYLE}{view.placeholder[:1]}{RESET}{PLACEHOLDER_STYLE}{view.placeholder[1:]}{RESET}"
        return f"{PLACEHOLDER_STYLE}{view.placeholder}{RESET}"
    if not view.focused:
        return view.value
    cursor = max(0, min(view.cursor, len(view.value)))
    under = view.value[cursor : cursor + 1] or " "
    return f"{view.value[:cursor]}{CURSOR_STYLE}{under}{RESET}{view.value[cursor + 1 :]}"


def header_rows(model: FrameModel) -> list[str]:
    return [
        f"{TITLE_STYLE}{TITLE}{RESET}",
        f"{HEADER_STYLE}Mode: {model.bucket_label}  Sort: {model.sort_label}{RESET}",
        "",
    ]


def format_modified(timestamp: float) -> str:
    """Local time in RFC 822 form, e.g. ``14 Jan 26 09:30 CET``."""
    return datetime.fromtimestamp(timestamp).astimezone().strftime(MODIFIED_FORMAT)


def list_rows(view: ListView, width: int, height: int) -> list[str]:
    """Render the note list plus an optional filter row.

    Each entry takes ``ENTRY_ROWS`` rows: the title (with its description
    when there is room) and a dim ``Modified:`` line.
    """
    rows: list[str] = []
    if view.filter_query is not None:
        rows.append(f"Filter: {render_input(view.filter_query)}")
    capacity = (max(0, height - len(rows)) + ENTRY_ROWS - 1) // ENTRY_ROWS
    if not view.items:
        rows.append(f"{PLACEHOLDER_STYLE}No notes{RESET}")
    for idx in range(view.start, min(len(view.items), view.start + capacity)):
        entry = view.items[idx]
        if idx == view.cursor:
            line = f"{SELECTED_STYLE}> {entry.title}{RESET}"
        else:
            line = f"  {entry.title}"
        if entry.description:
            room = width - display_width(line) - 3
            if room > 0:
                line = f"{line}  {DESCRIPTION_STYLE}{entry.description}{RESET}"
        rows.append(line)
        rows.append(f"    {DESCRIPTION_STYLE}Modified: {format_modified(entry.modified_at)}{RESET}")
    return rows[:height]


def preview_box_rows(model: FrameModel) -> list[str]:
    """Render the bordered preview box, ``body_height`` rows tall."""
    layout = model.layout
    inner_w = layout.preview_width - 2
    text_w = layout.preview_inner_width
    rows = [f"{BORDER_STYLE}┌{'─' * inner_w}┐{RESET}"]
    for offset in range(layout.preview_inner_height):
        text = ""
        if not model.preview_image:
            idx = model.preview_start + offset
            if idx < len(model.preview_lines):
                text = model.preview_lines[idx]
        cell = fit_ansi_line(text, text_w)
        rows.append(f"{BORDER_STYLE}│{RESET} {cell} {BORDER_STYLE}│{RESET}")
    rows.append(f"{BORDER_STYLE}└{'─' * inner_w}┘{RESET}")
    return rows[: layout.body_height]


def prompt_rows(prompt: PromptView, notes: ListView, width: int, height: int) -> list[str]:
    rows = [f"{TITLE_STYLE}{prompt.title}{RESET}", ""]
    if prompt.step == 0:
        rows.append(f"Name: {render_input(prompt.name)}")
        rows.append("")
        rows.extend(list_rows(notes, width, max(0, height - len(rows))))
    else:
        rows.append(f"Filename: {prompt.filename}")
        rows.append(f"Description: {render_input(prompt.description)}")
    return rows[:height]


def delete_rows(target: str) -> list[str]:
    return [
        f"{WARNING_STYLE}{DELETE_PROMPT}{RESET}",
        "",
        target,
    ]


def body_rows(model: FrameModel) -> list[str]:
    """Render exactly one body layout: delete prompt, input prompt, split or list."""
    layout = model.layout
    height = layout.body_height
    if model.delete_target is not None:
        rows = delete_rows(model.delete_target)
    elif model.prompt is not None:
        rows = prompt_rows(model.prompt, model.notes, layout.width, height)
    elif layout.preview_visible:
        left = list_rows(model.notes, layout.list_width, height)
        right = preview_box_rows(model)
        rows = []
        for idx in range(height):
            list_cell = fit_ansi_line(left[idx] if idx < len(left) else "", layout.list_width)
            preview_cell = right[idx] if idx < len(right) else ""
            rows.append(f"{list_cell} {preview_cell}")
        return rows
    else:
        rows = list_rows(model.notes, layout.width, height)
    rows = rows[:height]
    return rows + [""] * (height - len(rows))


def footer_rows(model: FrameModel) -> list[str]:
    width = model.layout.width
    status = f"{STATUS_STYLE}{model.status}{RESET}" if model.status else ""
    if model.show_help:
        return [status, *full_help_lines(model.help_entries, width)]
    return [status, short_help_line(short_entries(model.help_entries), width)]


def compose_frame(model: FrameModel) -> list[str]:
    """Return ``layout.height`` rows, each clipped to the terminal width."""
    layout = model.layout
    rows = [*header_rows(model), *body_rows(model), *footer_rows(model)]
    rows = rows[: layout.height]
    rows.extend([""] * (layout.height - len(rows)))
    return [fit_ansi_line(row, layout.width) for row in rows]
