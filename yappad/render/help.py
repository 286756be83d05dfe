"""Help footer content.

The short footer is one row; ``?`` expands it into a multi-row panel. Both
are built from ``(keys, summary)`` pairs so the text always matches the
active key bindings.
"""

from __future__ import annotations

from collections.abc import Sequence

from .ansi import display_width

KEY_STYLE = "\033[38;5;229m"
HEADING_STYLE = "\033[1;38;5;81m"
DIM_STYLE = "\033[2m"
RESET = "\033[0m"
SEPARATOR = f" {DIM_STYLE}•{RESET} "

SHORT_HELP_KEYS: tuple[str, ...] = ("ctrl+n", "enter", "/", "?", "q")

PROMPT_HELP: tuple[tuple[str, str], ...] = (
    ("enter", "confirm"),
    ("esc", "cancel"),
    ("ctrl+u", "clear"),
)
CREATE_PROMPT_HELP: tuple[tuple[str, str], ...] = (("tab", "switch journal"), *PROMPT_HELP)
DELETE_PROMPT_HELP: tuple[tuple[str, str], ...] = (("y", "delete"), ("n/esc", "keep"))
FILTER_HELP: tuple[tuple[str, str], ...] = (
    ("enter", "apply filter"),
    ("esc", "clear filter"),
    ("up/down", "move"),
)


def format_entry(keys: str, summary: str) -> str:
    return f"{KEY_STYLE}{keys}{RESET} {summary}"


def short_help_line(entries: Sequence[tuple[str, str]], width: int) -> str:
    """Join as many entries as fit in ``width`` columns on one row."""
    parts: list[str] = []
    used = 0
    for keys, summary in entries:
        part = format_entry(keys, summary)
        extra = display_width(part) + (3 if parts else 0)
        if used + extra > width:
            break
        parts.append(part)
        used += extra
    return SEPARATOR.join(parts)


def short_entries(entries: Sequence[tuple[str, str]]) -> list[tuple[str, str]]:
    """Pick the handful of bindings shown when the full help is closed."""
    picked = [entry for entry in entries if entry[0] in SHORT_HELP_KEYS]
    return picked or list(entries)


def full_help_lines(entries: Sequence[tuple[str, str]], width: int, columns: int = 3) -> list[str]:
    """Lay ``entries`` out in a heading plus rows of up to ``columns`` cells."""
    lines = [f"{HEADING_STYLE}KEYS{RESET}"]
    cell_width = max(1, width // max(1, columns))
    row: list[str] = []
    for keys, summary in entries:
        cell = format_entry(keys, summary)
        row.append(cell + " " * max(1, cell_width - display_width(cell)))
        if len(row) == columns:
            lines.append("".join(row).rstrip())
            row = []
    if row:
        lines.append("".join(row).rstrip())
    return lines


def full_help_row_count(entry_count: int, columns: int = 3) -> int:
    return 1 + (entry_count + columns - 1) // columns
