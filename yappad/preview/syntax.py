"""Note text loading, sanitization, and Markdown highlighting.

Every note is highlighted with Pygments' Markdown lexer regardless of its
extension. Control bytes are neutralized first so file content can never
drive the terminal.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import MarkdownLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, Terminal256Formatter] = {}
_LEXER = MarkdownLexer(stripnl=False, ensurenl=False)


def decode_text(raw: bytes) -> str:
    """Decode bytes with the UTF-8, UTF-8-BOM, latin-1 fallback order."""
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError:
            continue
    return raw.decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    """Return ``style`` when Pygments knows it, else the default style."""
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


def _formatter_for_style(style: str) -> Terminal256Formatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = Terminal256Formatter(style=normalize_style(style))
        _FORMATTERS[style] = formatter
    return formatter


def highlight_markdown(source: str, style: str = DEFAULT_STYLE) -> str:
    """Highlight ``source`` as Markdown; returns ``source`` unchanged on failure."""
    try:
        return highlight(source, _LEXER, _formatter_for_style(style))
    except Exception as exc:
        logger.debug("markdown highlighting failed: %s", exc)
        return source


def render_note_text(raw: bytes, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Turn raw note bytes into displayable, optionally colorized text."""
    text = sanitize_terminal_text(decode_text(raw))
    if no_color or not text:
        return text
    return highlight_markdown(text, style)


def read_note_bytes(path: Path) -> bytes | None:
    if not path.is_file():
        logger.debug("not a regular file: %s", path)
        return None
    try:
        return path.read_bytes()
    except OSError as exc:
        logger.debug("cannot read %s: %s", path, exc)
        return None
