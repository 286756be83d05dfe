"""Preview subsystem: classification, text rendering, load commands."""

from .loader import PreviewKind, PreviewLoader, is_image_path, render_preview_text
from .sniff import sniff_content_type
from .syntax import highlight_markdown, sanitize_terminal_text

__all__ = [
    "PreviewKind",
    "PreviewLoader",
    "highlight_markdown",
    "is_image_path",
    "render_preview_text",
    "sanitize_terminal_text",
    "sniff_content_type",
]
