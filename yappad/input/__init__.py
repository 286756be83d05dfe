"""Input-layer public API: key decoding, key dispatch, and text fields."""

from .key_registry import Handler, KeyComboBinding, KeyComboRegistry
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key
from .text_field import TextField, is_text_key

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "Handler",
    "KeyComboBinding",
    "KeyComboRegistry",
    "TextField",
    "is_text_key",
    "read_key",
]
