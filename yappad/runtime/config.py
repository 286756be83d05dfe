"""Persistent JSON config helpers.

Stores the default vault, highlight style, editor fallback, rasterizer argv
and the last sort/preview choices. All access is defensive: malformed or
missing config falls back to defaults.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from platformdirs import user_config_dir

from ..modes import SortMode

logger = logging.getLogger(__name__)

APP_NAME = "yappad"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_VAULT_DIRNAME = ".YapPad"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON; write errors are logged."""
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError) as exc:
        logger.warning("could not save config %s: %s", CONFIG_PATH, exc)


def _load_str(key: str) -> str | None:
    value = load_config().get(key)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _save_value(key: str, value: object) -> None:
    config = load_config()
    config[key] = value
    save_config(config)


def load_vault_dir() -> Path:
    """Return the configured vault directory, else ``~/.YapPad``."""
    configured = _load_str("vault_dir")
    if configured is not None:
        return Path(configured).expanduser()
    return Path.home() / DEFAULT_VAULT_DIRNAME


def load_style() -> str | None:
    return _load_str("style")


def load_editor() -> str | None:
    return _load_str("editor")


def load_rasterizer() -> list[str] | None:
    """Return the rasterizer argv prefix; only a non-empty list of strings counts."""
    value = load_config().get("image_rasterizer")
    if isinstance(value, list) and value and all(isinstance(part, str) and part for part in value):
        return list(value)
    return None


def load_sort_mode() -> SortMode:
    return SortMode.parse(load_config().get("sort_mode")) or SortMode.MODIFIED_DESC


def save_sort_mode(sort_mode: SortMode) -> None:
    _save_value("sort_mode", sort_mode.value)


def load_show_preview() -> bool:
    """Return the persisted preview toggle; only explicit booleans count."""
    value = load_config().get("show_preview")
    return value if isinstance(value, bool) else True


def save_show_preview(show_preview: bool) -> None:
    _save_value("show_preview", bool(show_preview))
