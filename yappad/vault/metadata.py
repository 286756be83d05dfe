"""Sidecar description store.

Descriptions live in one JSON object at ``<vault>/.meta/descriptions.json``
keyed by vault-relative POSIX note path. The directory is hidden, so the
index never lists it. All access is defensive: a missing or malformed store
reads as empty, and write failures are logged and ignored.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

META_DIRNAME = ".meta"
DESCRIPTIONS_FILENAME = "descriptions.json"


class DescriptionStore:
    """Read/write/delete short descriptions keyed by note path."""

    def __init__(self, vault_root: Path) -> None:
        self.vault_root = vault_root
        self.store_path = vault_root / META_DIRNAME / DESCRIPTIONS_FILENAME

    def _key(self, note_path: Path) -> str | None:
        """Return the vault-relative key for ``note_path``.

        Paths outside the vault have no key and are never stored.
        """
        try:
            return note_path.relative_to(self.vault_root).as_posix()
        except ValueError:
            return None

    def _load(self) -> dict[str, str]:
        try:
            data = json.loads(self.store_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except Exception as exc:
            logger.warning("ignoring unreadable description store %s: %s", self.store_path, exc)
            return {}
        if not isinstance(data, dict):
            return {}
        return {key: value for key, value in data.items() if isinstance(key, str) and isinstance(value, str)}

    def _save(self, data: dict[str, str]) -> bool:
        try:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
            self.store_path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        except OSError as exc:
            logger.warning("could not write description store %s: %s", self.store_path, exc)
            return False
        return True

    def read(self, note_path: Path) -> str:
        """Return the description for ``note_path`` or ``""``."""
        key = self._key(note_path)
        if key is None:
            return ""
        return self._load().get(key, "")

    def read_all(self) -> dict[str, str]:
        """Return every stored description keyed by vault-relative path."""
        return self._load()

    def write(self, note_path: Path, description: str) -> bool:
        """Store ``description``; an empty description deletes the entry."""
        if not description:
            return self.delete(note_path)
        key = self._key(note_path)
        if key is None:
            return False
        data = self._load()
        if data.get(key) == description:
            return True
        data[key] = description
        return self._save(data)

    def delete(self, note_path: Path) -> bool:
        """Remove the entry for ``note_path``; missing entries are a no-op."""
        key = self._key(note_path)
        if key is None:
            return False
        data = self._load()
        if key not in data:
            return True
        del data[key]
        return self._save(data)
