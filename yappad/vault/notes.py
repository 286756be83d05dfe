"""Note mutations: create, rename and delete.

Every operation returns a :class:`MutationResult` instead of raising, so the
caller decides in one place which failures are silent and which are shown.
Description sidecars move with their notes.
"""

from __future__ import annotations

import logging
import os
from datetime import date
from pathlib import Path

from ..modes import BucketMode, with_note_suffix
from .metadata import DescriptionStore
from .types import MutationResult

logger = logging.getLogger(__name__)

TEMPLATES_DIRNAME = ".templates"
BUCKET_DIRS: tuple[str, ...] = tuple(mode.subdir for mode in BucketMode if mode.subdir)


def ensure_vault_layout(vault_root: Path) -> None:
    """Create the vault root plus bucket and template directories.

    Failing to create the root raises ``OSError``; the subdirectories are
    best-effort.
    """
    vault_root.mkdir(parents=True, exist_ok=True)
    for subdir in (*BUCKET_DIRS, TEMPLATES_DIRNAME):
        try:
            (vault_root / subdir).mkdir(exist_ok=True)
        except OSError as exc:
            logger.debug("could not create %s: %s", vault_root / subdir, exc)


class NoteStore:
    """Filesystem effects on notes below one vault root."""

    def __init__(self, vault_root: Path, descriptions: DescriptionStore | None = None) -> None:
        self.vault_root = vault_root
        self.descriptions = descriptions if descriptions is not None else DescriptionStore(vault_root)

    def default_note_path(self, bucket: BucketMode, today: date | None = None) -> Path:
        return self.vault_root / bucket.default_note_dir / bucket.default_note_name(today)

    def custom_note_path(self, name: str) -> Path:
        """Resolve a user-typed name relative to the vault root."""
        return self.vault_root / with_note_suffix(name.strip())

    def template_path(self, bucket: BucketMode) -> Path:
        return self.vault_root / TEMPLATES_DIRNAME / f"{bucket.default_note_dir}.md"

    def read_template(self, bucket: BucketMode) -> bytes:
        """Return template bytes for ``bucket`` or ``b""`` when unavailable."""
        try:
            return self.template_path(bucket).read_bytes()
        except OSError:
            return b""

    def create_note(
        self,
        name: str,
        description: str,
        bucket: BucketMode,
        today: date | None = None,
    ) -> MutationResult:
        """Create a note unless it already exists, then store its description.

        An empty ``name`` selects the bucket's default note, seeded from the
        bucket template when one exists. Custom names never get a template.
        """
        use_default = not name.strip()
        if use_default:
            path = self.default_note_path(bucket, today)
        else:
            path = self.custom_note_path(name)

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            return MutationResult.failure(f"cannot create {path.parent}: {exc}", path)

        if not path.exists():
            content = self.read_template(bucket) if use_default else b""
            try:
                path.write_bytes(content)
            except OSError as exc:
                return MutationResult.failure(f"cannot create {path}: {exc}", path)

        if description:
            self.descriptions.write(path, description)
        return MutationResult.success(path)

    def rename_note(self, old_path: Path, new_name: str, base_dir: Path, description: str) -> MutationResult:
        """Move ``old_path`` to ``base_dir/new_name`` and migrate its description.

        ``.md`` is appended unless the name already has a markdown suffix or
        names ``old_path`` itself. An empty ``description`` keeps the
        existing one. Refuses to overwrite a different existing file.
        """
        if not new_name.strip():
            return MutationResult.failure("empty name", old_path)
        new_path = base_dir / new_name.strip()
        if new_path != old_path:
            new_path = base_dir / with_note_suffix(new_name.strip())
        final_description = description or self.descriptions.read(old_path)

        if new_path != old_path:
            if new_path.exists():
                return MutationResult.failure(f"{new_path} already exists", old_path)
            try:
                new_path.parent.mkdir(parents=True, exist_ok=True)
                os.rename(old_path, new_path)
            except OSError as exc:
                return MutationResult.failure(f"cannot rename {old_path}: {exc}", old_path)
            self.descriptions.delete(old_path)

        self.descriptions.write(new_path, final_description)
        return MutationResult.success(new_path)

    def delete_note(self, path: Path) -> MutationResult:
        """Remove ``path`` and its description; a missing file is a no-op."""
        try:
            os.remove(path)
        except FileNotFoundError:
            self.descriptions.delete(path)
            return MutationResult.failure(f"{path} does not exist", path)
        except OSError as exc:
            return MutationResult.failure(f"cannot delete {path}: {exc}", path)
        self.descriptions.delete(path)
        return MutationResult.success(path)
