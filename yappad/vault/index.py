"""Vault scanning and note listing.

Listings are recomputed from disk on every call; nothing is cached, so a
listing always reflects the latest create/rename/delete.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..modes import BucketMode, SortMode
from .metadata import DescriptionStore
from .types import NoteEntry

logger = logging.getLogger(__name__)

HIDDEN_PREFIX = "."


def _created_time(stat: os.stat_result) -> float:
    """Return creation time where the platform reports one, else mtime."""
    birthtime = getattr(stat, "st_birthtime", None)
    if isinstance(birthtime, (int, float)) and birthtime > 0:
        return float(birthtime)
    return float(stat.st_mtime)


def sort_notes(entries: list[NoteEntry], sort_mode: SortMode) -> list[NoteEntry]:
    """Return ``entries`` ordered by ``sort_mode``.

    The sort is stable in both directions, so equal timestamps keep their
    enumeration order.
    """
    if sort_mode.uses_created_time:
        return sorted(entries, key=lambda entry: entry.created_at, reverse=sort_mode.descending)
    return sorted(entries, key=lambda entry: entry.modified_at, reverse=sort_mode.descending)


class VaultIndex:
    """Read-only view over the notes stored below ``root``."""

    def __init__(self, root: Path, descriptions: DescriptionStore | None = None) -> None:
        self.root = root
        self.descriptions = descriptions if descriptions is not None else DescriptionStore(root)

    def scan_dir(self, bucket: BucketMode) -> Path:
        if bucket is BucketMode.ALL:
            return self.root
        return self.root / bucket.subdir

    def resolve(self, title: str, bucket: BucketMode) -> Path:
        """Map a listing title back to the note's full path."""
        return self.scan_dir(bucket) / title

    def _walk(self, directory: Path, scan_root: Path, out: list[tuple[str, Path, os.stat_result]]) -> None:
        try:
            with os.scandir(directory) as entries:
                children = sorted(entries, key=lambda child: child.name)
        except OSError as exc:
            if directory != scan_root:
                logger.debug("skipping unreadable directory %s: %s", directory, exc)
            return

        for child in children:
            if child.name.startswith(HIDDEN_PREFIX):
                continue
            child_path = Path(child.path)
            try:
                if child.is_dir(follow_symlinks=False):
                    self._walk(child_path, scan_root, out)
                    continue
                if not child.is_file():
                    continue
                stat = child.stat()
            except OSError as exc:
                logger.debug("skipping unreadable entry %s: %s", child_path, exc)
                continue
            title = child_path.relative_to(scan_root).as_posix()
            out.append((title, child_path, stat))

    def list_notes(self, sort_mode: SortMode, bucket: BucketMode) -> list[NoteEntry]:
        """List notes in ``bucket`` ordered by ``sort_mode``.

        A missing bucket directory yields an empty list.
        """
        scan_root = self.scan_dir(bucket)
        found: list[tuple[str, Path, os.stat_result]] = []
        self._walk(scan_root, scan_root, found)

        descriptions = self.descriptions.read_all() if found else {}
        entries: list[NoteEntry] = []
        for title, path, stat in found:
            try:
                key = path.relative_to(self.root).as_posix()
            except ValueError:
                key = title
            entries.append(
                NoteEntry(
                    title=title,
                    modified_at=float(stat.st_mtime),
                    created_at=_created_time(stat),
                    description=descriptions.get(key, ""),
                )
            )
        return sort_notes(entries, sort_mode)

    def search(self, query: str, sort_mode: SortMode) -> list[NoteEntry]:
        """Case-insensitive substring search over the whole vault's titles."""
        folded = query.casefold()
        return [
            entry
            for entry in self.list_notes(sort_mode, BucketMode.ALL)
            if folded in entry.title.casefold()
        ]
