"""Domain datatypes for vault listings and note mutations."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class NoteEntry:
    """One listed note.

    ``title`` is relative to the scanned directory and is the only key used
    to resolve the entry back to a path.
    """

    title: str
    modified_at: float
    created_at: float
    description: str = ""


@dataclass(frozen=True)
class MutationResult:
    """Outcome of one create/rename/delete operation."""

    ok: bool
    path: Path | None = None
    error: str | None = None

    @classmethod
    def success(cls, path: Path) -> MutationResult:
        return cls(ok=True, path=path)

    @classmethod
    def failure(cls, error: str, path: Path | None = None) -> MutationResult:
        return cls(ok=False, path=path, error=error)


__all__ = [
    "NoteEntry",
    "MutationResult",
]
