"""Events delivered back to the controller by the runtime."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class PreviewLoaded:
    """Text (already highlighted) for preview request ``request_id``."""

    request_id: int
    text: str


@dataclass(frozen=True)
class PreviewCleared:
    """The preview pane should be blanked before an image is drawn over it."""

    request_id: int


@dataclass(frozen=True)
class ImageRendered:
    request_id: int
    drawn: bool


@dataclass(frozen=True)
class EditorFinished:
    path: Path
    error: str | None = None


Event = Resize | PreviewLoaded | PreviewCleared | ImageRendered | EditorFinished


__all__ = [
    "Event",
    "EditorFinished",
    "ImageRendered",
    "PreviewCleared",
    "PreviewLoaded",
    "Resize",
]
