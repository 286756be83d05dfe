from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Mode(Enum):
    BROWSE = "browse"
    CREATING = "creating"
    RENAMING = "renaming"
    DELETE_CONFIRM = "delete-confirm"

    @property
    def prompting(self) -> bool:
        return self in {Mode.CREATING, Mode.RENAMING}


@dataclass
class InteractionState:
    """Which prompt is open and what it is acting on.

    ``step`` is 0 while the name is edited and 1 for the description.
    ``target`` is the note being renamed or deleted; ``target_base`` is the
    directory a renamed note's new name resolves against.
    """

    mode: Mode = Mode.BROWSE
    step: int = 0
    target: Path | None = None
    target_title: str = ""
    target_base: Path | None = None

    def begin(self, mode: Mode, target: Path | None = None, title: str = "", base: Path | None = None) -> None:
        self.mode = mode
        self.step = 0
        self.target = target
        self.target_title = title
        self.target_base = base

    def reset(self) -> None:
        self.begin(Mode.BROWSE)
