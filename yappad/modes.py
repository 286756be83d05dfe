"""Sort and time-bucket modes for note listings.

Both enums are cyclic. Bucket modes also own the date-derived default note
name and the vault subdirectory they scope listings to.
"""

from __future__ import annotations

from datetime import date
from enum import Enum

NOTE_SUFFIX = ".md"
NOTE_SUFFIXES: tuple[str, ...] = (".md", ".markdown")


class SortMode(Enum):
    """Comparator selection over note timestamps."""

    MODIFIED_DESC = "modified-desc"
    MODIFIED_ASC = "modified-asc"
    CREATED_DESC = "created-desc"
    CREATED_ASC = "created-asc"

    @property
    def label(self) -> str:
        return _SORT_LABELS[self]

    @property
    def uses_created_time(self) -> bool:
        return self in {SortMode.CREATED_DESC, SortMode.CREATED_ASC}

    @property
    def descending(self) -> bool:
        return self in {SortMode.MODIFIED_DESC, SortMode.CREATED_DESC}

    def next(self) -> SortMode:
        """Return the following sort mode, wrapping after the last one."""
        members = list(SortMode)
        return members[(members.index(self) + 1) % len(members)]

    @classmethod
    def parse(cls, value: object) -> SortMode | None:
        """Return the mode named by ``value`` or ``None`` when unknown."""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_SORT_LABELS = {
    SortMode.MODIFIED_DESC: "Modified (Newest)",
    SortMode.MODIFIED_ASC: "Modified (Oldest)",
    SortMode.CREATED_DESC: "Created (Newest)",
    SortMode.CREATED_ASC: "Created (Oldest)",
}


class BucketMode(Enum):
    """Time bucket scoping listings and default note names.

    ``ALL`` lists the whole vault; the others scope to one subdirectory.
    """

    ALL = 0
    DAILY = 1
    WEEKLY = 2
    MONTHLY = 3
    YEARLY = 4

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @property
    def hotkey(self) -> str:
        return str(self.value)

    @property
    def subdir(self) -> str:
        """Vault subdirectory scanned for this bucket; empty for ``ALL``."""
        if self is BucketMode.ALL:
            return ""
        return self.name.lower()

    @property
    def default_note_dir(self) -> str:
        """Subdirectory receiving default notes; ``ALL`` falls back to daily."""
        if self is BucketMode.ALL:
            return BucketMode.DAILY.subdir
        return self.subdir

    def default_note_name(self, today: date | None = None) -> str:
        """Return the date-derived filename for a new default note."""
        today = today or date.today()
        if self is BucketMode.WEEKLY:
            iso_year, iso_week, _weekday = today.isocalendar()
            return f"{iso_year}-W{iso_week:02d}{NOTE_SUFFIX}"
        if self is BucketMode.MONTHLY:
            return f"{today:%Y-%m}{NOTE_SUFFIX}"
        if self is BucketMode.YEARLY:
            return f"{today:%Y}{NOTE_SUFFIX}"
        return f"{today:%Y-%m-%d}{NOTE_SUFFIX}"

    def default_placeholder(self, today: date | None = None) -> str:
        return f"{self.default_note_dir}/{self.default_note_name(today)} (default)"

    def next_journal(self) -> BucketMode:
        """Cycle daily -> weekly -> monthly -> yearly -> daily.

        ``ALL`` behaves like daily, so its successor is weekly.
        """
        if self in {BucketMode.ALL, BucketMode.DAILY}:
            return BucketMode.WEEKLY
        if self is BucketMode.WEEKLY:
            return BucketMode.MONTHLY
        if self is BucketMode.MONTHLY:
            return BucketMode.YEARLY
        return BucketMode.DAILY

    @classmethod
    def parse(cls, value: str) -> BucketMode:
        """Parse a CLI mode name or number.

        Raises ``ValueError`` for anything outside the fixed enumeration.
        """
        normalized = value.strip().lower()
        if normalized in _BUCKET_ALIASES:
            return _BUCKET_ALIASES[normalized]
        raise ValueError(
            f"unknown mode: {value} (use all, daily, weekly, monthly, yearly)"
        )


_BUCKET_ALIASES: dict[str, BucketMode] = {}
for _mode in BucketMode:
    _BUCKET_ALIASES[_mode.name.lower()] = _mode
    _BUCKET_ALIASES[_mode.hotkey] = _mode
del _mode


def has_note_suffix(name: str) -> bool:
    return name.lower().endswith(NOTE_SUFFIXES)


def with_note_suffix(name: str) -> str:
    """Append ``.md`` unless ``name`` already carries a markdown suffix."""
    if has_note_suffix(name):
        return name
    return f"{name}{NOTE_SUFFIX}"
