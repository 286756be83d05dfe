"""Single-line text input used by the create/rename prompts."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_CHAR_LIMIT = 128


def is_text_key(key: str) -> bool:
    """Return whether ``key`` is a printable character token."""
    return len(key) == 1 and key.isprintable()


@dataclass
class TextField:
    """Editable value with a cursor and an optional placeholder."""

    value: str = ""
    placeholder: str = ""
    cursor: int = 0
    char_limit: int = DEFAULT_CHAR_LIMIT

    def set_value(self, value: str) -> None:
        self.value = value[: self.char_limit]
        self.cursor = len(self.value)

    def reset(self) -> None:
        self.value = ""
        self.cursor = 0

    def handle_key(self, key: str) -> bool:
        """Apply one editing key; return ``True`` when the value changed."""
        if is_text_key(key):
            if len(self.value) >= self.char_limit:
                return False
            self.value = self.value[: self.cursor] + key + self.value[self.cursor :]
            self.cursor += 1
            return True
        if key == "BACKSPACE":
            if self.cursor == 0:
                return False
            self.value = self.value[: self.cursor - 1] + self.value[self.cursor :]
            self.cursor -= 1
            return True
        if key == "DELETE":
            if self.cursor >= len(self.value):
                return False
            self.value = self.value[: self.cursor] + self.value[self.cursor + 1 :]
            return True
        if key == "CTRL_U":
            changed = bool(self.value)
            self.reset()
            return changed
        if key == "LEFT":
            self.cursor = max(0, self.cursor - 1)
        elif key == "RIGHT":
            self.cursor = min(len(self.value), self.cursor + 1)
        elif key == "HOME":
            self.cursor = 0
        elif key == "END":
            self.cursor = len(self.value)
        return False
