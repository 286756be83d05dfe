"""Key-token dispatch tables whose bindings also document themselves."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

Handler = Callable[[], list[Any]]


@dataclass(frozen=True)
class KeyComboBinding:
    """Key tokens mapped to a handler that returns follow-up effects.

    ``label``/``summary`` feed the help footer; bindings without a summary
    are hidden from it.
    """

    combos: tuple[str, ...]
    handler: Handler
    label: str = ""
    summary: str = ""


class KeyComboRegistry:
    """Ordered key table; ``dispatch`` returns ``None`` for unbound keys."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}
        self._bindings: list[KeyComboBinding] = []

    def register(
        self,
        *combos: str,
        handler: Handler,
        label: str = "",
        summary: str = "",
    ) -> KeyComboRegistry:
        return self.register_binding(KeyComboBinding(combos, handler, label, summary))

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding; later bindings win for shared combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        self._bindings.append(binding)
        return self

    def bound(self, key: str) -> bool:
        return key in self._handlers

    def dispatch(self, key: str) -> list[Any] | None:
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()

    def help_entries(self) -> list[tuple[str, str]]:
        """Return ``(keys, summary)`` pairs in registration order."""
        return [
            (binding.label or "/".join(binding.combos), binding.summary)
            for binding in self._bindings
            if binding.summary
        ]
