"""Deferred effects and the worker that executes them.

A :class:`Command` is an ordered tuple of labelled tasks. ``then_run`` and
:func:`sequence` concatenate commands so their tasks run strictly in order;
:func:`run_all` groups independent commands with no ordering promise. Each
task may return an event, which is posted back to the main loop before the
next task starts, or a follow-up :class:`Command` whose tasks run next.

:class:`OpenEditor` is not a worker task: it takes over the terminal, so the
main loop runs it itself.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Task:
    """One blocking step; returns an event, a follow-up command, or ``None``."""

    label: str
    run: Callable[[], object | None]


@dataclass(frozen=True)
class Command:
    """Ordered tasks executed off the main loop."""

    tasks: tuple[Task, ...]

    @classmethod
    def task(cls, label: str, run: Callable[[], object | None]) -> Command:
        return cls((Task(label, run),))

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(task.label for task in self.tasks)

    def then_run(self, other: Command | None) -> Command:
        """Return a command running ``self`` and then ``other``."""
        if other is None:
            return self
        return Command(self.tasks + other.tasks)

    def execute(self, post: Callable[[object], None]) -> None:
        """Run tasks in order, posting each returned event.

        A returned command is spliced in and runs before the remaining
        tasks. A failing task is logged and ends the command: later tasks
        may depend on it.
        """
        pending = deque(self.tasks)
        while pending:
            task = pending.popleft()
            try:
                result = task.run()
            except Exception:
                logger.exception("command task %r failed", task.label)
                return
            if isinstance(result, Command):
                pending.extendleft(reversed(result.tasks))
            elif result is not None:
                post(result)


@dataclass(frozen=True)
class OpenEditor:
    """Suspend the UI and edit ``path`` in the external editor."""

    path: Path


Effect = Command | OpenEditor


def sequence(*commands: Command | None) -> Command | None:
    """Chain commands so every task runs in argument order."""
    result: Command | None = None
    for command in commands:
        if command is None:
            continue
        result = command if result is None else result.then_run(command)
    return result


def run_all(*effects: Effect | list[Effect] | None) -> list[Effect]:
    """Flatten independent effects into one batch, dropping ``None``."""
    batch: list[Effect] = []
    for effect in effects:
        if effect is None:
            continue
        if isinstance(effect, list):
            batch.extend(item for item in effect if item is not None)
        else:
            batch.append(effect)
    return batch


class CommandRunner:
    """Serial background executor for commands.

    Commands run one at a time on a daemon worker in submission order; the
    worker exits when the queue drains and is restarted on demand. Events
    are collected in a thread-safe queue that the main loop drains.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: deque[Command] = deque()
        self._running = False
        self._events: Queue[object] = Queue()

    def _worker(self) -> None:
        while True:
            with self._lock:
                if not self._pending:
                    self._running = False
                    return
                command = self._pending.popleft()
            command.execute(self._events.put)

    def submit(self, command: Command) -> None:
        """Queue ``command`` and start the worker if idle."""
        with self._lock:
            self._pending.append(command)
            if self._running:
                return
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="yappad-commands",
            daemon=True,
        )
        worker.start()

    def post(self, event: object) -> None:
        """Deliver an event produced on the main thread."""
        self._events.put(event)

    def drain_events(self) -> list[object]:
        """Return all events delivered since the last drain."""
        events: list[object] = []
        while True:
            try:
                events.append(self._events.get_nowait())
            except Empty:
                return events

    def idle(self) -> bool:
        with self._lock:
            return not self._running and not self._pending


def execute_inline(effects: list[Effect]) -> tuple[list[object], list[OpenEditor]]:
    """Run worker commands synchronously; return events and editor requests.

    Used at shutdown and by tests that drive the controller without threads.
    """
    events: list[object] = []
    editors: list[OpenEditor] = []
    for effect in effects:
        if isinstance(effect, OpenEditor):
            editors.append(effect)
            continue
        effect.execute(events.append)
    return events, editors
