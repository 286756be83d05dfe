"""Tests for commands, the background runner, overlay drawing and terminal output."""

from __future__ import annotations

import contextlib
import os
import subprocess
import tempfile
import termios
import threading
import time
import unittest
from pathlib import Path
from unittest import mock

from yappad.interaction import Controller
from yappad.preview import PreviewLoader
from yappad.runtime.commands import Command, CommandRunner, OpenEditor, execute_inline, run_all, sequence
from yappad.runtime.events import EditorFinished, ImageRendered
from yappad.runtime.loop import RuntimeLoopCallbacks, RuntimeLoopTiming, dispatch_effects, frame_bytes, run_main_loop
from yappad.runtime.overlay import (
    KITTY_CLEAR_IMAGES,
    ImageOverlay,
    OverlayBox,
    build_overlay_payload,
)
from yappad.runtime.terminal import TerminalController
from yappad.vault import NoteStore, VaultIndex, ensure_vault_layout


class CommandTests(unittest.TestCase):
    def test_sequence_runs_tasks_in_order_and_posts_events(self) -> None:
        calls: list[str] = []
        first = Command.task("first", lambda: calls.append("first"))
        second = Command.task("second", lambda: "event")
        chained = sequence(first, None, second)

        events: list[object] = []
        chained.execute(events.append)

        self.assertEqual(chained.labels, ("first", "second"))
        self.assertEqual(calls, ["first"])
        self.assertEqual(events, ["event"])

    def test_failing_task_stops_the_rest_of_the_command(self) -> None:
        def boom() -> None:
            raise RuntimeError("boom")

        command = Command.task("ok", lambda: 1).then_run(Command.task("boom", boom)).then_run(
            Command.task("after", lambda: 3)
        )
        events: list[object] = []
        with self.assertLogs("yappad.runtime.commands", level="ERROR"):
            command.execute(events.append)

        self.assertEqual(events, [1])

    def test_returned_command_runs_before_remaining_tasks(self) -> None:
        order: list[str] = []
        follow_up = Command.task("inner", lambda: order.append("inner") or "inner-event")
        command = Command.task("outer", lambda: follow_up).then_run(
            Command.task("last", lambda: order.append("last"))
        )
        events: list[object] = []

        command.execute(events.append)

        self.assertEqual(order, ["inner", "last"])
        self.assertEqual(events, ["inner-event"])

    def test_run_all_flattens_and_drops_none(self) -> None:
        a = Command.task("a", lambda: None)
        editor = OpenEditor(Path("x.md"))

        self.assertEqual(run_all(a, None, [editor, None]), [a, editor])

    def test_execute_inline_separates_editor_requests(self) -> None:
        editor = OpenEditor(Path("x.md"))
        events, editors = execute_inline([Command.task("a", lambda: "done"), editor])

        self.assertEqual(events, ["done"])
        self.assertEqual(editors, [editor])


class CommandRunnerTests(unittest.TestCase):
    def test_commands_run_in_submission_order_on_worker(self) -> None:
        runner = CommandRunner()
        gate = threading.Event()
        threads: list[str] = []

        def slow() -> str:
            gate.wait(1.0)
            threads.append(threading.current_thread().name)
            return "slow"

        runner.submit(Command.task("slow", slow))
        runner.submit(Command.task("fast", lambda: "fast"))
        gate.set()

        deadline = time.monotonic() + 2.0
        events: list[object] = []
        while time.monotonic() < deadline and len(events) < 2:
            events.extend(runner.drain_events())
            time.sleep(0.01)

        self.assertEqual(events, ["slow", "fast"])
        self.assertEqual(threads, ["yappad-commands"])
        deadline = time.monotonic() + 1.0
        while not runner.idle() and time.monotonic() < deadline:
            time.sleep(0.01)
        self.assertTrue(runner.idle())

    def test_post_delivers_main_thread_events(self) -> None:
        runner = CommandRunner()
        runner.post("hello")

        self.assertEqual(runner.drain_events(), ["hello"])
        self.assertEqual(runner.drain_events(), [])


class RecordingTerminal:
    def __init__(self) -> None:
        self.writes: list[bytes] = []
        self.active = True

    def write(self, data: bytes) -> None:
        self.writes.append(data)

    def write_if(self, data: bytes, still_wanted) -> bool:
        if not still_wanted():
            return False
        self.writes.append(data)
        return True


class ImageOverlayTests(unittest.TestCase):
    def test_payload_saves_moves_and_restores_cursor(self) -> None:
        payload = build_overlay_payload(b"IMG", OverlayBox(col=44, row=5, width=10, height=4))

        self.assertEqual(payload, b"\x1b7\x1b[5;44HIMG\x1b8")

    def test_rasterizer_receives_size_and_path(self) -> None:
        run_process = mock.Mock(return_value=mock.Mock(stdout=b"IMG"))
        overlay = ImageOverlay(RecordingTerminal(), ("chafa", "-f", "kitty"), run_process=run_process)

        raster = overlay.rasterize(Path("/v/cat.png"), OverlayBox(col=1, row=1, width=30, height=12))

        self.assertEqual(raster, b"IMG")
        argv = run_process.call_args.args[0]
        self.assertEqual(argv, ["chafa", "-f", "kitty", "-s", "30x12", "/v/cat.png"])

    def test_rasterizer_failure_means_no_image(self) -> None:
        terminal = RecordingTerminal()
        run_process = mock.Mock(side_effect=subprocess.CalledProcessError(1, ["chafa"]))
        overlay = ImageOverlay(terminal, run_process=run_process)
        generation = overlay.invalidate()

        drawn = overlay.draw(Path("cat.png"), OverlayBox(1, 1, 10, 10), generation)

        self.assertFalse(drawn)
        self.assertEqual(terminal.writes, [])

    def test_missing_rasterizer_binary_means_no_image(self) -> None:
        overlay = ImageOverlay(RecordingTerminal(), run_process=mock.Mock(side_effect=FileNotFoundError("chafa")))

        self.assertIsNone(overlay.rasterize(Path("cat.png"), OverlayBox(1, 1, 10, 10)))

    def test_render_command_reports_result(self) -> None:
        terminal = RecordingTerminal()
        overlay = ImageOverlay(terminal, run_process=mock.Mock(return_value=mock.Mock(stdout=b"IMG")))
        generation = overlay.invalidate()
        events: list[object] = []

        overlay.render_command(Path("cat.png"), OverlayBox(1, 1, 5, 5), 4, generation).execute(events.append)

        self.assertEqual(events, [ImageRendered(request_id=4, drawn=True)])

    def test_clear_command_writes_kitty_delete(self) -> None:
        terminal = RecordingTerminal()
        overlay = ImageOverlay(terminal)

        overlay.clear_command().execute(lambda _event: None)

        self.assertEqual(terminal.writes, [KITTY_CLEAR_IMAGES])

    def test_nothing_is_written_while_editor_owns_terminal(self) -> None:
        terminal = RecordingTerminal()
        overlay = ImageOverlay(terminal, run_process=mock.Mock(return_value=mock.Mock(stdout=b"IMG")))
        generation = overlay.invalidate()
        terminal.active = False
        events: list[object] = []

        overlay.clear_command().execute(events.append)
        drawn = overlay.draw(Path("cat.png"), OverlayBox(1, 1, 5, 5), generation)

        self.assertEqual(events, [])
        self.assertFalse(drawn)
        self.assertEqual(terminal.writes, [])


class TerminalTests(unittest.TestCase):
    def _controller(self) -> TerminalController:
        with mock.patch("yappad.runtime.terminal.termios.tcgetattr", return_value=[0]):
            return TerminalController(stdin_fd=0, stdout_fd=1)

    def test_enable_and_disable_tui_mode_use_alternate_screen_sequences(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("yappad.runtime.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "yappad.runtime.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("yappad.runtime.terminal.os.write", side_effect=lambda fd, data: len(data)) as write_mock, mock.patch(
            "yappad.runtime.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode()
            self.assertTrue(controller.active)
            controller.disable_tui_mode()
            self.assertFalse(controller.active)

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(bytes(write_mock.call_args_list[0].args[1]), b"\x1b[?1049h\x1b[?25l\x1b[?1000h\x1b[?1006h")
        self.assertEqual(bytes(write_mock.call_args_list[1].args[1]), b"\x1b[?1000l\x1b[?1006l\x1b[?25h\x1b[?1049l")
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)

    def test_partial_writes_are_completed(self) -> None:
        controller = self._controller()
        chunks: list[bytes] = []

        def short_write(fd: int, data) -> int:
            piece = bytes(data[:3])
            chunks.append(piece)
            return len(piece)

        with mock.patch("yappad.runtime.terminal.os.write", side_effect=short_write):
            controller.write(b"abcdefgh")

        self.assertEqual(b"".join(chunks), b"abcdefgh")

    def test_write_if_skips_unwanted_payload(self) -> None:
        controller = self._controller()

        with mock.patch("yappad.runtime.terminal.os.write") as write_mock:
            written = controller.write_if(b"late", lambda: False)

        self.assertFalse(written)
        write_mock.assert_not_called()

    def test_suspended_leaves_and_reenters_tui_mode(self) -> None:
        controller = self._controller()
        calls: list[str] = []

        with mock.patch.object(controller, "enable_tui_mode", side_effect=lambda: calls.append("enable")), mock.patch.object(
            controller, "disable_tui_mode", side_effect=lambda: calls.append("disable")
        ):
            with self.assertRaises(RuntimeError):
                with controller.suspended():
                    calls.append("child")
                    raise RuntimeError("editor crashed")

        self.assertEqual(calls, ["disable", "child", "enable"])

    def test_supports_kitty_graphics_checks_term_and_env(self) -> None:
        controller = self._controller()

        with mock.patch.dict("yappad.runtime.terminal.os.environ", {"TERM": "xterm-kitty"}, clear=True):
            self.assertTrue(controller.supports_kitty_graphics())
        with mock.patch.dict("yappad.runtime.terminal.os.environ", {"TERM_PROGRAM": "WezTerm"}, clear=True):
            self.assertTrue(controller.supports_kitty_graphics())
        with mock.patch.dict("yappad.runtime.terminal.os.environ", {"TERM": "xterm-256color"}, clear=True):
            self.assertFalse(controller.supports_kitty_graphics())


class LoopHelperTests(unittest.TestCase):
    def test_frame_bytes_positions_every_row(self) -> None:
        self.assertEqual(frame_bytes(["ab", "c"]), b"\x1b[1;1H\x1b[Kab\x1b[2;1H\x1b[Kc")

    def test_editor_effect_runs_inline_and_reports_finish(self) -> None:
        runner = CommandRunner()
        order: list[str] = []
        callbacks = RuntimeLoopCallbacks(
            launch_editor=lambda path: order.append(f"edit {path.name}") or "exit 1",
            clear_overlay=lambda: order.append("clear"),
        )

        dispatch_effects([OpenEditor(Path("n.md"))], runner, callbacks)

        self.assertEqual(order, ["clear", "edit n.md"])
        self.assertEqual(runner.drain_events(), [EditorFinished(Path("n.md"), "exit 1")])


if __name__ == "__main__":
    unittest.main()


class LoopTerminal(RecordingTerminal):
    def __init__(self, stdin_fd: int) -> None:
        super().__init__()
        self.stdin_fd = stdin_fd
        self.modes: list[str] = []

    @contextlib.contextmanager
    def raw_mode(self):
        self.modes.append("enter")
        try:
            yield
        finally:
            self.modes.append("exit")


class RunMainLoopTests(unittest.TestCase):
    def _controller(self, root: Path, terminal: LoopTerminal) -> Controller:
        ensure_vault_layout(root)
        (root / "daily" / "a.md").write_text("hello", encoding="utf-8")
        overlay = ImageOverlay(terminal)
        return Controller(VaultIndex(root), NoteStore(root), PreviewLoader(overlay, no_color=True), width=100, height=30)

    def test_renders_frame_and_quits_on_q(self) -> None:
        read_fd, write_fd = os.pipe()
        clears: list[str] = []
        try:
            os.write(write_fd, b"q")
            terminal = LoopTerminal(read_fd)
            with tempfile.TemporaryDirectory() as tmp:
                controller = self._controller(Path(tmp), terminal)
                callbacks = RuntimeLoopCallbacks(
                    launch_editor=lambda path: None,
                    clear_overlay=lambda: clears.append("clear"),
                    get_terminal_size=lambda fallback: os.terminal_size((100, 30)),
                )
                run_main_loop(controller, CommandRunner(), terminal, callbacks, RuntimeLoopTiming(key_timeout_ms=10))
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertTrue(controller.quit_requested)
        self.assertEqual(terminal.modes, ["enter", "exit"])
        self.assertEqual(clears, ["clear"])
        self.assertTrue(any(b"YapPad" in data for data in list(terminal.writes)))

    def test_overlay_is_cleared_when_loop_fails(self) -> None:
        read_fd, write_fd = os.pipe()
        clears: list[str] = []

        def broken_size(_fallback):
            raise RuntimeError("no tty")

        try:
            terminal = LoopTerminal(read_fd)
            with tempfile.TemporaryDirectory() as tmp:
                controller = self._controller(Path(tmp), terminal)
                callbacks = RuntimeLoopCallbacks(
                    launch_editor=lambda path: None,
                    clear_overlay=lambda: clears.append("clear"),
                    get_terminal_size=broken_size,
                )
                with self.assertRaises(RuntimeError):
                    run_main_loop(controller, CommandRunner(), terminal, callbacks)
        finally:
            os.close(read_fd)
            os.close(write_fd)

        self.assertEqual(terminal.modes, ["enter", "exit"])
        self.assertEqual(clears, ["clear"])
