"""CLI argument handling and editor resolution."""

from __future__ import annotations

import io
import logging
import tempfile
import unittest
from contextlib import redirect_stderr
from pathlib import Path
from unittest import mock

from yappad import cli
from yappad.editor import DEFAULT_EDITOR, launch_editor, resolve_editor_command
from yappad.modes import BucketMode


class CliTests(unittest.TestCase):
    def test_positional_vault_mode_and_style_are_passed_through(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("yappad.cli.run_app") as run_app_mock:
                cli.main([tmp, "--mode", "Weekly", "--style", "friendly", "--no-color"])

        run_app_mock.assert_called_once_with(Path(tmp).absolute(), BucketMode.WEEKLY, "friendly", True)

    def test_defaults_come_from_config(self) -> None:
        with mock.patch("yappad.cli.run_app") as run_app_mock, mock.patch(
            "yappad.cli.load_vault_dir", return_value=Path("/tmp/vault")
        ), mock.patch("yappad.cli.load_style", return_value=None):
            cli.main([])

        run_app_mock.assert_called_once_with(Path("/tmp/vault"), BucketMode.ALL, "monokai", False)

    def test_numeric_mode_is_accepted(self) -> None:
        with mock.patch("yappad.cli.run_app") as run_app_mock:
            cli.main(["/tmp/vault", "--mode", "3"])

        self.assertIs(run_app_mock.call_args.args[1], BucketMode.MONTHLY)

    def test_unknown_mode_is_fatal(self) -> None:
        with mock.patch("yappad.cli.run_app") as run_app_mock:
            with self.assertRaises(SystemExit) as ctx:
                cli.main(["/tmp/vault", "--mode", "hourly"])

        self.assertIn("unknown mode: hourly", str(ctx.exception.code))
        run_app_mock.assert_not_called()

    def test_runtime_failure_prints_error_and_exits_1(self) -> None:
        stderr = io.StringIO()
        with mock.patch("yappad.cli.run_app", side_effect=RuntimeError("terminal went away")):
            with redirect_stderr(stderr), self.assertRaises(SystemExit) as ctx:
                cli.main(["/tmp/vault"])

        self.assertEqual(ctx.exception.code, 1)
        self.assertIn("error: terminal went away", stderr.getvalue())

    def test_log_file_attaches_debug_handler(self) -> None:
        package_logger = logging.getLogger("yappad")
        before = list(package_logger.handlers)
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "yappad.log"
            try:
                with mock.patch("yappad.cli.run_app"):
                    cli.main(["/tmp/vault", "--log-file", str(log_path)])
                added = [handler for handler in package_logger.handlers if handler not in before]
                self.assertEqual(len(added), 1)
                self.assertIsInstance(added[0], logging.FileHandler)
                self.assertEqual(package_logger.level, logging.DEBUG)
            finally:
                for handler in list(package_logger.handlers):
                    if handler not in before:
                        package_logger.removeHandler(handler)
                        handler.close()
                package_logger.setLevel(logging.NOTSET)


class EditorTests(unittest.TestCase):
    def test_editor_env_is_shell_split(self) -> None:
        with mock.patch.dict("yappad.editor.os.environ", {"EDITOR": "code --wait"}, clear=True):
            self.assertEqual(resolve_editor_command("vim"), ["code", "--wait"])

    def test_configured_editor_then_nvim_fallback(self) -> None:
        with mock.patch.dict("yappad.editor.os.environ", {}, clear=True):
            self.assertEqual(resolve_editor_command("hx"), ["hx"])
            self.assertEqual(resolve_editor_command(None), [DEFAULT_EDITOR])

    def test_launch_editor_suspends_terminal_and_reports_failures(self) -> None:
        terminal = mock.MagicMock()
        run_process = mock.Mock(return_value=mock.Mock(returncode=0))

        self.assertIsNone(launch_editor(["nvim"], Path("/v/a.md"), terminal, run_process=run_process))
        run_process.assert_called_once_with(["nvim", "/v/a.md"], check=False)
        terminal.suspended.assert_called_once()

        run_process.return_value = mock.Mock(returncode=2)
        self.assertEqual(
            launch_editor(["nvim"], Path("/v/a.md"), terminal, run_process=run_process),
            "editor exited with status 2",
        )

        run_process.side_effect = FileNotFoundError("nvim")
        self.assertIn("failed to launch editor", launch_editor(["nvim"], Path("/v/a.md"), terminal, run_process=run_process))


if __name__ == "__main__":
    unittest.main()
