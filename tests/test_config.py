from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from yappad.modes import SortMode
from yappad.runtime import config


class ConfigBehaviorTests(unittest.TestCase):
    def test_sort_and_preview_preferences_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("yappad.runtime.config.CONFIG_PATH", config_path):
                self.assertIs(config.load_sort_mode(), SortMode.MODIFIED_DESC)
                self.assertTrue(config.load_show_preview())

                config.save_sort_mode(SortMode.CREATED_ASC)
                config.save_show_preview(False)

                self.assertEqual(config.load_config(), {"sort_mode": "created-asc", "show_preview": False})
                self.assertIs(config.load_sort_mode(), SortMode.CREATED_ASC)
                self.assertFalse(config.load_show_preview())

    def test_malformed_config_falls_back_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text("[1, 2", encoding="utf-8")
            with mock.patch("yappad.runtime.config.CONFIG_PATH", config_path):
                with self.assertLogs("yappad.runtime.config", level="WARNING"):
                    self.assertEqual(config.load_config(), {})

                config_path.write_text('["not", "an", "object"]', encoding="utf-8")
                self.assertEqual(config.load_config(), {})

    def test_typed_values_are_validated(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(
                '{"vault_dir": "~/notes", "style": "  ", "editor": "vim -u NONE",'
                ' "image_rasterizer": ["kitten", "icat"], "sort_mode": "bogus", "show_preview": "no"}',
                encoding="utf-8",
            )
            with mock.patch("yappad.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_vault_dir(), Path("~/notes").expanduser())
                self.assertIsNone(config.load_style())
                self.assertEqual(config.load_editor(), "vim -u NONE")
                self.assertEqual(config.load_rasterizer(), ["kitten", "icat"])
                self.assertIs(config.load_sort_mode(), SortMode.MODIFIED_DESC)
                self.assertTrue(config.load_show_preview())

    def test_default_vault_is_dot_yappad_in_home(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("yappad.runtime.config.CONFIG_PATH", Path(tmp) / "missing.json"):
                self.assertEqual(config.load_vault_dir(), Path.home() / ".YapPad")

    def test_rasterizer_rejects_non_string_lists(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text('{"image_rasterizer": ["chafa", 3]}', encoding="utf-8")
            with mock.patch("yappad.runtime.config.CONFIG_PATH", config_path):
                self.assertIsNone(config.load_rasterizer())


if __name__ == "__main__":
    unittest.main()
