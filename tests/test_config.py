"""Persistent preference loading tests.

Every test points ``CONFIG_PATH`` at a temporary file so the user's real
config is never read.
"""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from textselect import config


class ConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "config.json"
        patcher = mock.patch("textselect.config.CONFIG_PATH", self.path)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def test_missing_file_gives_defaults(self) -> None:
        self.assertEqual(config.load_config(), {})
        self.assertEqual(config.load_preferences(), config.Preferences())

    def test_valid_preferences_are_loaded(self) -> None:
        self.path.write_text(
            json.dumps({"keep_empty": True, "null_delimited": True, "theme": " ocean "}),
            encoding="utf-8",
        )
        self.assertEqual(
            config.load_preferences(),
            config.Preferences(keep_empty=True, null_delimited=True, theme="ocean"),
        )

    def test_non_boolean_flags_are_ignored(self) -> None:
        self.path.write_text(json.dumps({"keep_empty": "yes", "null_delimited": 1}), encoding="utf-8")
        preferences = config.load_preferences()
        self.assertFalse(preferences.keep_empty)
        self.assertFalse(preferences.null_delimited)

    def test_malformed_json_falls_back_with_warning(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        with self.assertLogs("textselect.config", level="WARNING"):
            self.assertEqual(config.load_config(), {})

    def test_non_object_json_is_ignored(self) -> None:
        self.path.write_text("[1, 2, 3]", encoding="utf-8")
        self.assertEqual(config.load_config(), {})

    def test_blank_or_non_string_theme_is_unset(self) -> None:
        self.assertIsNone(config.load_theme_name({"theme": "   "}))
        self.assertIsNone(config.load_theme_name({"theme": 7}))
        self.assertEqual(config.load_theme_name({"theme": "plain"}), "plain")


if __name__ == "__main__":
    unittest.main()
