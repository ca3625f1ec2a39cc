"""Tests for timer settings loading.

Covers: sct.core.config
"""

import json
import shutil
import tempfile
import unittest
from pathlib import Path


class TestSettings(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

        # Monkey-patch the settings path to use temp dir
        from sct.core import config
        self._orig_settings_path = config.SETTINGS_PATH
        config.SETTINGS_PATH = Path(self.tmpdir) / "settings.json"

    def tearDown(self):
        from sct.core import config
        config.SETTINGS_PATH = self._orig_settings_path
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def _write(self, data):
        from sct.core import config
        with open(config.SETTINGS_PATH, "w", encoding="utf-8") as f:
            f.write(data if isinstance(data, str) else json.dumps(data))

    def test_missing_file_gives_defaults(self):
        from sct.core.config import Settings, load_settings
        self.assertEqual(load_settings(), Settings())
        self.assertEqual(Settings().inspection_seconds, 15.0)
        self.assertEqual(Settings().dnf_after_seconds, 17.0)
        self.assertEqual(Settings().recent_count, 5)

    def test_partial_file_fills_defaults(self):
        from sct.core.config import load_settings
        self._write({"inspection_seconds": 8, "recent_count": 10})
        settings = load_settings()
        self.assertEqual(settings.inspection_seconds, 8)
        self.assertEqual(settings.recent_count, 10)
        self.assertEqual(settings.dnf_after_seconds, 17.0)
        self.assertEqual(settings.tick_interval_ms, 30)

    def test_wrong_types_are_defaulted(self):
        from sct.core.config import load_settings
        self._write({"tick_interval_ms": "fast", "recent_count": True, "plus_two_seconds": -1})
        settings = load_settings()
        self.assertEqual(settings.tick_interval_ms, 30)
        self.assertEqual(settings.recent_count, 5)
        self.assertEqual(settings.plus_two_seconds, 2.0)

    def test_unordered_limits_are_defaulted(self):
        from sct.core.config import load_settings
        self._write({"inspection_seconds": 20, "dnf_after_seconds": 10})
        settings = load_settings()
        self.assertEqual(settings.inspection_seconds, 15.0)
        self.assertEqual(settings.dnf_after_seconds, 17.0)

    def test_malformed_file_gives_defaults(self):
        from sct.core.config import Settings, load_settings
        self._write("{nope")
        self.assertEqual(load_settings(), Settings())
        self._write("[1, 2]")
        self.assertEqual(load_settings(), Settings())

    def test_settings_in_effect_are_logged(self):
        from sct.core.config import load_settings
        self._write({"recent_count": 8})
        with self.assertLogs("solvetimer", level="INFO") as logs:
            settings = load_settings()
        self.assertEqual(settings.as_dict()["recent_count"], 8)
        self.assertTrue(any("'recent_count': 8" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
