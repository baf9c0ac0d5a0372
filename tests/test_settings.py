"""
Unit tests for settings loading.
"""
import tempfile
import unittest
from pathlib import Path

import orjson

from freecolo.config.settings import DEFAULT_SESSION_DIR, Settings, load_settings


class TestSettings(unittest.TestCase):
    """Test cases for defaults, file values and environment overrides."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self.temp_dir.name) / "config.local.json"

    def tearDown(self):
        """Clean up test fixtures."""
        self.temp_dir.cleanup()

    def test_defaults_when_file_missing(self):
        settings = load_settings(self.path, environ={})
        self.assertEqual(settings, Settings())
        self.assertEqual(settings.session_dir, DEFAULT_SESSION_DIR)
        self.assertIsNone(settings.catalog_path)

    def test_values_from_file(self):
        self.path.write_bytes(orjson.dumps({
            "catalog_path": "my/catalog.json",
            "session_dir": "saves",
            "log_level": "debug",
            "min_players_to_start": 3,
            "unknown": True,
        }))
        settings = load_settings(self.path, environ={})

        self.assertEqual(settings.catalog_path, Path("my/catalog.json"))
        self.assertEqual(settings.session_dir, Path("saves"))
        self.assertEqual(settings.log_level, "DEBUG")
        self.assertEqual(settings.min_players_to_start, 3)

    def test_environment_overrides_file(self):
        self.path.write_bytes(orjson.dumps({"session_dir": "saves", "min_players_to_start": 3}))
        settings = load_settings(
            self.path,
            environ={"FREECOLO_SESSION_DIR": "/tmp/elsewhere", "FREECOLO_MIN_PLAYERS": "4"},
        )
        self.assertEqual(settings.session_dir, Path("/tmp/elsewhere"))
        self.assertEqual(settings.min_players_to_start, 4)

    def test_bad_min_players_falls_back(self):
        settings = load_settings(self.path, environ={"FREECOLO_MIN_PLAYERS": "many"})
        self.assertEqual(settings.min_players_to_start, 2)


if __name__ == '__main__':
    unittest.main()
