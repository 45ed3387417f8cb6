"""Tests for the configuration module."""

import os
import unittest

from daily_error_log.config import Config, _parse_bool, load_config

ENV_KEYS = (
    "ERRLOG_LOG_DIR",
    "ERRLOG_CONTENT_DIR",
    "ERRLOG_CANONICAL_LOCALE",
    "ERRLOG_LANGUAGES_DIR",
    "ERRLOG_PACKAGE_LANGUAGES_DIR",
    "ERRLOG_CAPTURE_WARNINGS",
    "ERRLOG_CAPTURE_EXCEPTIONS",
    "ERRLOG_CAPTURE_SHUTDOWN",
    "ERRLOG_CAPTURE_ALL",
    "ERRLOG_MAX_DEPTH",
)


class TestParseBool(unittest.TestCase):
    def test_true_values(self):
        for val in ("true", "True", "TRUE", "1", "yes", "YES", " true "):
            self.assertTrue(_parse_bool(val), f"Expected True for {val!r}")

    def test_false_values(self):
        for val in ("false", "False", "0", "no", "NO", "", "anything"):
            self.assertFalse(_parse_bool(val), f"Expected False for {val!r}")


class TestConfigDefaults(unittest.TestCase):
    def test_default_values(self):
        cfg = Config()
        self.assertIsNone(cfg.log_dir)
        self.assertIsNone(cfg.content_dir)
        self.assertEqual(cfg.canonical_locale, "en_US")
        self.assertTrue(cfg.capture_warnings)
        self.assertTrue(cfg.capture_exceptions)
        self.assertTrue(cfg.capture_shutdown)
        self.assertTrue(cfg.capture_all)
        self.assertEqual(cfg.max_depth, 1)

    def test_frozen(self):
        cfg = Config()
        with self.assertRaises(AttributeError):
            cfg.log_dir = "/tmp"


class TestLoadConfig(unittest.TestCase):
    def setUp(self):
        self._orig_env = os.environ.copy()
        for key in ENV_KEYS:
            os.environ.pop(key, None)

    def tearDown(self):
        os.environ.clear()
        os.environ.update(self._orig_env)

    def test_defaults_without_env(self):
        self.assertEqual(load_config(), Config())

    def test_env_var_overrides(self):
        os.environ["ERRLOG_LOG_DIR"] = "/var/log/app"
        os.environ["ERRLOG_CONTENT_DIR"] = "/srv/content"
        os.environ["ERRLOG_CANONICAL_LOCALE"] = "en_GB"
        os.environ["ERRLOG_LANGUAGES_DIR"] = "/srv/content/languages"
        os.environ["ERRLOG_PACKAGE_LANGUAGES_DIR"] = "/opt/app/languages"
        os.environ["ERRLOG_CAPTURE_WARNINGS"] = "false"
        os.environ["ERRLOG_CAPTURE_EXCEPTIONS"] = "no"
        os.environ["ERRLOG_CAPTURE_SHUTDOWN"] = "0"
        os.environ["ERRLOG_CAPTURE_ALL"] = "false"
        os.environ["ERRLOG_MAX_DEPTH"] = "3"
        cfg = load_config()
        self.assertEqual(cfg.log_dir, "/var/log/app")
        self.assertEqual(cfg.content_dir, "/srv/content")
        self.assertEqual(cfg.canonical_locale, "en_GB")
        self.assertEqual(cfg.languages_dir, "/srv/content/languages")
        self.assertEqual(cfg.package_languages_dir, "/opt/app/languages")
        self.assertFalse(cfg.capture_warnings)
        self.assertFalse(cfg.capture_exceptions)
        self.assertFalse(cfg.capture_shutdown)
        self.assertFalse(cfg.capture_all)
        self.assertEqual(cfg.max_depth, 3)

    def test_blank_paths_are_unset(self):
        os.environ["ERRLOG_LOG_DIR"] = "  "
        self.assertIsNone(load_config().log_dir)

    def test_invalid_max_depth_falls_back(self):
        for val in ("two", "", "1.5", "0", "-3"):
            os.environ["ERRLOG_MAX_DEPTH"] = val
            self.assertEqual(load_config().max_depth, 1, f"Expected 1 for {val!r}")


if __name__ == "__main__":
    unittest.main()
