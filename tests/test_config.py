"""Tests for preference loading and precedence.

Validates that malformed config data falls back to defaults and that
explicit options beat the environment, which beats the config file.
"""

from __future__ import annotations

import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from mpdqueue.input.keymap import DEFAULT_KEYMAP
from mpdqueue.runtime import config, logs


class LoadConfigTests(unittest.TestCase):
    def test_missing_file_is_empty_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch("mpdqueue.runtime.config.CONFIG_PATH", Path(tmp) / "config.json"):
                self.assertEqual(config.load_config(), {})

    def test_reads_json_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            config_path.write_text(json.dumps({"host": "jukebox", "port": 6601}), encoding="utf-8")
            with mock.patch("mpdqueue.runtime.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {"host": "jukebox", "port": 6601})

    def test_malformed_or_non_object_json_is_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            for payload in ("{not json", "[1, 2]", '"text"'):
                config_path.write_text(payload, encoding="utf-8")
                self.assertEqual(config.load_config(config_path), {}, payload)


class ResolveSettingsTests(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = config.resolve_settings({}, environ={})
        self.assertEqual(settings.host, "127.0.0.1")
        self.assertEqual(settings.port, 6600)
        self.assertEqual(settings.tick_ms, config.DEFAULT_TICK_MS)
        self.assertEqual(settings.tick_seconds, 0.5)
        self.assertIs(settings.keymap, DEFAULT_KEYMAP)
        self.assertIsNone(settings.password)

    def test_precedence(self) -> None:
        data = {"host": "from-config", "port": 7000, "tick_ms": 250}
        environ = {"MPD_HOST": "from-env", "MPD_PORT": "7001"}

        from_config = config.resolve_settings(data, environ={})
        self.assertEqual((from_config.host, from_config.port, from_config.tick_ms), ("from-config", 7000, 250))

        from_env = config.resolve_settings(data, environ=environ)
        self.assertEqual((from_env.host, from_env.port), ("from-env", 7001))

        explicit = config.resolve_settings(data, environ=environ, host="cli", port=7002, tick_ms=100)
        self.assertEqual((explicit.host, explicit.port, explicit.tick_ms), ("cli", 7002, 100))

    def test_password_in_mpd_host(self) -> None:
        settings = config.resolve_settings({}, environ={"MPD_HOST": "hunter2@jukebox"})
        self.assertEqual(settings.host, "jukebox")
        self.assertEqual(settings.password, "hunter2")

        explicit = config.resolve_settings({}, environ={"MPD_HOST": "hunter2@jukebox"}, password="cli")
        self.assertEqual(explicit.password, "cli")

    def test_invalid_values_fall_through(self) -> None:
        data = {"host": "  ", "port": "not-a-port", "tick_ms": 10}
        settings = config.resolve_settings(data, environ={"MPD_PORT": "99999"})
        self.assertEqual(settings.host, "127.0.0.1")
        self.assertEqual(settings.port, 6600)
        self.assertEqual(settings.tick_ms, config.DEFAULT_TICK_MS)

    def test_boolean_port_is_rejected(self) -> None:
        self.assertEqual(config.resolve_settings({"port": True}, environ={}).port, 6600)

    def test_key_overrides(self) -> None:
        settings = config.resolve_settings({"keys": {"quit": ["x"]}}, environ={})
        self.assertEqual(settings.keymap.quit, ("x",))

        ignored = config.resolve_settings({"keys": ["quit"]}, environ={})
        self.assertIs(ignored.keymap, DEFAULT_KEYMAP)


class LoggingTests(unittest.TestCase):
    def test_parse_log_level(self) -> None:
        self.assertEqual(logs.parse_log_level("debug"), logging.DEBUG)
        self.assertEqual(logs.parse_log_level(" WARNING "), logging.WARNING)
        with self.assertRaises(ValueError):
            logs.parse_log_level("chatty")

    def test_configure_logging_writes_to_file(self) -> None:
        root = logging.getLogger()
        before = list(root.handlers)
        previous_level = root.level
        with tempfile.TemporaryDirectory() as tmp:
            log_path = Path(tmp) / "nested" / "mpdqueue.log"
            try:
                self.assertEqual(logs.configure_logging(log_path, logging.DEBUG), log_path)
                logging.getLogger("mpdqueue.test").debug("hello from the test")
            finally:
                for handler in root.handlers:
                    if handler not in before:
                        root.removeHandler(handler)
                        handler.close()
                root.setLevel(previous_level)
            self.assertIn("hello from the test", log_path.read_text(encoding="utf-8"))


if __name__ == "__main__":
    unittest.main()
