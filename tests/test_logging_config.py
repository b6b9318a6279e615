# tests/test_logging_config.py

"""Tests for run-scoped logging."""

import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from showroom.config.logging_config import setup_logging
from showroom.config.settings import Settings


class TestSetupLogging(unittest.TestCase):
    """Handlers attached to the ``showroom`` logger."""

    def setUp(self) -> None:
        self.logger = logging.getLogger("showroom")
        self._saved = list(self.logger.handlers)
        self.logger.handlers.clear()
        self._tmp = tempfile.TemporaryDirectory()
        self.logs_dir = Path(self._tmp.name) / "logs"

    def tearDown(self) -> None:
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers[:] = self._saved
        self._tmp.cleanup()

    def _console_handlers(self) -> list[logging.Handler]:
        return [
            h
            for h in self.logger.handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]

    def test_run_file_created_in_logs_dir(self) -> None:
        """The run log is created with a timestamped name."""
        log_path = setup_logging(self.logs_dir)
        self.assertTrue(log_path.exists())
        self.assertEqual(log_path.parent, self.logs_dir)
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")

    def test_file_handler_captures_debug(self) -> None:
        """Child logger DEBUG records reach the run file."""
        log_path = setup_logging(self.logs_dir)
        logging.getLogger("showroom.cache").debug("evicted 3 entries")
        for handler in self.logger.handlers:
            handler.flush()
        self.assertIn(
            "evicted 3 entries", log_path.read_text(encoding="utf-8")
        )

    def test_console_level_defaults_to_warning(self) -> None:
        """The console handler logs WARNING and above by default."""
        with patch.object(Settings, "CONSOLE_LOG_LEVEL", "WARNING"):
            setup_logging(self.logs_dir)
        (console,) = self._console_handlers()
        self.assertEqual(console.level, logging.WARNING)

    def test_console_level_follows_settings(self) -> None:
        """The console handler follows CONSOLE_LOG_LEVEL."""
        with patch.object(Settings, "CONSOLE_LOG_LEVEL", "INFO"):
            setup_logging(self.logs_dir)
        (console,) = self._console_handlers()
        self.assertEqual(console.level, logging.INFO)

    def test_second_call_reuses_run_file(self) -> None:
        """A second call adds no handlers and returns the same file."""
        first = setup_logging(self.logs_dir)
        handlers = len(self.logger.handlers)
        second = setup_logging(self.logs_dir / "elsewhere")
        self.assertEqual(second, first)
        self.assertEqual(len(self.logger.handlers), handlers)
        self.assertFalse((self.logs_dir / "elsewhere").exists())


if __name__ == "__main__":
    unittest.main()
