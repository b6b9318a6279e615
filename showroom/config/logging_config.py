# showroom/config/logging_config.py

"""Run-scoped logging for showroom.

A launch writes everything at DEBUG to ``logs/run_<timestamp>.log`` and
echoes records at ``Settings.CONSOLE_LOG_LEVEL`` and above to stderr. The
TUI owns the terminal while it runs, so the console handler stays quiet
by default.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from showroom.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handler(
    handler: logging.Handler, level: int | str, fmt: str
) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
    return handler


def _active_log_file(logger: logging.Logger) -> Path | None:
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach the run's file and console handlers to ``showroom``.

    Calling it again is a no-op that returns the file already in use.

    Args:
        logs_dir: Where to create the run log. Defaults to
            ``Settings.LOGS_DIR``.

    Returns:
        Path of this run's log file.
    """
    project_logger = logging.getLogger("showroom")
    project_logger.setLevel(logging.DEBUG)

    existing = _active_log_file(project_logger)
    if existing is not None:
        return existing

    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    project_logger.addHandler(
        _handler(
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.DEBUG,
            _FILE_FORMAT,
        )
    )
    project_logger.addHandler(
        _handler(
            logging.StreamHandler(sys.stderr),
            Settings.CONSOLE_LOG_LEVEL,
            _CONSOLE_FORMAT,
        )
    )

    project_logger.debug("Run log opened at %s", log_file)
    return log_file
