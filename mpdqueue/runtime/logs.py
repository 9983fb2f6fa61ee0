"""File logging for the interactive session.

The terminal belongs to the UI while it runs, so log records only ever go to
a file under the user's log directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FILENAME = f"{APP_NAME}.log"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_log_level(value: str) -> int:
    """Map a level name such as ``"debug"`` to its ``logging`` constant."""
    level = logging.getLevelName(value.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level: {value!r}")
    return level


def configure_logging(path: Path | None = None, level: int = logging.INFO) -> Path | None:
    """Attach a file handler to the root logger and return the log path.

    Returns ``None`` (and leaves logging unconfigured) when the log directory
    cannot be created; a missing log file must never stop the client.
    """
    log_path = path if path is not None else DEFAULT_LOG_PATH
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    root.setLevel(level)
    return log_path
