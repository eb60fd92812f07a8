"""Logger bootstrap for the ``declutter`` namespace.

Where: platform/logging/config.py
What: Attach the Rich console handler and the rotating log file to one named logger.
Why: Every layer imports the same configured ``logger``; the CLI reconfigures it
once it knows the verbosity and the configured log file.
"""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Final

from rich.console import Console

from declutter.config.paths import default_log_file

from .handlers import SessionEventRichHandler


LOGGER_NAME: Final[str] = "declutter"
DEFAULT_LOG_FILE: Final[Path] = default_log_file()

_FILE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_MAX_LOG_BYTES: Final[int] = 5 * 1024 * 1024
_LOG_BACKUPS: Final[int] = 3


def _console_handler(level: int) -> logging.Handler:
    handler = SessionEventRichHandler(console=Console(stderr=True, soft_wrap=True))
    handler.setLevel(level)
    return handler


def _file_handler(log_file: Path, level: int) -> logging.Handler:
    target = log_file.expanduser().resolve()
    target.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.handlers.RotatingFileHandler(
        target,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_LOG_BACKUPS,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT))
    return handler


def setup_logger(
    log_file: Path | None = None,
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> logging.Logger:
    """(Re)configure the application logger.

    Existing handlers are closed first, so calling this again swaps the
    destination instead of duplicating output.
    """

    configured = logging.getLogger(LOGGER_NAME)
    configured.setLevel(logging.DEBUG)
    configured.propagate = False

    for handler in list(configured.handlers):
        configured.removeHandler(handler)
        handler.close()

    configured.addHandler(_console_handler(console_level))
    if log_file is not None:
        configured.addHandler(_file_handler(Path(log_file), file_level))
    return configured


logger: Final[logging.Logger] = setup_logger(log_file=DEFAULT_LOG_FILE)


__all__ = ["DEFAULT_LOG_FILE", "LOGGER_NAME", "logger", "setup_logger"]
