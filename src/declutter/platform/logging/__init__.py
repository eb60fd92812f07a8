"""The ``declutter`` logger and its Rich handler.

Import ``logger`` from here in every layer; the CLI calls ``setup_logger``
again once verbosity and the configured log file are known.
"""

from __future__ import annotations

from .config import DEFAULT_LOG_FILE, LOGGER_NAME, logger, setup_logger
from .handlers import SessionEventRichHandler

__all__ = [
    "DEFAULT_LOG_FILE",
    "LOGGER_NAME",
    "SessionEventRichHandler",
    "logger",
    "setup_logger",
]
