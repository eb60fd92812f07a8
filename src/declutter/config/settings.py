"""Where: src/declutter/config/settings.py
What: Derived runtime settings sourced from persisted configuration.
Why: Expose validated constants to feature layers without file I/O.
Assumptions: - Config defaults remain compatible with current runtime expectations.
Trade-offs: - Validation is limited to simple boundary checks for speed.
"""

from __future__ import annotations

from pathlib import Path

from declutter.config.config import (
    COMPARISON_WINDOW_DEFAULT,
    DEBOUNCE_MS_DEFAULT,
    LARGE_FILE_MB_DEFAULT,
    OLD_FILE_DAYS_DEFAULT,
    SAME_SESSION_MINUTES_DEFAULT,
    SIMILAR_NAMES_MIN_GROUP_DEFAULT,
    THUMBNAIL_WORKERS_DEFAULT,
    UNDO_LIMIT_DEFAULT,
    config as app_config,
)


def _positive(name: str, default: int) -> int:
    value = getattr(app_config, name, default)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return default
    return value


# Decision handling -----------------------------------------------------------

IMMEDIATE_BINNING: bool = bool(getattr(app_config, "immediate_binning", True))

CLOUD_DESTINATION: Path | None = getattr(app_config, "cloud_destination", None)

# Name of the folder created inside a cloud destination to hold relocated files.
CLOUD_APP_FOLDER_NAME: str = "DesktopDeclutter"


# Suggestion engine -----------------------------------------------------------

# Delay before comparison work starts so fast navigation costs nothing.
SUGGESTION_DEBOUNCE_SECONDS: float = _positive("debounce_ms", DEBOUNCE_MS_DEFAULT) / 1000.0

# Only the first N working-list files are compared against the focused file.
COMPARISON_WINDOW: int = _positive("comparison_window", COMPARISON_WINDOW_DEFAULT)

SAME_SESSION_WINDOW_SECONDS: float = (
    _positive("same_session_minutes", SAME_SESSION_MINUTES_DEFAULT) * 60.0
)

SIMILAR_NAMES_MIN_GROUP: int = _positive(
    "similar_names_min_group", SIMILAR_NAMES_MIN_GROUP_DEFAULT
)

OLD_FILE_DAYS: int = _positive("old_file_days", OLD_FILE_DAYS_DEFAULT)

LARGE_FILE_BYTES: int = _positive("large_file_mb", LARGE_FILE_MB_DEFAULT) * 1024 * 1024

# Bytes read from the head of a file to build its content fingerprint.
FINGERPRINT_SAMPLE_BYTES: int = 1024 * 1024
FINGERPRINT_CHUNK_SIZE: int = 64 * 1024


# Session limits --------------------------------------------------------------

UNDO_LIMIT: int = _positive("undo_limit", UNDO_LIMIT_DEFAULT)

ACTIVITY_LOG_LIMIT: int = 300

THUMBNAIL_WORKERS: int = _positive("thumbnail_workers", THUMBNAIL_WORKERS_DEFAULT)

# Files prefetched for previews starting at the cursor.
THUMBNAIL_LOOKAHEAD: int = 2

THUMBNAIL_SIZE: tuple[int, int] = (300, 300)


__all__ = [
    "IMMEDIATE_BINNING",
    "CLOUD_DESTINATION",
    "CLOUD_APP_FOLDER_NAME",
    "SUGGESTION_DEBOUNCE_SECONDS",
    "COMPARISON_WINDOW",
    "SAME_SESSION_WINDOW_SECONDS",
    "SIMILAR_NAMES_MIN_GROUP",
    "OLD_FILE_DAYS",
    "LARGE_FILE_BYTES",
    "FINGERPRINT_SAMPLE_BYTES",
    "FINGERPRINT_CHUNK_SIZE",
    "UNDO_LIMIT",
    "ACTIVITY_LOG_LIMIT",
    "THUMBNAIL_WORKERS",
    "THUMBNAIL_LOOKAHEAD",
    "THUMBNAIL_SIZE",
]
