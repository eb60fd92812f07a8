"""Summary: Human-readable sizes shared by the CLI and log output."""

from __future__ import annotations

from typing import Final

_UNITS: Final[tuple[str, ...]] = ("KB", "MB", "GB", "TB")


def format_bytes(size: int) -> str:
    """Render ``size`` with decimal units the way file managers do (``1.5 MB``)."""

    if size < 1000:
        return f"{size} bytes"
    value = float(size)
    for unit in _UNITS:
        value /= 1000
        if value < 1000 or unit == _UNITS[-1]:
            return f"{value:.1f} {unit}"
    raise AssertionError("unreachable")


__all__ = ["format_bytes"]
