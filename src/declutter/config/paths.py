"""Where Declutter keeps its own files, and which folder it reviews by default.

Everything lives beside the checkout so a copied repository carries its
settings and logs with it:

- ``<repo_root>/config/config.toml`` (``DECLUTTER_CONFIG`` overrides it)
- ``<repo_root>/logs/declutter.log``
- ``~/Desktop`` as the review location when neither CLI nor config names one
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Final

CONFIG_ENV_VAR: Final[str] = "DECLUTTER_CONFIG"

_ROOT_MARKERS: Final[tuple[str, ...]] = ("pyproject.toml", ".git")


def resolve_overridable_path(
    default: Path,
    *,
    env_var: str,
    env: Mapping[str, str] | None = None,
    explicit: Path | str | None = None,
) -> Path:
    """Pick ``explicit``, then a non-blank ``env_var`` value, then ``default``.

    The winner is expanded and resolved.
    """

    if explicit is None:
        from_env = (env if env is not None else os.environ).get(env_var, "").strip()
        chosen = Path(from_env) if from_env else default
    else:
        chosen = Path(explicit)
    return chosen.expanduser().resolve()


def _detect_repo_root(start: Path | None = None) -> Path:
    """First ancestor of ``start`` (default: this module) holding a root marker.

    Falls back to the working directory for installs outside a checkout.
    """
    origin = (start or Path(__file__).resolve()).parent
    for candidate in (origin, *origin.parents):
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate
    return Path.cwd()


def default_config_path() -> Path:
    root = _detect_repo_root()
    return resolve_overridable_path(root / "config" / "config.toml", env_var=CONFIG_ENV_VAR)


def default_log_dir() -> Path:
    return (_detect_repo_root() / "logs").resolve()


def default_log_file() -> Path:
    return default_log_dir() / "declutter.log"


def default_review_location() -> Path:
    """The desktop, reviewed when the user names no folder."""

    return (Path.home() / "Desktop").resolve()


__all__ = [
    "CONFIG_ENV_VAR",
    "default_config_path",
    "default_log_dir",
    "default_log_file",
    "default_review_location",
    "resolve_overridable_path",
]
