"""Filesystem helpers shared by the config layer and the relocation adapter."""

from __future__ import annotations

import itertools
import shutil
from pathlib import Path


def ensure_directory(directory: Path) -> Path:
    """Create ``directory`` (and parents) if missing; return it.

    Raises:
        NotADirectoryError: Something other than a folder already sits there.
    """

    if directory.exists() and not directory.is_dir():
        raise NotADirectoryError(f"Path exists but is not a directory: {directory}")
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def ensure_parent_directory(path: Path) -> Path:
    return ensure_directory(path.parent)


def find_available_path(target_path: Path) -> Path:
    """``target_path`` itself when free, else the first free ``"<stem> N<suffix>"`` (N >= 2)."""

    candidates = itertools.chain(
        (target_path,),
        (target_path.with_name(f"{target_path.stem} {n}{target_path.suffix}") for n in itertools.count(2)),
    )
    return next(candidate for candidate in candidates if not candidate.exists())


def move_item_safely(source: Path, destination: Path) -> None:
    """Move ``source`` to ``destination`` without ever overwriting.

    A move whose source is gone but whose destination exists counts as done,
    so retrying an interrupted relocation is harmless. Moves across volumes
    copy then delete.

    Raises:
        FileNotFoundError: Neither side exists.
        FileExistsError: The destination is already taken.
    """

    source_exists = source.exists()
    destination_exists = destination.exists()
    if not source_exists and destination_exists:
        return
    if not source_exists:
        raise FileNotFoundError(f"Source item no longer exists: {source}")
    if destination_exists:
        raise FileExistsError(f"Destination already exists: {destination}")

    _ = ensure_parent_directory(destination)
    _ = shutil.move(source, destination)


__all__ = [
    "ensure_directory",
    "ensure_parent_directory",
    "find_available_path",
    "move_item_safely",
]
