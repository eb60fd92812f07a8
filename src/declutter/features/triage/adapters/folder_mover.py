"""Summary: Move files into a folder the user picked, and back.
Why: "Move to folder" files something away without a decision to keep or bin it."""

from __future__ import annotations

from pathlib import Path

from declutter.platform.filesystem import find_available_path, move_item_safely
from declutter.platform.logging import logger

from ..domain.models import FileRecord
from ..usecases.ports import FolderMoverPort, MoveError


class LocalFolderMover(FolderMoverPort):
    """Move a file into an existing folder under a free name.

    A clash gets the same ``" N"`` suffix the cloud relocation uses.
    """

    def move(self, record: FileRecord, folder: Path) -> Path:
        target_folder = folder.expanduser()
        if not target_folder.is_dir():
            raise MoveError(record.path, f"not a folder: {target_folder}")
        if target_folder.resolve() == record.path.parent.resolve():
            raise MoveError(record.path, "file is already in that folder")

        try:
            destination = find_available_path(target_folder / record.name)
            move_item_safely(record.path, destination)
        except OSError as exc:
            raise MoveError(record.path, str(exc)) from exc

        logger.debug("Moved %s -> %s", record.path, destination)
        return destination

    def restore(self, destination: Path, original: Path) -> None:
        try:
            move_item_safely(destination, original)
        except OSError as exc:
            raise MoveError(destination, str(exc)) from exc
        logger.debug("Restored %s -> %s", destination, original)


__all__ = ["LocalFolderMover"]
