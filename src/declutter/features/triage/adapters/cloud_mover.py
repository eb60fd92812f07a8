"""Summary: Relocate files into a cloud-synchronised folder and back.
Why: "Move to cloud" is a filesystem move into the sync client's directory."""

from __future__ import annotations

from pathlib import Path

from declutter.config.settings import CLOUD_APP_FOLDER_NAME
from declutter.platform.filesystem import (
    ensure_directory,
    find_available_path,
    move_item_safely,
)
from declutter.platform.logging import logger

from ..domain.models import FileRecord
from ..usecases.ports import CloudMoverPort, MoveError


class FolderCloudMover(CloudMoverPort):
    """Move files under ``<root>/DesktopDeclutter/<source folder>/``.

    Name collisions get a ``" N"`` suffix instead of overwriting.
    """

    def __init__(self, root: Path, *, app_folder: str = CLOUD_APP_FOLDER_NAME) -> None:
        self._root: Path = root.expanduser()
        self._app_folder: str = app_folder

    @property
    def root(self) -> Path:
        return self._root

    def destination_folder(self, source_folder: str | None) -> Path:
        base = self._root / self._app_folder
        if source_folder:
            return base / source_folder
        return base

    def relocate(self, record: FileRecord, source_folder: str | None) -> Path:
        if not self._root.is_dir():
            raise MoveError(record.path, f"cloud folder is unavailable: {self._root}")

        try:
            folder = ensure_directory(self.destination_folder(source_folder))
            destination = find_available_path(folder / record.name)
            move_item_safely(record.path, destination)
        except OSError as exc:
            raise MoveError(record.path, str(exc)) from exc

        logger.debug("Relocated %s -> %s", record.path, destination)
        return destination

    def restore(self, destination: Path, original: Path) -> None:
        try:
            move_item_safely(destination, original)
        except OSError as exc:
            raise MoveError(destination, str(exc)) from exc
        logger.debug("Restored %s -> %s", destination, original)


__all__ = ["FolderCloudMover"]
