"""Summary: Send binned files to the operating-system trash.
Why: Binning must stay recoverable by the user outside the session."""

from __future__ import annotations

import send2trash

from declutter.platform.logging import logger

from ..domain.models import FileRecord
from ..usecases.ports import FileMoverPort, MoveError


class TrashFileMover(FileMoverPort):
    """``FileMoverPort`` backed by ``send2trash``."""

    def trash(self, record: FileRecord) -> None:
        if not record.path.exists():
            raise MoveError(record.path, "file no longer exists")
        try:
            send2trash.send2trash(str(record.path))
        except OSError as exc:
            raise MoveError(record.path, str(exc)) from exc
        logger.debug("Moved to trash: %s", record.path)


__all__ = ["TrashFileMover"]
