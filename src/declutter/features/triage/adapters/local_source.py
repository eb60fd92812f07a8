"""Summary: Enumerate a local folder into file records.
Why: Feed the session with the visible top-level entries of the review location."""

from __future__ import annotations

import os
import uuid
from datetime import datetime
from pathlib import Path

from declutter.platform.logging import logger

from ..domain.classification import classify, is_hidden_or_system
from ..domain.models import FileRecord
from ..usecases.ports import FileSourcePort, ScanError


class LocalFileSource(FileSourcePort):
    """List non-hidden entries of a directory (no recursion).

    Records receive fresh opaque identities, so two scans of the same folder
    never share ids. Unreadable sizes degrade to zero.
    """

    def enumerate(self, location: Path) -> list[FileRecord]:
        location = location.expanduser()
        try:
            entries = sorted(os.scandir(location), key=lambda entry: entry.name.lower())
        except FileNotFoundError as exc:
            raise ScanError(location, "location does not exist") from exc
        except NotADirectoryError as exc:
            raise ScanError(location, "location is not a directory") from exc
        except PermissionError as exc:
            raise ScanError(location, "permission denied") from exc
        except OSError as exc:
            raise ScanError(location, exc.strerror or str(exc)) from exc

        records: list[FileRecord] = []
        for entry in entries:
            if is_hidden_or_system(entry.name):
                continue
            records.append(self._to_record(entry))

        logger.debug("Enumerated %d entries in %s", len(records), location)
        return records

    @staticmethod
    def _to_record(entry: os.DirEntry[str]) -> FileRecord:
        path = Path(entry.path)
        try:
            is_directory = entry.is_dir()
        except OSError:
            is_directory = False

        size = 0
        created_at: datetime | None = None
        try:
            stat_result = entry.stat()
            if not is_directory:
                size = stat_result.st_size
            timestamp = getattr(stat_result, "st_birthtime", None) or stat_result.st_mtime
            created_at = datetime.fromtimestamp(timestamp)
        except OSError as exc:
            logger.debug("Could not stat %s: %s", path, exc)

        return FileRecord(
            id=uuid.uuid4().hex,
            path=path,
            name=entry.name,
            size=size,
            file_type=classify(path, is_directory=is_directory),
            created_at=created_at,
        )


__all__ = ["LocalFileSource"]
