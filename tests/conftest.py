"""Shared fixtures: fake ports, an inline executor and a record factory."""

from __future__ import annotations

import itertools
from collections.abc import Callable
from concurrent.futures import Executor, Future
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest

from declutter.application.services.declutter_service import DeclutterSession
from declutter.features.triage.domain.models import FileRecord, FileType
from declutter.features.triage.usecases.ports import MoveError, PreviewCallback, ScanError

NOW = datetime(2024, 6, 1, 12, 0, 0)

RecordFactory = Callable[..., FileRecord]
SessionFactory = Callable[..., DeclutterSession]


class InlineExecutor(Executor):
    """Run submitted work synchronously on the calling thread."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future[Any]:
        future: Future[Any] = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:  # pragma: no cover - surfaced through the future
            future.set_exception(exc)
        return future


class RecordingMover:
    """FileMoverPort that records trashed ids and fails for chosen ones."""

    def __init__(self) -> None:
        self.trashed: list[str] = []
        self.fail_ids: set[str] = set()

    def trash(self, record: FileRecord) -> None:
        if record.id in self.fail_ids:
            raise MoveError(record.path, "permission denied")
        self.trashed.append(record.id)


class RecordingCloudMover:
    """CloudMoverPort that only computes destinations."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.relocated: dict[str, Path] = {}
        self.restored: list[tuple[Path, Path]] = []
        self.fail_ids: set[str] = set()
        self.fail_restore: bool = False

    def relocate(self, record: FileRecord, source_folder: str | None) -> Path:
        if record.id in self.fail_ids:
            raise MoveError(record.path, "cloud folder is unavailable")
        destination = self.root / (source_folder or "") / record.name
        self.relocated[record.id] = destination
        return destination

    def restore(self, destination: Path, original: Path) -> None:
        if self.fail_restore:
            raise MoveError(destination, "destination vanished")
        self.restored.append((destination, original))


class RecordingFolderMover:
    """FolderMoverPort that only computes destinations."""

    def __init__(self) -> None:
        self.moved: dict[str, Path] = {}
        self.restored: list[tuple[Path, Path]] = []
        self.fail_ids: set[str] = set()

    def move(self, record: FileRecord, folder: Path) -> Path:
        if record.id in self.fail_ids:
            raise MoveError(record.path, f"not a folder: {folder}")
        destination = folder / record.name
        self.moved[record.id] = destination
        return destination

    def restore(self, destination: Path, original: Path) -> None:
        self.restored.append((destination, original))


class RecordingThumbnails:
    """ThumbnailPort that keeps callbacks until a test delivers a preview."""

    def __init__(self) -> None:
        self.requested: list[str] = []
        self.cancelled: list[str] = []
        self.callbacks: dict[str, PreviewCallback] = {}

    def request(self, record: FileRecord, on_ready: PreviewCallback) -> None:
        if record.id in self.callbacks:
            return
        self.requested.append(record.id)
        self.callbacks[record.id] = on_ready

    def cancel(self, record_id: str) -> None:
        self.cancelled.append(record_id)

    def deliver(self, record_id: str, preview: object | None) -> None:
        callback = self.callbacks.pop(record_id)
        callback(record_id, preview)


class StaticSource:
    """FileSourcePort returning fixed records or raising a fixed error.

    ``folders`` maps a subfolder path to its own records or to the error it raises.
    """

    def __init__(
        self,
        records: list[FileRecord] | None = None,
        error: ScanError | None = None,
        folders: dict[Path, list[FileRecord] | ScanError] | None = None,
    ) -> None:
        self.records: list[FileRecord] = records or []
        self.error: ScanError | None = error
        self.folders: dict[Path, list[FileRecord] | ScanError] = folders or {}

    def enumerate(self, location: Path) -> list[FileRecord]:
        if location in self.folders:
            entry = self.folders[location]
            if isinstance(entry, ScanError):
                raise entry
            return list(entry)
        if self.error is not None:
            raise self.error
        return list(self.records)


class NullFingerprinter:
    def fingerprint(self, record: FileRecord) -> str | None:
        return None


@pytest.fixture
def make_record() -> RecordFactory:
    """Build records with unique ids and names that match no naming rule."""

    counter = itertools.count()

    def _make(
        name: str | None = None,
        *,
        size: int = 1_000,
        file_type: FileType = FileType.OTHER,
        created_at: datetime | None = None,
        fingerprint: str | None = None,
        record_id: str | None = None,
        folder: Path = Path("/Users/me/Desktop"),
    ) -> FileRecord:
        index = next(counter)
        file_name = name or f"item{index}.dat"
        return FileRecord(
            id=record_id or f"f{index}",
            path=folder / file_name,
            name=file_name,
            size=size,
            file_type=file_type,
            created_at=created_at,
            fingerprint=fingerprint,
        )

    return _make


@pytest.fixture
def mover() -> RecordingMover:
    return RecordingMover()


@pytest.fixture
def cloud_mover(tmp_path: Path) -> RecordingCloudMover:
    return RecordingCloudMover(tmp_path / "cloud")


@pytest.fixture
def folder_mover() -> RecordingFolderMover:
    return RecordingFolderMover()


@pytest.fixture
def thumbnails() -> RecordingThumbnails:
    return RecordingThumbnails()


@pytest.fixture
def session_factory(
    mover: RecordingMover,
    folder_mover: RecordingFolderMover,
    thumbnails: RecordingThumbnails,
) -> SessionFactory:
    """Build a deterministic session: inline suggestions, no debounce, fixed clock."""

    def _make(
        records: list[FileRecord] | None = None,
        *,
        error: ScanError | None = None,
        folders: dict[Path, list[FileRecord] | ScanError] | None = None,
        cloud: RecordingCloudMover | None = None,
        immediate_binning: bool = True,
        undo_limit: int = 50,
    ) -> DeclutterSession:
        return DeclutterSession(
            source=StaticSource(records, error, folders),
            file_mover=mover,
            cloud_mover=cloud,
            folder_mover=folder_mover,
            thumbnails=thumbnails,
            fingerprinter=NullFingerprinter(),
            immediate_binning=immediate_binning,
            debounce_seconds=0.0,
            undo_limit=undo_limit,
            clock=lambda: NOW,
            executor_factory=InlineExecutor,
        )

    return _make


@pytest.fixture
def now() -> datetime:
    return NOW
