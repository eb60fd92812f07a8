"""Ports for triage use cases.

Where: features/triage/usecases/ports.py
What: Protocols for the collaborators the session engine drives, plus the error taxonomy.
Why: Keep enumeration, trashing, relocation and previews swappable so tests can inject fakes.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from ..domain.models import FileRecord


class DeclutterError(Exception):
    """Base class for errors raised by the declutter engine and its adapters."""


class ScanError(DeclutterError):
    """The review location could not be enumerated (missing, unreadable, denied)."""

    def __init__(self, location: Path, reason: str) -> None:
        super().__init__(f"Cannot scan {location}: {reason}")
        self.location: Path = location
        self.reason: str = reason


class MoveError(DeclutterError):
    """A trash or relocation request failed for one file."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot move {path}: {reason}")
        self.path: Path = path
        self.reason: str = reason


PreviewCallback = Callable[[str, object | None], None]


@runtime_checkable
class FileSourcePort(Protocol):
    """Enumerate a location into file records."""

    def enumerate(self, location: Path) -> list[FileRecord]:
        """Return visible entries of ``location``; raise ``ScanError`` when unreadable."""
        ...


@runtime_checkable
class ThumbnailPort(Protocol):
    """Produce preview images asynchronously."""

    def request(self, record: FileRecord, on_ready: PreviewCallback) -> None:
        """Schedule a preview for ``record``; redundant calls are no-ops.

        ``on_ready`` receives ``(record.id, image_or_none)`` from a worker thread.
        """
        ...

    def cancel(self, record_id: str) -> None:
        """Drop interest in a pending preview."""
        ...


@runtime_checkable
class FileMoverPort(Protocol):
    """Send files to the system trash."""

    def trash(self, record: FileRecord) -> None:
        """Trash ``record``; raise ``MoveError`` on failure."""
        ...


@runtime_checkable
class CloudMoverPort(Protocol):
    """Relocate files into a cloud-synchronised folder and back."""

    def relocate(self, record: FileRecord, source_folder: str | None) -> Path:
        """Move ``record`` and return where it landed; raise ``MoveError`` on failure."""
        ...

    def restore(self, destination: Path, original: Path) -> None:
        """Move a relocated file back; raise ``MoveError`` on failure."""
        ...


@runtime_checkable
class FolderMoverPort(Protocol):
    """Move files into a folder the user picked, and back."""

    def move(self, record: FileRecord, folder: Path) -> Path:
        """Move ``record`` into ``folder`` and return where it landed; raise ``MoveError`` on failure."""
        ...

    def restore(self, destination: Path, original: Path) -> None:
        """Move a file back to ``original``; raise ``MoveError`` on failure."""
        ...


__all__ = [
    "CloudMoverPort",
    "DeclutterError",
    "FileMoverPort",
    "FileSourcePort",
    "FolderMoverPort",
    "MoveError",
    "PreviewCallback",
    "ScanError",
    "ThumbnailPort",
]
