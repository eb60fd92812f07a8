"""Data structures describing a triage session.

Where: features/triage/domain/models.py
What: File records, decisions, counters and undo snapshots.
Why: Give every layer one immutable vocabulary for the files being reviewed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Final


class FileType(str, Enum):
    """Coarse classification used for filtering the visible sequence."""

    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    ARCHIVE = "archive"
    APP = "app"
    FOLDER = "folder"
    OTHER = "other"

    @property
    def display_name(self) -> str:
        """Plural label used in filter menus."""

        return _DISPLAY_NAMES[self]

    @staticmethod
    def from_user_input(value: str) -> "FileType":
        """Translate raw CLI input into the matching type."""

        normalized = value.strip().lower()
        for file_type in FileType:
            if normalized in {file_type.value, file_type.display_name.lower()}:
                return file_type
        valid: Final[str] = ", ".join(t.value for t in FileType)
        msg = f"Unsupported file type '{value}'. Valid options: {valid}"
        raise ValueError(msg)


_DISPLAY_NAMES: Final[dict[FileType, str]] = {
    FileType.IMAGE: "Images",
    FileType.VIDEO: "Videos",
    FileType.AUDIO: "Audio",
    FileType.DOCUMENT: "Documents",
    FileType.ARCHIVE: "Archives",
    FileType.APP: "Apps",
    FileType.FOLDER: "Folders",
    FileType.OTHER: "Other",
}


class Decision(str, Enum):
    """Terminal-for-the-session classification applied to one file."""

    KEEP = "keep"
    BIN = "bin"
    STACK = "stack"
    CLOUD = "cloud"
    MOVE = "move"

    @property
    def title(self) -> str:
        return {
            Decision.KEEP: "Keep",
            Decision.BIN: "Bin",
            Decision.STACK: "Stack",
            Decision.CLOUD: "Move to Cloud",
            Decision.MOVE: "Move to Folder",
        }[self]


@dataclass(frozen=True, slots=True)
class FileRecord:
    """One untriaged file or folder.

    Records are immutable; the session swaps in updated copies (decision tag,
    preview) with ``dataclasses.replace``.
    """

    id: str
    path: Path
    name: str
    size: int
    file_type: FileType
    created_at: datetime | None = None
    decision: Decision | None = None
    preview: object | None = field(default=None, compare=False, repr=False)
    fingerprint: str | None = None


@dataclass(slots=True)
class SessionCounters:
    """Running totals for the current session."""

    kept: int = 0
    binned: int = 0
    reclaimed_bytes: int = 0
    relocated: int = 0

    def reset(self) -> None:
        self.kept = 0
        self.binned = 0
        self.reclaimed_bytes = 0
        self.relocated = 0


@dataclass(frozen=True, slots=True)
class UndoRecord:
    """Snapshot needed to reverse one decision."""

    decision: Decision
    record: FileRecord
    previous_cursor: int
    original_index: int | None
    destination: Path | None = None


class ActivityKind(str, Enum):
    """Category of an activity log entry."""

    FILE_ACTION = "file_action"
    UNDO = "undo"
    REDO = "redo"
    UI = "ui"


@dataclass(frozen=True, slots=True)
class ActivityEntry:
    """Human-readable line in the session activity log."""

    kind: ActivityKind
    title: str
    file_name: str | None
    detail: str | None
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class SessionSnapshot:
    """Pull-based view of committed session state."""

    location: Path | None
    total_files: int
    remaining: int
    visible: int
    cursor: int
    finished: bool
    active_filter: FileType | None
    counters: SessionCounters
    pending_bin: tuple[FileRecord, ...]
    stacked: tuple[FileRecord, ...]
    relocated: tuple[FileRecord, ...]
    can_undo: bool
    can_redo: bool
    error_message: str | None
    folder_depth: int = 0
    breadcrumb: str = ""


__all__ = [
    "ActivityEntry",
    "ActivityKind",
    "Decision",
    "FileRecord",
    "FileType",
    "SessionCounters",
    "SessionSnapshot",
    "UndoRecord",
]
