"""Public API for the triage feature."""

from .domain.models import (
    ActivityEntry,
    ActivityKind,
    Decision,
    FileRecord,
    FileType,
    SessionCounters,
    SessionSnapshot,
    UndoRecord,
)
from .usecases.decision_engine import DecisionEngine
from .usecases.ports import (
    CloudMoverPort,
    DeclutterError,
    FileMoverPort,
    FileSourcePort,
    FolderMoverPort,
    MoveError,
    ScanError,
    ThumbnailPort,
)
from .usecases.session_store import FolderContext, SessionStore
from .usecases.undo_history import ActivityLog, UndoHistory

__all__ = [
    "ActivityEntry",
    "ActivityKind",
    "ActivityLog",
    "CloudMoverPort",
    "Decision",
    "DecisionEngine",
    "DeclutterError",
    "FileMoverPort",
    "FileRecord",
    "FileSourcePort",
    "FileType",
    "FolderContext",
    "FolderMoverPort",
    "MoveError",
    "ScanError",
    "SessionCounters",
    "SessionSnapshot",
    "SessionStore",
    "ThumbnailPort",
    "UndoHistory",
    "UndoRecord",
]
