"""Summary: Apply keep/bin/stack/cloud/move decisions and maintain the bin and stack.
Why: Centralise counter bookkeeping so the conservation of files always holds."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from pathlib import Path
from typing import Final, assert_never

from declutter.config.settings import IMMEDIATE_BINNING
from declutter.platform.logging import logger
from declutter.shared.events import EventSink, SessionEvent

from ..domain.models import ActivityKind, Decision, FileRecord, UndoRecord
from .ports import CloudMoverPort, FileMoverPort, FolderMoverPort, MoveError
from .session_store import SessionStore
from .undo_history import ActivityLog, UndoHistory

_PROTECTED_APP_ROOTS: Final[tuple[str, ...]] = ("/Applications/", "/System/Applications/")


def is_protected_app(record: FileRecord) -> bool:
    """True for application bundles installed in a system applications folder."""

    if record.path.suffix.lower() != ".app":
        return False
    path_text = record.path.as_posix()
    return any(path_text.startswith(root) for root in _PROTECTED_APP_ROOTS)


class DecisionEngine:
    """Commit decisions against a ``SessionStore``.

    Counters (kept, binned, reclaimed, relocated) live on the store; this
    engine owns the pending bin, the stacked files and the relocated files.
    """

    def __init__(
        self,
        store: SessionStore,
        history: UndoHistory,
        *,
        file_mover: FileMoverPort,
        cloud_mover: CloudMoverPort | None = None,
        folder_mover: FolderMoverPort | None = None,
        immediate_binning: bool = IMMEDIATE_BINNING,
        activity: ActivityLog | None = None,
        emit: EventSink | None = None,
    ) -> None:
        self._store: SessionStore = store
        self._history: UndoHistory = history
        self._file_mover: FileMoverPort = file_mover
        self._cloud_mover: CloudMoverPort | None = cloud_mover
        self._folder_mover: FolderMoverPort | None = folder_mover
        self.immediate_binning: bool = immediate_binning
        self._activity: ActivityLog = activity if activity is not None else ActivityLog()
        self._emit: EventSink | None = emit
        self._pending_bin: list[FileRecord] = []
        self._stacked: list[FileRecord] = []
        self._relocated: list[FileRecord] = []

    # Views -----------------------------------------------------------------

    @property
    def pending_bin(self) -> tuple[FileRecord, ...]:
        return tuple(self._pending_bin)

    @property
    def stacked(self) -> tuple[FileRecord, ...]:
        return tuple(self._stacked)

    @property
    def relocated(self) -> tuple[FileRecord, ...]:
        """Relocated files, each carrying its destination path."""

        return tuple(self._relocated)

    @property
    def activity(self) -> ActivityLog:
        return self._activity

    @property
    def cloud_available(self) -> bool:
        return self._cloud_mover is not None

    def clear(self) -> None:
        """Forget every collection, history entry and activity line."""

        self._pending_bin.clear()
        self._stacked.clear()
        self._relocated.clear()
        self._history.clear()
        self._activity.clear()

    # Decisions -------------------------------------------------------------

    def apply(self, decision: Decision, record: FileRecord) -> bool:
        """Commit ``decision`` for ``record`` and refocus.

        Returns ``False`` when the file is no longer in the working list or a
        relocation could not be performed; nothing is committed then. A
        ``Decision.MOVE`` needs a folder, so use ``move_to_folder`` for it.
        """

        committed = self._apply_one(decision, record, clear_redo=True)
        if committed:
            _ = self._store.current()
        return committed

    def apply_all(self, decision: Decision, records: Iterable[FileRecord]) -> int:
        """Commit ``decision`` for every present record; one refocus at the end."""

        applied = 0
        for record in list(records):
            if self._apply_one(decision, record, clear_redo=True):
                applied += 1
        self._store.clamp_cursor()
        _ = self._store.current()
        return applied

    def move_to_folder(self, record: FileRecord, folder: Path) -> bool:
        """Move ``record`` into ``folder`` and refocus; ``False`` when the move was refused."""

        committed = self._apply_one(Decision.MOVE, record, clear_redo=True, target_folder=folder)
        if committed:
            _ = self._store.current()
        return committed

    def move_all_to_folder(self, records: Iterable[FileRecord], folder: Path) -> int:
        """Move every present record into ``folder``; protected apps and failures are skipped."""

        moved = 0
        for record in list(records):
            if self._apply_one(Decision.MOVE, record, clear_redo=True, target_folder=folder):
                moved += 1
        self._store.clamp_cursor()
        _ = self._store.current()
        return moved

    # Folder drill-down -----------------------------------------------------

    def enter_folder(self, location: Path, records: Sequence[FileRecord]) -> None:
        """Review the subfolder ``location``; the parent level and its undo log are parked."""

        self._store.enter_folder(records, location=location)
        self._history.push_frame()
        _ = self._activity.add(ActivityKind.UI, "Entered folder", file_name=location.name)
        _ = self._store.current()

    def return_to_parent(self) -> bool:
        """Go back to the parked parent level with its cursor and undo log."""

        left = self._store.location
        if not self._store.return_to_parent():
            return False
        _ = self._history.pop_frame()
        _ = self._activity.add(
            ActivityKind.UI,
            "Returned to parent folder",
            file_name=left.name if left is not None else None,
        )
        _ = self._store.current()
        return True

    def skip(self, record: FileRecord) -> bool:
        """Drop ``record`` from the session without a decision."""

        removed = self._store.remove(record.id)
        if removed is None:
            return False
        self._history.forget(record.id)
        _ = self._activity.add(ActivityKind.UI, "Skipped", file_name=removed.name)
        logger.debug("Skipped %s", removed.name)
        _ = self._store.current()
        return True

    def _apply_one(
        self,
        decision: Decision,
        record: FileRecord,
        *,
        clear_redo: bool,
        target_folder: Path | None = None,
    ) -> bool:
        live = self._store.get(record.id)
        if live is None:
            logger.debug("Ignoring %s for %s: no longer in session", decision.value, record.name)
            return False

        destination: Path | None = None
        if decision is Decision.CLOUD:
            destination = self._relocate(live)
            if destination is None:
                return False
        elif decision is Decision.MOVE:
            destination = self._move_into(live, target_folder)
            if destination is None:
                return False

        entry = UndoRecord(
            decision=decision,
            record=live,
            previous_cursor=self._store.cursor,
            original_index=self._store.index_of(live.id),
            destination=destination,
        )
        self._history.record(entry, clear_redo=clear_redo)
        self._commit(entry)
        _ = self._activity.add(
            ActivityKind.FILE_ACTION,
            decision.title,
            file_name=live.name,
            detail=str(destination) if destination is not None else None,
        )
        return True

    def _relocate(self, record: FileRecord) -> Path | None:
        if self._cloud_mover is None:
            self._report_move_failure(record, "No cloud destination configured")
            return None
        if is_protected_app(record):
            self._report_move_failure(record, "System application bundles cannot be relocated")
            return None

        location = self._store.location
        source_folder = location.name if location is not None else None
        try:
            return self._cloud_mover.relocate(record, source_folder)
        except MoveError as exc:
            self._report_move_failure(record, exc.reason)
            return None

    def _move_into(self, record: FileRecord, folder: Path | None) -> Path | None:
        if self._folder_mover is None:
            self._report_move_failure(record, "Moving to a folder is not available")
            return None
        if folder is None:
            self._report_move_failure(record, "No destination folder chosen")
            return None
        if is_protected_app(record):
            self._report_move_failure(record, "System application bundles cannot be moved")
            return None

        try:
            return self._folder_mover.move(record, folder)
        except MoveError as exc:
            self._report_move_failure(record, exc.reason)
            return None

    def _commit(self, entry: UndoRecord) -> None:
        record = entry.record
        _ = self._store.remove(record.id)
        tagged = replace(record, decision=entry.decision)
        counters = self._store.counters

        if entry.decision is Decision.KEEP:
            counters.kept += 1
        elif entry.decision is Decision.BIN:
            counters.binned += 1
            counters.reclaimed_bytes += record.size
            if self.immediate_binning:
                self._trash(tagged)
            else:
                self._pending_bin.append(tagged)
        elif entry.decision is Decision.STACK:
            self._stacked.append(tagged)
        elif entry.decision is Decision.CLOUD:
            self._track_relocation(tagged, entry.destination)
        elif entry.decision is Decision.MOVE:
            self._track_relocation(tagged, entry.destination)
        else:
            assert_never(entry.decision)

        logger.info(
            "%s %s",
            entry.decision.title,
            record.name,
            extra={
                "session_event": f"decision.{entry.decision.value}",
                "file_path": str(record.path),
                "base_path": str(self._store.location) if self._store.location else None,
                "remaining": len(self._store),
                "size": record.size,
            },
        )
        self._publish(f"decision.{entry.decision.value}", record.id, record.name)

    def _track_relocation(self, record: FileRecord, destination: Path | None) -> None:
        self._store.counters.relocated += 1
        landed = destination if destination is not None else record.path
        self._relocated.append(replace(record, path=landed))

    def _trash(self, record: FileRecord) -> bool:
        try:
            self._file_mover.trash(record)
        except MoveError as exc:
            self._report_move_failure(record, exc.reason)
            return False
        return True

    def _report_move_failure(self, record: FileRecord, reason: str) -> None:
        logger.error(
            "Move failed for %s: %s",
            record.name,
            reason,
            extra={
                "session_event": "move.failed",
                "file_path": str(record.path),
                "error_message": reason,
            },
        )
        self._publish("move.failed", record.id, reason)

    def _publish(self, name: str, file_id: str | None, message: str | None) -> None:
        if self._emit is not None:
            self._emit(SessionEvent(name=name, file_id=file_id, message=message))

    # Undo / redo -----------------------------------------------------------

    def undo(self) -> UndoRecord | None:
        """Reverse the most recent decision and refocus the restored file."""

        entry = self._history.undo_last(self)
        self._after_undo(entry)
        return entry

    def undo_file(self, record_id: str) -> UndoRecord | None:
        entry = self._history.undo_file(record_id, self)
        self._after_undo(entry)
        return entry

    def redo(self) -> UndoRecord | None:
        entry = self._history.redo_last(self)
        if entry is not None:
            _ = self._activity.add(
                ActivityKind.REDO, f"Redo {entry.decision.title}", file_name=entry.record.name
            )
            self._publish("decision.redo", entry.record.id, entry.record.name)
        _ = self._store.current()
        return entry

    def reset(self) -> int:
        """Undo every recorded decision; returns how many were reversed."""

        reversed_count = 0
        while self._history.can_undo:
            if self.undo() is None:
                break
            reversed_count += 1
        return reversed_count

    def _after_undo(self, entry: UndoRecord | None) -> None:
        if entry is not None:
            _ = self._activity.add(
                ActivityKind.UNDO, f"Undo {entry.decision.title}", file_name=entry.record.name
            )
            logger.info(
                "Undo %s %s",
                entry.decision.title,
                entry.record.name,
                extra={
                    "session_event": "decision.undo",
                    "file_path": str(entry.record.path),
                    "remaining": len(self._store),
                },
            )
            self._publish("decision.undo", entry.record.id, entry.record.name)
        _ = self._store.current()

    def reverse(self, entry: UndoRecord) -> None:
        """Roll back the effects of ``entry``; raises ``MoveError`` if a relocation cannot be undone."""

        counters = self._store.counters
        record_id = entry.record.id

        if entry.decision is Decision.KEEP:
            counters.kept = max(0, counters.kept - 1)
        elif entry.decision is Decision.BIN:
            counters.binned = max(0, counters.binned - 1)
            counters.reclaimed_bytes = max(0, counters.reclaimed_bytes - entry.record.size)
            self._pending_bin = [r for r in self._pending_bin if r.id != record_id]
        elif entry.decision is Decision.STACK:
            self._stacked = [r for r in self._stacked if r.id != record_id]
        elif entry.decision is Decision.CLOUD:
            if entry.destination is not None:
                if self._cloud_mover is None:
                    raise MoveError(entry.destination, "No cloud destination configured")
                self._cloud_mover.restore(entry.destination, entry.record.path)
            self._untrack_relocation(record_id)
        elif entry.decision is Decision.MOVE:
            if entry.destination is not None:
                if self._folder_mover is None:
                    raise MoveError(entry.destination, "Moving to a folder is not available")
                self._folder_mover.restore(entry.destination, entry.record.path)
            self._untrack_relocation(record_id)
        else:
            assert_never(entry.decision)

    def _untrack_relocation(self, record_id: str) -> None:
        counters = self._store.counters
        counters.relocated = max(0, counters.relocated - 1)
        self._relocated = [r for r in self._relocated if r.id != record_id]

    def replay(self, entry: UndoRecord) -> bool:
        target_folder = entry.destination.parent if entry.destination is not None else None
        return self._apply_one(
            entry.decision, entry.record, clear_redo=False, target_folder=target_folder
        )

    # Bin and stack maintenance --------------------------------------------

    def restore_from_bin(self, record_id: str) -> bool:
        """Return a pending-bin file to the head of the working list."""

        record = self._take(self._pending_bin, record_id)
        if record is None:
            return False
        counters = self._store.counters
        counters.binned = max(0, counters.binned - 1)
        counters.reclaimed_bytes = max(0, counters.reclaimed_bytes - record.size)
        self._return_to_session(record)
        return True

    def remove_from_bin(self, record_id: str) -> bool:
        """Trash one pending-bin file now; it stays counted as binned."""

        record = self._take(self._pending_bin, record_id)
        if record is None:
            return False
        self._history.forget(record_id)
        return self._trash(record)

    def empty_bin(self) -> int:
        """Trash every pending-bin file; returns how many moves succeeded."""

        records, self._pending_bin = self._pending_bin, []
        trashed = 0
        for record in records:
            self._history.forget(record.id)
            if self._trash(record):
                trashed += 1
        return trashed

    def unstack(self, record_id: str) -> bool:
        """Return a stacked file to the head of the working list."""

        record = self._take(self._stacked, record_id)
        if record is None:
            return False
        self._return_to_session(record)
        return True

    def keep_stacked(self, record_ids: Iterable[str]) -> int:
        kept = 0
        for record_id in list(record_ids):
            record = self._take(self._stacked, record_id)
            if record is None:
                continue
            self._history.forget(record_id)
            self._store.counters.kept += 1
            kept += 1
        return kept

    def bin_stacked(self, record_ids: Iterable[str]) -> int:
        """Trash stacked files; each counts as binned even when the move fails."""

        binned = 0
        for record_id in list(record_ids):
            record = self._take(self._stacked, record_id)
            if record is None:
                continue
            self._history.forget(record_id)
            counters = self._store.counters
            counters.binned += 1
            counters.reclaimed_bytes += record.size
            _ = self._trash(replace(record, decision=Decision.BIN))
            binned += 1
        return binned

    def empty_stack(self) -> int:
        return self.bin_stacked([record.id for record in self._stacked])

    def _return_to_session(self, record: FileRecord) -> None:
        self._history.forget(record.id)
        was_finished = self._store.finished
        _ = self._store.reinsert(replace(record, decision=None), 0)
        if was_finished:
            self._store.set_cursor(0)
        elif self._store.visible_index_of(record.id) is not None:
            # Keep the focused file focused after the head insertion.
            self._store.set_cursor(self._store.cursor + 1)
        _ = self._store.current()

    @staticmethod
    def _take(records: list[FileRecord], record_id: str) -> FileRecord | None:
        for index, record in enumerate(records):
            if record.id == record_id:
                return records.pop(index)
        return None


__all__ = ["DecisionEngine", "is_protected_app"]
