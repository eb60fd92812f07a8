"""Summary: Bounded undo log, redo stack and activity log for a triage session.
Why: Reverse decisions in LIFO order while restoring each file where it was."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime
from typing import Protocol

from declutter.config.settings import ACTIVITY_LOG_LIMIT, UNDO_LIMIT
from declutter.platform.logging import logger

from ..domain.models import ActivityEntry, ActivityKind, UndoRecord
from .ports import MoveError
from .session_store import SessionStore


class DecisionEffects(Protocol):
    """Side effects of a decision that the history asks to reverse or replay."""

    def reverse(self, entry: UndoRecord) -> None:
        """Roll back counters, collections and moves; raise ``MoveError`` when impossible."""
        ...

    def replay(self, entry: UndoRecord) -> bool:
        """Apply ``entry.decision`` again to the file; return whether it committed."""
        ...


class UndoHistory:
    """LIFO log of committed decisions with at most ``limit`` entries.

    Recording a fresh decision clears the redo stack. Each undo restores the
    file into the working list at its original index (falling back to the
    pre-decision cursor, then the tail) and refocuses it when it is visible.
    """

    def __init__(self, store: SessionStore, *, limit: int = UNDO_LIMIT) -> None:
        if limit <= 0:
            raise ValueError("Undo limit must be positive")
        self._store: SessionStore = store
        self._limit: int = limit
        self._entries: deque[UndoRecord] = deque()
        self._redo: list[UndoRecord] = []
        self._frames: list[tuple[deque[UndoRecord], list[UndoRecord]]] = []

    @property
    def limit(self) -> int:
        return self._limit

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def can_undo(self) -> bool:
        return bool(self._entries)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def entries(self) -> tuple[UndoRecord, ...]:
        return tuple(self._entries)

    def record(self, entry: UndoRecord, *, clear_redo: bool = True) -> None:
        """Append ``entry``, evicting the oldest when the bound is exceeded."""

        self._entries.append(entry)
        while len(self._entries) > self._limit:
            evicted = self._entries.popleft()
            logger.debug("Undo history full; dropped entry for %s", evicted.record.name)
        if clear_redo:
            self._redo.clear()

    def forget(self, record_id: str) -> None:
        """Drop every entry for ``record_id`` (its fate changed outside the log).

        Entries parked for parent folders are dropped too.
        """

        self._entries = deque(e for e in self._entries if e.record.id != record_id)
        self._redo = [e for e in self._redo if e.record.id != record_id]
        self._frames = [
            (
                deque(e for e in entries if e.record.id != record_id),
                [e for e in redo if e.record.id != record_id],
            )
            for entries, redo in self._frames
        ]

    def clear(self) -> None:
        self._entries.clear()
        self._redo.clear()
        self._frames.clear()

    # Folder levels ---------------------------------------------------------

    def push_frame(self) -> None:
        """Park the current undo and redo stacks while a subfolder is reviewed."""

        self._frames.append((self._entries, self._redo))
        self._entries = deque()
        self._redo = []

    def pop_frame(self) -> bool:
        """Bring back the parent's stacks; the subfolder's entries are discarded."""

        if not self._frames:
            return False
        self._entries, self._redo = self._frames.pop()
        return True

    # Reversal --------------------------------------------------------------

    def undo_last(self, effects: DecisionEffects) -> UndoRecord | None:
        """Reverse the most recent decision; ``None`` when empty or the reversal failed.

        Entries whose file is already back in the working list are stale:
        each is dropped and the next older entry is tried.
        """

        while self._entries:
            entry = self._entries.pop()
            if self._store.contains(entry.record.id):
                self._drop_stale(entry)
                continue
            if not self._revert(entry, effects):
                self._entries.append(entry)
                return None
            self._redo.append(entry)
            return entry
        return None

    def undo_file(self, record_id: str, effects: DecisionEffects) -> UndoRecord | None:
        """Reverse the most recent decision recorded for ``record_id``."""

        for position in range(len(self._entries) - 1, -1, -1):
            entry = self._entries[position]
            if entry.record.id != record_id:
                continue
            del self._entries[position]
            if self._store.contains(record_id):
                self._drop_stale(entry)
                return None
            if not self._revert(entry, effects):
                self._entries.insert(position, entry)
                return None
            self._redo.append(entry)
            return entry
        return None

    @staticmethod
    def _drop_stale(entry: UndoRecord) -> None:
        logger.info(
            "Skipping undo of %s for %s: the file is already back in the session",
            entry.decision.title,
            entry.record.name,
        )

    def redo_last(self, effects: DecisionEffects) -> UndoRecord | None:
        """Replay the most recently undone decision."""

        if not self._redo:
            return None
        entry = self._redo.pop()
        if not self._store.contains(entry.record.id):
            logger.debug("Redo target %s no longer in session; discarded", entry.record.name)
            return None

        visible_index = self._store.visible_index_of(entry.record.id)
        if visible_index is not None:
            self._store.set_cursor(visible_index)
        if not effects.replay(entry):
            self._redo.append(entry)
            return None
        return entry

    def _revert(self, entry: UndoRecord, effects: DecisionEffects) -> bool:
        record = entry.record
        try:
            effects.reverse(entry)
        except MoveError as exc:
            logger.error("Undo failed for %s: %s", record.name, exc.reason)
            return False

        restored = replace(record, decision=None)
        _ = self._store.reinsert(restored, self._insertion_index(entry))
        self._store.forget_viewed(record.id)

        visible_index = self._store.visible_index_of(record.id)
        if visible_index is not None:
            self._store.set_cursor(visible_index)
        else:
            self._store.set_cursor(min(entry.previous_cursor, self._store.visible_count))
        return True

    def _insertion_index(self, entry: UndoRecord) -> int | None:
        size = len(self._store)
        if entry.original_index is not None and 0 <= entry.original_index <= size:
            return entry.original_index
        if 0 <= entry.previous_cursor <= size:
            return entry.previous_cursor
        return None


class ActivityLog:
    """Most recent human-readable session actions, newest last."""

    def __init__(
        self,
        *,
        limit: int = ACTIVITY_LOG_LIMIT,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._entries: deque[ActivityEntry] = deque(maxlen=limit)
        self._clock: Callable[[], datetime] = clock

    def add(
        self,
        kind: ActivityKind,
        title: str,
        *,
        file_name: str | None = None,
        detail: str | None = None,
    ) -> ActivityEntry:
        entry = ActivityEntry(
            kind=kind,
            title=title,
            file_name=file_name,
            detail=detail,
            timestamp=self._clock(),
        )
        self._entries.append(entry)
        return entry

    def entries(self) -> tuple[ActivityEntry, ...]:
        return tuple(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["ActivityLog", "DecisionEffects", "UndoHistory"]
