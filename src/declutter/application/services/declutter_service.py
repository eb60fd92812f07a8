"""Application service running one declutter session.

This layer wires the session store, decision engine, undo history, suggestion
engine and group review coordinator around a single lock so that UIs (the CLI
today) issue plain commands and observe committed state only.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, final

from declutter.config.paths import default_review_location
from declutter.config.settings import (
    CLOUD_DESTINATION,
    COMPARISON_WINDOW,
    IMMEDIATE_BINNING,
    SUGGESTION_DEBOUNCE_SECONDS,
    THUMBNAIL_LOOKAHEAD,
    UNDO_LIMIT,
)
from declutter.features.group_review import (
    GroupReviewCoordinator,
    GroupStats,
    ReviewContext,
    SmartAction,
)
from declutter.features.suggestions import (
    DetectionThresholds,
    FingerprintPort,
    Suggestion,
    SuggestionEngine,
)
from declutter.features.suggestions.adapters import SampledContentFingerprinter
from declutter.features.suggestions.usecases.suggestion_engine import ExecutorFactory
from declutter.features.triage import (
    ActivityEntry,
    ActivityLog,
    CloudMoverPort,
    Decision,
    DecisionEngine,
    FileMoverPort,
    FileRecord,
    FileSourcePort,
    FileType,
    FolderMoverPort,
    ScanError,
    SessionSnapshot,
    SessionStore,
    ThumbnailPort,
    UndoHistory,
)
from declutter.features.triage.adapters import (
    FolderCloudMover,
    LocalFileSource,
    LocalFolderMover,
    PillowThumbnailProvider,
    TrashFileMover,
)
from declutter.platform.logging import logger
from declutter.shared.events import EventBus, EventSink, SessionEvent, Unsubscribe


@final
class DeclutterSession:
    """Command surface for triaging one location.

    Every mutation runs under one re-entrant lock. Events raised while a
    command runs are queued and published after the lock is released; the
    suggestion worker publishes its own results after committing them.
    """

    def __init__(
        self,
        *,
        source: FileSourcePort | None = None,
        file_mover: FileMoverPort | None = None,
        cloud_mover: CloudMoverPort | None = None,
        folder_mover: FolderMoverPort | None = None,
        thumbnails: ThumbnailPort | None = None,
        fingerprinter: FingerprintPort | None = None,
        immediate_binning: bool = IMMEDIATE_BINNING,
        debounce_seconds: float = SUGGESTION_DEBOUNCE_SECONDS,
        window_size: int = COMPARISON_WINDOW,
        undo_limit: int = UNDO_LIMIT,
        thresholds: DetectionThresholds | None = None,
        clock: Callable[[], datetime] = datetime.now,
        executor_factory: ExecutorFactory | None = None,
    ) -> None:
        """Create a session with overridable ports.

        Tests inject fakes; production relies on the local filesystem, the
        system trash, Pillow previews and sampled content fingerprints.
        """

        self._lock: threading.RLock = threading.RLock()
        self._depth: int = 0
        self._pending: list[SessionEvent] = []
        self._bus: EventBus = EventBus()
        self._error: str | None = None

        self._source: FileSourcePort = source or LocalFileSource()
        self._owns_thumbnails: bool = thumbnails is None
        self._thumbnails: ThumbnailPort = thumbnails or PillowThumbnailProvider()
        if cloud_mover is None and CLOUD_DESTINATION is not None:
            cloud_mover = FolderCloudMover(CLOUD_DESTINATION)

        self._store: SessionStore = SessionStore(on_focus_change=self._on_focus_change)
        self._history: UndoHistory = UndoHistory(self._store, limit=undo_limit)
        self._activity: ActivityLog = ActivityLog(clock=clock)
        self._engine: DecisionEngine = DecisionEngine(
            self._store,
            self._history,
            file_mover=file_mover or TrashFileMover(),
            cloud_mover=cloud_mover,
            folder_mover=folder_mover or LocalFolderMover(),
            immediate_binning=immediate_binning,
            activity=self._activity,
            emit=self._queue,
        )
        self._window_size: int = window_size
        self._suggestions: SuggestionEngine = SuggestionEngine(
            self._store,
            lock=self._lock,
            fingerprinter=fingerprinter or SampledContentFingerprinter(),
            debounce_seconds=debounce_seconds,
            window_size=window_size,
            thresholds=thresholds,
            clock=clock,
            executor_factory=executor_factory,
            on_suggestions=self._on_suggestions_ready,
        )
        self._review: GroupReviewCoordinator = GroupReviewCoordinator(
            self._store,
            self._engine,
            thumbnails=self._thumbnails,
            clock=clock,
        )

    # Plumbing --------------------------------------------------------------

    @contextmanager
    def _command(self) -> Iterator[None]:
        events: list[SessionEvent] = []
        try:
            with self._lock:
                self._depth += 1
                try:
                    yield
                finally:
                    self._depth -= 1
                    if self._depth == 0:
                        events, self._pending = self._pending, []
        finally:
            for event in events:
                self._bus.publish(event)

    def _queue(self, event: SessionEvent) -> None:
        with self._lock:
            self._pending.append(event)

    def _emit(self, name: str, file_id: str | None = None, message: str | None = None, **data: Any) -> None:
        self._queue(SessionEvent(name=name, file_id=file_id, message=message, data=MappingProxyType(data)))

    def _on_focus_change(self, record: FileRecord | None) -> None:
        published = self._suggestions.focus(record)
        self._emit("focus.changed", record.id if record is not None else None)
        self._emit(
            "suggestions.ready",
            record.id if record is not None else None,
            suggestions=published,
        )
        if record is None:
            if self._store.folder_depth > 0:
                self._emit("folder.finished", message=self._store.breadcrumb)
                return
            if self._store.total_loaded > 0:
                counters = self._store.counters
                logger.info(
                    "Session finished",
                    extra={
                        "session_event": "session.finished",
                        "file_path": str(self._store.location) if self._store.location else None,
                        "remaining": len(self._store),
                    },
                )
                self._emit(
                    "session.finished",
                    message=f"kept={counters.kept} binned={counters.binned}",
                )
            return
        self._prefetch_previews()

    def _prefetch_previews(self) -> None:
        visible = self._store.visible()
        start = self._store.cursor
        for record in visible[start : start + 1 + THUMBNAIL_LOOKAHEAD]:
            if record.preview is None:
                self._thumbnails.request(record, self._on_preview_ready)

    def _on_preview_ready(self, record_id: str, preview: object | None) -> None:
        with self._command():
            updated = self._store.attach_preview(record_id, preview)
            in_review = self._review.attach_preview(record_id, preview)
            if updated is None and not in_review:
                logger.debug("Dropping preview for %s: no longer in session", record_id)
                return
            self._emit("preview.ready", record_id)

    def _on_suggestions_ready(self, record_id: str | None, suggestions: tuple[Suggestion, ...]) -> None:
        with self._command():
            self._emit("suggestions.ready", record_id, suggestions=suggestions)

    # Observation -----------------------------------------------------------

    def subscribe(self, listener: EventSink) -> Unsubscribe:
        return self._bus.subscribe(listener)

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            return SessionSnapshot(
                location=self._store.location,
                total_files=self._store.total_loaded,
                remaining=len(self._store),
                visible=self._store.visible_count,
                cursor=self._store.cursor,
                finished=self._store.finished,
                active_filter=self._store.active_filter,
                counters=replace(self._store.counters),
                pending_bin=self._engine.pending_bin,
                stacked=self._engine.stacked,
                relocated=self._engine.relocated,
                can_undo=self._history.can_undo,
                can_redo=self._history.can_redo,
                error_message=self._error,
                folder_depth=self._store.folder_depth,
                breadcrumb=self._store.breadcrumb,
            )

    def current(self) -> FileRecord | None:
        with self._command():
            return self._store.current()

    def suggestions(self) -> tuple[Suggestion, ...]:
        with self._lock:
            return self._suggestions.current

    def records(self) -> tuple[FileRecord, ...]:
        with self._lock:
            return self._store.records

    def activity(self) -> tuple[ActivityEntry, ...]:
        with self._lock:
            return self._activity.entries()

    @property
    def cloud_available(self) -> bool:
        return self._engine.cloud_available

    def detect(self, record: FileRecord) -> list[Suggestion]:
        """Compute suggestions for ``record`` synchronously against the comparison window."""

        with self._lock:
            window = self._store.window(self._window_size)
        return self._suggestions.detect_now(record, window)

    def wait_for_suggestions(self, timeout: float | None = None) -> bool:
        """Block until background suggestion work settles. Never call while holding the lock."""

        return self._suggestions.wait(timeout)

    # Session lifecycle -----------------------------------------------------

    def load_session(self, location: Path | None = None) -> int:
        """Enumerate ``location`` into a fresh session; returns the file count.

        Raises:
            ScanError: The location could not be read; the session is left empty.
        """

        target = (location or default_review_location()).expanduser()
        with self._command():
            self._suggestions.reset()
            self._review.close()
            self._engine.clear()
            try:
                records = self._source.enumerate(target)
            except ScanError as exc:
                self._store.load([], location=target)
                self._error = str(exc)
                logger.error(
                    "Cannot load %s: %s",
                    target,
                    exc.reason,
                    extra={
                        "session_event": "session.error",
                        "file_path": str(target),
                        "error_message": exc.reason,
                    },
                )
                self._emit("session.error", message=str(exc))
                raise

            self._store.load(records, location=target)
            self._error = None
            logger.info(
                "Loaded %d files from %s",
                len(records),
                target,
                extra={
                    "session_event": "session.loaded",
                    "file_path": str(target),
                    "remaining": len(records),
                },
            )
            self._emit("session.loaded", message=str(target), count=len(records))
            _ = self._store.current()
            return len(records)

    def set_filter(self, file_type: FileType | None) -> None:
        with self._command():
            self._store.set_filter(file_type)
            self._emit("filter.changed", message=file_type.value if file_type else None)
            _ = self._store.current()

    def shutdown(self) -> None:
        self._suggestions.shutdown()
        if self._owns_thumbnails and isinstance(self._thumbnails, PillowThumbnailProvider):
            self._thumbnails.shutdown()

    # Navigation ------------------------------------------------------------

    def go_back(self) -> bool:
        with self._command():
            moved = self._store.go_back()
            _ = self._store.current()
            return moved

    def go_forward(self) -> bool:
        with self._command():
            moved = self._store.go_forward()
            _ = self._store.current()
            return moved

    def enter_folder(self) -> int | None:
        """Drill into the focused folder; returns how many files it holds.

        ``None`` when the focused file is not a folder or the folder cannot
        be read; the current level is untouched then.
        """

        with self._command():
            record = self._store.current()
            if record is None or record.file_type is not FileType.FOLDER:
                return None
            try:
                records = self._source.enumerate(record.path)
            except ScanError as exc:
                logger.warning(
                    "Cannot open %s: %s",
                    record.name,
                    exc.reason,
                    extra={
                        "session_event": "folder.failed",
                        "file_path": str(record.path),
                        "error_message": exc.reason,
                    },
                )
                self._emit("folder.failed", record.id, exc.reason)
                return None

            self._review.close()
            self._engine.enter_folder(record.path, records)
            logger.info(
                "Entered %s",
                record.name,
                extra={
                    "session_event": "folder.entered",
                    "file_path": str(record.path),
                    "remaining": len(records),
                },
            )
            self._emit("folder.entered", record.id, self._store.breadcrumb, count=len(records))
            return len(records)

    def return_to_parent(self) -> bool:
        """Leave the current subfolder; ``False`` at the top level."""

        with self._command():
            if not self._engine.return_to_parent():
                return False
            self._review.close()
            location = self._store.location
            logger.info(
                "Back in %s",
                location,
                extra={
                    "session_event": "folder.returned",
                    "file_path": str(location) if location is not None else None,
                    "remaining": len(self._store),
                },
            )
            self._emit("folder.returned", message=self._store.breadcrumb)
            return True

    # Decisions -------------------------------------------------------------

    def decide(self, decision: Decision) -> bool:
        """Apply ``decision`` to the focused file."""

        with self._command():
            record = self._store.current()
            if record is None:
                return False
            committed = self._engine.apply(decision, record)
            if committed:
                self._thumbnails.cancel(record.id)
            return committed

    def decide_bulk(self, decision: Decision, record_ids: Iterable[str]) -> int:
        with self._command():
            records = [
                record
                for record_id in record_ids
                if (record := self._store.get(record_id)) is not None
            ]
            applied = self._engine.apply_all(decision, records)
            for record in records:
                self._thumbnails.cancel(record.id)
            return applied

    def move_to_folder(self, folder: Path) -> bool:
        """Move the focused file into ``folder``."""

        with self._command():
            record = self._store.current()
            if record is None:
                return False
            moved = self._engine.move_to_folder(record, folder)
            if moved:
                self._thumbnails.cancel(record.id)
            return moved

    def skip(self) -> bool:
        with self._command():
            record = self._store.current()
            if record is None:
                return False
            skipped = self._engine.skip(record)
            if skipped:
                self._thumbnails.cancel(record.id)
            return skipped

    def undo(self) -> bool:
        with self._command():
            return self._engine.undo() is not None

    def redo(self) -> bool:
        with self._command():
            return self._engine.redo() is not None

    def undo_file(self, record_id: str) -> bool:
        with self._command():
            return self._engine.undo_file(record_id) is not None

    def reset_session(self) -> int:
        with self._command():
            return self._engine.reset()

    # Bin and stack ---------------------------------------------------------

    def restore_from_bin(self, record_id: str) -> bool:
        with self._command():
            return self._engine.restore_from_bin(record_id)

    def remove_from_bin(self, record_id: str) -> bool:
        with self._command():
            return self._engine.remove_from_bin(record_id)

    def empty_bin(self) -> int:
        with self._command():
            return self._engine.empty_bin()

    def unstack(self, record_id: str) -> bool:
        with self._command():
            return self._engine.unstack(record_id)

    def keep_stacked(self, record_ids: Iterable[str]) -> int:
        with self._command():
            return self._engine.keep_stacked(record_ids)

    def bin_stacked(self, record_ids: Iterable[str]) -> int:
        with self._command():
            return self._engine.bin_stacked(record_ids)

    def empty_stack(self) -> int:
        with self._command():
            return self._engine.empty_stack()

    # Group review ----------------------------------------------------------

    @property
    def review_context(self) -> ReviewContext | None:
        with self._lock:
            return self._review.context

    def start_group_review(self, suggestion_id: str) -> ReviewContext | None:
        """Open a review for a published suggestion of the focused file."""

        with self._command():
            suggestion = next(
                (item for item in self._suggestions.current if item.id == suggestion_id),
                None,
            )
            if suggestion is None:
                logger.debug("Unknown suggestion id %s", suggestion_id)
                return None
            context = self._review.start_review(suggestion, on_preview=self._on_preview_ready)
            if context is not None:
                logger.info(
                    "Reviewing %s",
                    suggestion.message,
                    extra={"session_event": "review.opened"},
                )
                self._emit("review.opened", message=suggestion.message, members=context.member_ids)
            return context

    def smart_actions(self) -> list[SmartAction]:
        with self._lock:
            return self._review.derive_smart_actions()

    def group_stats(self) -> GroupStats | None:
        with self._lock:
            return self._review.group_stats()

    def apply_group_action(self, index: int) -> SmartAction | None:
        with self._command():
            action = self._review.apply_action(index)
            if action is not None and not self._review.is_open:
                self._emit("review.closed", message=action.title)
            return action

    def apply_group_decisions(self, to_keep: Iterable[str], to_bin: Iterable[str]) -> tuple[int, int]:
        """Keep and bin explicit members of the open review."""

        with self._command():
            was_open = self._review.is_open
            result = self._review.apply_bulk(list(to_keep), list(to_bin))
            if was_open and not self._review.is_open:
                self._emit("review.closed")
            return result

    def move_group_to_folder(self, record_ids: Iterable[str], folder: Path) -> int:
        """Move members of the open review into ``folder``; protected apps stay put."""

        with self._command():
            was_open = self._review.is_open
            wanted = list(record_ids)
            moved = self._review.move_to_folder(wanted, folder)
            for record_id in wanted:
                if not self._store.contains(record_id):
                    self._thumbnails.cancel(record_id)
            if was_open and not self._review.is_open:
                self._emit("review.closed")
            return moved

    def close_group_review(self) -> None:
        with self._command():
            if self._review.is_open:
                self._review.close()
                logger.info("Closed group review", extra={"session_event": "review.closed"})
                self._emit("review.closed")


__all__ = ["DeclutterSession"]
