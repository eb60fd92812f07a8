"""Summary: Working list, cursor, type filter and suggestion cache for one session.
Why: Give decisions, undo and suggestions a single owner of "which files are left"."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Final

from declutter.platform.logging import logger

from ..domain.models import FileRecord, FileType, SessionCounters

if TYPE_CHECKING:
    from declutter.features.suggestions.domain.models import Suggestion

FocusListener = Callable[[FileRecord | None], None]

BREADCRUMB_SEPARATOR: Final[str] = " > "


@dataclass(slots=True)
class FolderContext:
    """Parent level saved while the user reviews one of its subfolders."""

    location: Path | None
    records: list[FileRecord]
    cursor: int
    active_filter: FileType | None
    total_loaded: int
    suggestions: dict[str, tuple[Suggestion, ...]] = field(default_factory=dict)
    viewed: set[str] = field(default_factory=set)


class SessionStore:
    """Own the untriaged files of a session and the cursor over their visible subset.

    The visible sequence is the working list filtered by the active type,
    in working-list order. The cursor indexes the visible sequence and stays
    within ``[0, visible_count]``; ``cursor == visible_count`` means finished.
    """

    def __init__(self, *, on_focus_change: FocusListener | None = None) -> None:
        self._records: list[FileRecord] = []
        self._cursor: int = 0
        self._filter: FileType | None = None
        self._suggestions: dict[str, tuple[Suggestion, ...]] = {}
        self._viewed: set[str] = set()
        self._last_focus_id: str | None = None
        self._focus_observed: bool = False
        self._location: Path | None = None
        self._total_loaded: int = 0
        self._parents: list[FolderContext] = []
        self.counters: SessionCounters = SessionCounters()
        self.on_focus_change: FocusListener | None = on_focus_change

    # Loading and filtering -------------------------------------------------

    def load(self, records: Sequence[FileRecord], *, location: Path | None = None) -> None:
        """Replace the working list and reset cursor, filter, cache, counters and folder stack."""

        self._install(records, location)
        self._parents.clear()
        self.counters.reset()
        logger.debug("Session store loaded %d records", len(self._records))

    def _install(self, records: Sequence[FileRecord], location: Path | None) -> None:
        seen: set[str] = set()
        for record in records:
            if record.id in seen:
                raise ValueError(f"Duplicate file identity in session load: {record.id}")
            seen.add(record.id)

        self._records = list(records)
        self._cursor = 0
        self._filter = None
        self._suggestions = {}
        self._viewed = set()
        self._last_focus_id = None
        self._focus_observed = False
        self._location = location
        self._total_loaded = len(self._records)

    def clear(self) -> None:
        """Empty the working list (used when a scan fails)."""

        self.load([], location=self._location)

    # Folder drill-down -----------------------------------------------------

    def enter_folder(self, records: Sequence[FileRecord], *, location: Path) -> None:
        """Park the current level and make ``records`` the working list.

        Counters stay session-wide; cursor, filter, suggestion cache and
        viewed set start fresh for the subfolder.
        """

        parked = FolderContext(
            location=self._location,
            records=self._records,
            cursor=self._cursor,
            active_filter=self._filter,
            total_loaded=self._total_loaded,
            suggestions=self._suggestions,
            viewed=self._viewed,
        )
        self._install(records, location)
        self._parents.append(parked)
        logger.debug("Entered %s with %d records", location, len(self._records))

    def return_to_parent(self) -> bool:
        """Restore the parked parent level; ``False`` at the top level.

        The parent's cursor is clamped to its current visible count.
        """

        if not self._parents:
            return False
        left = self._location
        parked = self._parents.pop()
        self._records = parked.records
        self._filter = parked.active_filter
        self._location = parked.location
        self._total_loaded = parked.total_loaded
        self._suggestions = parked.suggestions
        self._viewed = parked.viewed
        self._cursor = min(parked.cursor, self.visible_count)
        self._last_focus_id = None
        self._focus_observed = False
        logger.debug("Returned from %s to %s", left, self._location)
        return True

    @property
    def folder_depth(self) -> int:
        return len(self._parents)

    @property
    def parked_count(self) -> int:
        """Files still waiting in parent levels."""

        return sum(len(parked.records) for parked in self._parents)

    @property
    def breadcrumbs(self) -> tuple[str, ...]:
        """Folder names from the top level down to the current one."""

        locations = [parked.location for parked in self._parents] + [self._location]
        return tuple(location.name for location in locations if location is not None)

    @property
    def breadcrumb(self) -> str:
        return BREADCRUMB_SEPARATOR.join(self.breadcrumbs)

    def set_filter(self, file_type: FileType | None) -> None:
        """Replace the active type predicate and rewind the cursor."""

        self._filter = file_type
        self._cursor = 0

    @property
    def active_filter(self) -> FileType | None:
        return self._filter

    @property
    def location(self) -> Path | None:
        return self._location

    @property
    def total_loaded(self) -> int:
        return self._total_loaded

    # Views -----------------------------------------------------------------

    @property
    def records(self) -> tuple[FileRecord, ...]:
        return tuple(self._records)

    def visible(self) -> list[FileRecord]:
        """Working list filtered by the active type, order preserved."""

        if self._filter is None:
            return list(self._records)
        return [record for record in self._records if record.file_type is self._filter]

    @property
    def visible_count(self) -> int:
        return len(self.visible())

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def finished(self) -> bool:
        return self._cursor >= self.visible_count

    def __len__(self) -> int:
        return len(self._records)

    def window(self, size: int) -> list[FileRecord]:
        """First ``size`` records of the unfiltered working list."""

        return self._records[:size]

    def contains(self, record_id: str) -> bool:
        return self.index_of(record_id) is not None

    def get(self, record_id: str) -> FileRecord | None:
        index = self.index_of(record_id)
        return None if index is None else self._records[index]

    def index_of(self, record_id: str) -> int | None:
        """Position of ``record_id`` in the unfiltered working list."""

        for index, record in enumerate(self._records):
            if record.id == record_id:
                return index
        return None

    def visible_index_of(self, record_id: str) -> int | None:
        """Position of ``record_id`` in the visible sequence."""

        for index, record in enumerate(self.visible()):
            if record.id == record_id:
                return index
        return None

    @property
    def viewed_ids(self) -> frozenset[str]:
        return frozenset(self._viewed)

    def forget_viewed(self, record_id: str) -> None:
        self._viewed.discard(record_id)

    # Focus -----------------------------------------------------------------

    def current(self) -> FileRecord | None:
        """Return the record under the cursor.

        The focus listener fires only when the identity returned here differs
        from the previously observed one.
        """

        visible = self.visible()
        record = visible[self._cursor] if self._cursor < len(visible) else None
        record_id = record.id if record is not None else None

        if record is not None:
            self._viewed.add(record.id)

        if not self._focus_observed or record_id != self._last_focus_id:
            self._focus_observed = True
            self._last_focus_id = record_id
            if self.on_focus_change is not None:
                self.on_focus_change(record)
        return record

    @property
    def focused_id(self) -> str | None:
        """Identity most recently returned by ``current()``."""

        return self._last_focus_id

    # Cursor movement -------------------------------------------------------

    def advance(self) -> None:
        """Move the cursor forward by one, never past ``visible_count``."""

        self._cursor = min(self._cursor + 1, self.visible_count)

    def go_forward(self) -> bool:
        """Step to the next visible file; stays on the last one."""

        if self._cursor < self.visible_count - 1:
            self._cursor += 1
            return True
        return False

    def go_back(self) -> bool:
        if self._cursor > 0:
            self._cursor = min(self._cursor - 1, self.visible_count)
            return True
        return False

    def set_cursor(self, index: int) -> None:
        self._cursor = max(0, min(index, self.visible_count))

    def clamp_cursor(self) -> None:
        self.set_cursor(self._cursor)

    # Mutation --------------------------------------------------------------

    def remove(self, record_id: str) -> FileRecord | None:
        """Remove ``record_id`` from the working list regardless of the filter.

        The file's suggestion cache entry goes with it. Removing a visible file
        before the cursor shifts the cursor back so the focused file stays
        focused; removing the focused file leaves the cursor on its successor.
        """

        index = self.index_of(record_id)
        if index is None:
            return None

        visible_index = self.visible_index_of(record_id)
        record = self._records.pop(index)
        _ = self._suggestions.pop(record_id, None)

        if visible_index is not None and visible_index < self._cursor:
            self._cursor -= 1
        self.clamp_cursor()
        return record

    def reinsert(self, record: FileRecord, at_index: int | None = None) -> int:
        """Insert a previously removed record at ``at_index`` when valid, else at the tail."""

        if self.contains(record.id):
            raise ValueError(f"File identity already present in session: {record.id}")

        if at_index is not None and 0 <= at_index <= len(self._records):
            self._records.insert(at_index, record)
            return at_index
        self._records.append(record)
        return len(self._records) - 1

    def attach_preview(self, record_id: str, preview: object | None) -> FileRecord | None:
        """Swap in a copy of the record carrying ``preview``; ignored for absent files."""

        index = self.index_of(record_id)
        if index is None:
            return None
        updated = replace(self._records[index], preview=preview)
        self._records[index] = updated
        return updated

    # Suggestion cache ------------------------------------------------------

    def cached_suggestions(self, record_id: str) -> tuple[Suggestion, ...] | None:
        return self._suggestions.get(record_id)

    def store_suggestions(self, record_id: str, suggestions: Sequence[Suggestion]) -> bool:
        """Cache ``suggestions`` for a present file; an existing entry wins."""

        if record_id in self._suggestions or not self.contains(record_id):
            return False
        self._suggestions[record_id] = tuple(suggestions)
        return True

    def invalidate_suggestions(self, record_id: str) -> None:
        _ = self._suggestions.pop(record_id, None)

    @property
    def cached_ids(self) -> frozenset[str]:
        return frozenset(self._suggestions)


__all__ = ["BREADCRUMB_SEPARATOR", "FocusListener", "FolderContext", "SessionStore"]
