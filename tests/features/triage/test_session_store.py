"""Tests for the working list, cursor and suggestion cache."""

from __future__ import annotations

from pathlib import Path

import pytest

from declutter.features.suggestions.domain.models import Suggestion, TemporaryFile
from declutter.features.triage.domain.models import FileRecord, FileType
from declutter.features.triage.usecases.session_store import SessionStore


def _suggestion(record_id: str) -> Suggestion:
    return Suggestion(id=f"{record_id}:temporary", kind=TemporaryFile(), priority=9, message="tmp")


def test_load_resets_cursor_filter_and_counters(make_record) -> None:
    store = SessionStore()
    store.load([make_record(), make_record()], location=Path("/desk"))
    store.set_filter(FileType.IMAGE)
    store.counters.kept = 4

    store.load([make_record()], location=Path("/other"))

    assert store.cursor == 0
    assert store.active_filter is None
    assert store.counters.kept == 0
    assert store.total_loaded == 1
    assert store.location == Path("/other")


def test_load_rejects_duplicate_identities(make_record) -> None:
    store = SessionStore()
    record = make_record()

    with pytest.raises(ValueError):
        store.load([record, record])


def test_current_notifies_only_on_identity_change(make_record) -> None:
    seen: list[str | None] = []
    store = SessionStore(on_focus_change=lambda r: seen.append(r.id if r else None))
    first, second = make_record(), make_record()
    store.load([first, second])

    _ = store.current()
    _ = store.current()
    store.advance()
    _ = store.current()
    store.advance()
    _ = store.current()

    assert seen == [first.id, second.id, None]


def test_empty_store_reports_finished_and_no_current() -> None:
    store = SessionStore()
    store.load([])

    assert store.finished
    assert store.current() is None


def test_filter_restricts_visible_sequence(make_record) -> None:
    store = SessionStore()
    records = [
        make_record(file_type=FileType.DOCUMENT),
        make_record(file_type=FileType.IMAGE),
        make_record(file_type=FileType.DOCUMENT),
        make_record(file_type=FileType.IMAGE),
        make_record(file_type=FileType.VIDEO),
    ]
    store.load(records)

    store.set_filter(FileType.IMAGE)

    assert [r.id for r in store.visible()] == [records[1].id, records[3].id]
    assert store.current() == records[1]
    assert len(store) == 5


def test_go_forward_stops_at_last_file_and_go_back_at_first(make_record) -> None:
    store = SessionStore()
    store.load([make_record(), make_record()])

    assert not store.go_back()
    assert store.go_forward()
    assert not store.go_forward()
    assert store.cursor == 1


def test_remove_before_cursor_keeps_focus(make_record) -> None:
    store = SessionStore()
    records = [make_record() for _ in range(4)]
    store.load(records)
    store.set_cursor(2)

    _ = store.remove(records[0].id)

    assert store.cursor == 1
    assert store.current() == records[2]


def test_remove_focused_file_moves_to_successor(make_record) -> None:
    store = SessionStore()
    records = [make_record() for _ in range(3)]
    store.load(records)
    store.set_cursor(1)

    _ = store.remove(records[1].id)

    assert store.current() == records[2]


def test_remove_last_file_clamps_cursor(make_record) -> None:
    store = SessionStore()
    records = [make_record() for _ in range(2)]
    store.load(records)
    store.set_cursor(1)

    _ = store.remove(records[1].id)

    assert store.cursor == 1
    assert store.finished


def test_remove_invisible_file_leaves_cursor(make_record) -> None:
    store = SessionStore()
    image = make_record(file_type=FileType.IMAGE)
    doc = make_record(file_type=FileType.DOCUMENT)
    other_image = make_record(file_type=FileType.IMAGE)
    store.load([image, doc, other_image])
    store.set_filter(FileType.IMAGE)
    store.set_cursor(1)

    _ = store.remove(doc.id)

    assert store.cursor == 1
    assert store.current() == other_image


def test_reinsert_rejects_present_identity(make_record) -> None:
    store = SessionStore()
    record = make_record()
    store.load([record])

    with pytest.raises(ValueError):
        _ = store.reinsert(record, 0)


def test_reinsert_out_of_range_appends(make_record) -> None:
    store = SessionStore()
    first, extra = make_record(), make_record()
    store.load([first])

    index = store.reinsert(extra, 10)

    assert index == 1
    assert store.records == (first, extra)


def test_suggestion_cache_first_writer_wins_and_removal_evicts(make_record) -> None:
    store = SessionStore()
    record = make_record()
    store.load([record])

    assert store.store_suggestions(record.id, [_suggestion(record.id)])
    assert not store.store_suggestions(record.id, [])
    assert store.cached_suggestions(record.id) == (_suggestion(record.id),)

    _ = store.remove(record.id)

    assert store.cached_ids == frozenset()
    assert not store.store_suggestions(record.id, [])


def test_attach_preview_swaps_record_copy(make_record) -> None:
    store = SessionStore()
    record = make_record()
    store.load([record])

    updated = store.attach_preview(record.id, "thumb")

    assert isinstance(updated, FileRecord)
    assert store.get(record.id).preview == "thumb"  # type: ignore[union-attr]
    assert store.attach_preview("missing", "thumb") is None


def test_window_ignores_filter(make_record) -> None:
    store = SessionStore()
    records = [make_record(file_type=FileType.IMAGE), make_record(file_type=FileType.VIDEO)]
    store.load(records)
    store.set_filter(FileType.IMAGE)

    assert store.window(10) == records
    assert store.window(1) == records[:1]


def test_invalidated_suggestions_can_be_recomputed(make_record) -> None:
    store = SessionStore()
    record = make_record()
    store.load([record])
    _ = store.store_suggestions(record.id, [])

    store.invalidate_suggestions(record.id)

    assert store.cached_suggestions(record.id) is None
    assert store.store_suggestions(record.id, [_suggestion(record.id)])


def test_viewed_ids_track_returned_files(make_record) -> None:
    store = SessionStore()
    first, second = make_record(), make_record()
    store.load([first, second])

    _ = store.current()

    assert store.viewed_ids == frozenset({first.id})
    store.forget_viewed(first.id)
    assert store.viewed_ids == frozenset()


def test_enter_folder_parks_parent_and_return_restores_it(make_record) -> None:
    store = SessionStore()
    parent = [make_record(file_type=FileType.FOLDER), make_record(file_type=FileType.IMAGE), make_record()]
    store.load(parent, location=Path("/Users/me/Desktop"))
    store.set_filter(FileType.IMAGE)
    _ = store.current()
    _ = store.store_suggestions(parent[1].id, [_suggestion(parent[1].id)])
    store.counters.kept = 2
    children = [make_record(folder=Path("/Users/me/Desktop/Projects")) for _ in range(2)]

    store.enter_folder(children, location=Path("/Users/me/Desktop/Projects"))

    assert store.records == tuple(children)
    assert store.cursor == 0
    assert store.active_filter is None
    assert store.cached_ids == frozenset()
    assert store.total_loaded == 2
    assert store.counters.kept == 2
    assert store.folder_depth == 1
    assert store.parked_count == 3
    assert store.breadcrumb == "Desktop > Projects"

    _ = store.remove(children[0].id)
    assert store.return_to_parent()

    assert store.records == tuple(parent)
    assert store.active_filter is FileType.IMAGE
    assert store.location == Path("/Users/me/Desktop")
    assert store.total_loaded == 3
    assert store.cached_ids == frozenset({parent[1].id})
    assert store.folder_depth == 0
    assert store.breadcrumbs == ("Desktop",)
    assert store.current() == parent[1]


def test_return_to_parent_clamps_cursor_and_renotifies(make_record) -> None:
    seen: list[str | None] = []
    store = SessionStore(on_focus_change=lambda record: seen.append(record.id if record else None))
    first, second = make_record(), make_record()
    store.load([first, second], location=Path("/desk"))
    store.set_cursor(1)
    _ = store.current()
    store.enter_folder([], location=Path("/desk/empty"))
    _ = store.current()
    store._parents[-1].cursor = 5  # pyright: ignore[reportPrivateUsage]

    assert store.return_to_parent()

    assert store.cursor == 2
    assert store.current() is None
    assert seen == [second.id, None, None]


def test_return_to_parent_at_top_level_is_refused(make_record) -> None:
    store = SessionStore()
    store.load([make_record()], location=Path("/desk"))

    assert store.return_to_parent() is False
    assert store.breadcrumb == "desk"


def test_load_drops_parked_folders(make_record) -> None:
    store = SessionStore()
    store.load([make_record()], location=Path("/desk"))
    store.enter_folder([make_record()], location=Path("/desk/sub"))

    store.load([make_record()], location=Path("/other"))

    assert store.folder_depth == 0
    assert store.parked_count == 0
    assert store.return_to_parent() is False
