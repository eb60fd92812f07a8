"""Tests for decision commits, bookkeeping and bin/stack maintenance."""

from __future__ import annotations

from pathlib import Path

from declutter.features.triage.domain.models import Decision, FileRecord, FileType
from declutter.features.triage.usecases.decision_engine import DecisionEngine, is_protected_app
from declutter.features.triage.usecases.session_store import SessionStore
from declutter.features.triage.usecases.undo_history import UndoHistory
from declutter.shared.events import SessionEvent


def _build(
    records: list[FileRecord],
    mover,
    *,
    cloud=None,
    folder_mover=None,
    immediate_binning: bool = True,
    events: list[SessionEvent] | None = None,
) -> tuple[SessionStore, UndoHistory, DecisionEngine]:
    store = SessionStore()
    store.load(records, location=Path("/Users/me/Desktop"))
    history = UndoHistory(store, limit=50)
    engine = DecisionEngine(
        store,
        history,
        file_mover=mover,
        cloud_mover=cloud,
        folder_mover=folder_mover,
        immediate_binning=immediate_binning,
        emit=events.append if events is not None else None,
    )
    _ = store.current()
    return store, history, engine


def _conserved(store: SessionStore, engine: DecisionEngine) -> int:
    counters = store.counters
    return len(store) + counters.kept + counters.binned + len(engine.stacked) + counters.relocated


def test_keep_removes_file_and_counts(make_record, mover) -> None:
    records = [make_record(), make_record()]
    store, history, engine = _build(records, mover)

    assert engine.apply(Decision.KEEP, records[0])

    assert store.counters.kept == 1
    assert len(store) == 1
    assert store.current() == records[1]
    assert len(history) == 1
    assert history.entries[0].previous_cursor == 0


def test_bin_in_immediate_mode_trashes(make_record, mover) -> None:
    record = make_record(size=2_048)
    store, _, engine = _build([record], mover)

    assert engine.apply(Decision.BIN, record)

    assert mover.trashed == [record.id]
    assert store.counters.binned == 1
    assert store.counters.reclaimed_bytes == 2_048
    assert engine.pending_bin == ()


def test_bin_in_deferred_mode_collects(make_record, mover) -> None:
    record = make_record()
    _, _, engine = _build([record], mover, immediate_binning=False)

    _ = engine.apply(Decision.BIN, record)

    assert mover.trashed == []
    assert [r.id for r in engine.pending_bin] == [record.id]
    assert engine.pending_bin[0].decision is Decision.BIN


def test_failed_trash_still_commits_and_reports(make_record, mover) -> None:
    record = make_record()
    mover.fail_ids.add(record.id)
    events: list[SessionEvent] = []
    store, _, engine = _build([record], mover, events=events)

    assert engine.apply(Decision.BIN, record)

    assert store.counters.binned == 1
    assert "move.failed" in [event.name for event in events]


def test_stack_collects_without_counters(make_record, mover) -> None:
    record = make_record()
    store, _, engine = _build([record], mover)

    _ = engine.apply(Decision.STACK, record)

    assert [r.id for r in engine.stacked] == [record.id]
    assert store.counters.kept == 0
    assert _conserved(store, engine) == 1


def test_cloud_relocates_and_records_destination(make_record, mover, cloud_mover) -> None:
    record = make_record()
    store, history, engine = _build([record], mover, cloud=cloud_mover)

    assert engine.apply(Decision.CLOUD, record)

    destination = cloud_mover.relocated[record.id]
    assert store.counters.relocated == 1
    assert engine.relocated[0].path == destination
    assert history.entries[0].destination == destination


def test_cloud_failure_commits_nothing(make_record, mover, cloud_mover) -> None:
    record = make_record()
    cloud_mover.fail_ids.add(record.id)
    events: list[SessionEvent] = []
    store, history, engine = _build([record], mover, cloud=cloud_mover, events=events)

    assert not engine.apply(Decision.CLOUD, record)

    assert len(store) == 1
    assert len(history) == 0
    assert [event.name for event in events] == ["move.failed"]


def test_cloud_without_destination_is_refused(make_record, mover) -> None:
    record = make_record()
    store, _, engine = _build([record], mover)

    assert not engine.cloud_available
    assert not engine.apply(Decision.CLOUD, record)
    assert len(store) == 1


def test_protected_app_bundle_is_not_relocated(make_record, mover, cloud_mover) -> None:
    app = make_record("Safari.app", file_type=FileType.APP, folder=Path("/Applications"))
    store, _, engine = _build([app], mover, cloud=cloud_mover)

    assert is_protected_app(app)
    assert not engine.apply(Decision.CLOUD, app)
    assert cloud_mover.relocated == {}
    assert len(store) == 1


def test_decision_for_absent_file_is_ignored(make_record, mover) -> None:
    record = make_record()
    store, _, engine = _build([record], mover)
    _ = engine.apply(Decision.KEEP, record)

    assert not engine.apply(Decision.BIN, record)
    assert store.counters.binned == 0


def test_apply_all_counts_present_files_only(make_record, mover) -> None:
    records = [make_record() for _ in range(3)]
    store, _, engine = _build(records, mover)
    _ = engine.apply(Decision.KEEP, records[0])

    applied = engine.apply_all(Decision.BIN, records)

    assert applied == 2
    assert store.finished
    assert _conserved(store, engine) == 3


def test_skip_removes_without_counting(make_record, mover) -> None:
    records = [make_record(), make_record()]
    store, _, engine = _build(records, mover)

    assert engine.skip(records[0])

    assert len(store) == 1
    assert store.counters.kept == store.counters.binned == 0
    assert engine.activity.entries()[-1].title == "Skipped"


def test_undo_restores_file_at_original_position(make_record, mover) -> None:
    records = [make_record() for _ in range(3)]
    store, history, engine = _build(records, mover)
    store.set_cursor(1)
    _ = engine.apply(Decision.KEEP, records[1])

    entry = engine.undo()

    assert entry is not None
    assert store.records == tuple(records)
    assert store.current() == records[1]
    assert store.counters.kept == 0
    assert history.can_redo


def test_undo_cloud_moves_file_back(make_record, mover, cloud_mover) -> None:
    record = make_record()
    store, _, engine = _build([record], mover, cloud=cloud_mover)
    _ = engine.apply(Decision.CLOUD, record)

    _ = engine.undo()

    assert cloud_mover.restored == [(cloud_mover.relocated[record.id], record.path)]
    assert store.counters.relocated == 0
    assert engine.relocated == ()


def test_failed_cloud_restore_keeps_entry(make_record, mover, cloud_mover) -> None:
    record = make_record()
    store, history, engine = _build([record], mover, cloud=cloud_mover)
    _ = engine.apply(Decision.CLOUD, record)
    cloud_mover.fail_restore = True

    assert engine.undo() is None

    assert len(store) == 0
    assert history.can_undo
    assert store.counters.relocated == 1


def test_redo_reapplies_decision(make_record, mover) -> None:
    record = make_record(size=100)
    store, history, engine = _build([record], mover, immediate_binning=False)
    _ = engine.apply(Decision.BIN, record)
    _ = engine.undo()

    entry = engine.redo()

    assert entry is not None
    assert store.counters.binned == 1
    assert [r.id for r in engine.pending_bin] == [record.id]
    assert not history.can_redo


def test_new_decision_clears_redo(make_record, mover) -> None:
    records = [make_record(), make_record()]
    _, history, engine = _build(records, mover)
    _ = engine.apply(Decision.KEEP, records[0])
    _ = engine.undo()

    _ = engine.apply(Decision.KEEP, records[1])

    assert not history.can_redo


def test_reset_undoes_everything(make_record, mover) -> None:
    records = [make_record() for _ in range(3)]
    store, _, engine = _build(records, mover, immediate_binning=False)
    _ = engine.apply(Decision.KEEP, records[0])
    _ = engine.apply(Decision.BIN, records[1])
    _ = engine.apply(Decision.STACK, records[2])

    assert engine.reset() == 3

    assert store.records == tuple(records)
    assert store.counters.kept == store.counters.binned == 0
    assert engine.stacked == engine.pending_bin == ()


def test_restore_from_bin_returns_file_to_head(make_record, mover) -> None:
    records = [make_record(size=10), make_record(size=10)]
    store, history, engine = _build(records, mover, immediate_binning=False)
    _ = engine.apply(Decision.BIN, records[0])

    assert engine.restore_from_bin(records[0].id)

    assert store.records[0].id == records[0].id
    assert store.records[0].decision is None
    assert store.counters.binned == 0
    assert store.counters.reclaimed_bytes == 0
    assert store.current() == records[1]
    assert not history.can_undo


def test_restore_into_finished_session_focuses_file(make_record, mover) -> None:
    record = make_record()
    store, _, engine = _build([record], mover, immediate_binning=False)
    _ = engine.apply(Decision.BIN, record)
    assert store.finished

    _ = engine.restore_from_bin(record.id)

    assert store.current() == record


def test_remove_from_bin_trashes_and_keeps_count(make_record, mover) -> None:
    record = make_record()
    store, _, engine = _build([record], mover, immediate_binning=False)
    _ = engine.apply(Decision.BIN, record)

    assert engine.remove_from_bin(record.id)

    assert mover.trashed == [record.id]
    assert engine.pending_bin == ()
    assert store.counters.binned == 1


def test_empty_bin_reports_successful_moves(make_record, mover) -> None:
    records = [make_record(), make_record()]
    mover.fail_ids.add(records[1].id)
    store, history, engine = _build(records, mover, immediate_binning=False)
    _ = engine.apply_all(Decision.BIN, records)

    assert engine.empty_bin() == 1

    assert engine.pending_bin == ()
    assert store.counters.binned == 2
    assert not history.can_undo


def test_stack_maintenance_preserves_conservation(make_record, mover) -> None:
    records = [make_record() for _ in range(4)]
    store, _, engine = _build(records, mover)
    _ = engine.apply_all(Decision.STACK, records)

    assert engine.keep_stacked([records[0].id]) == 1
    assert engine.bin_stacked([records[1].id]) == 1
    assert engine.unstack(records[2].id)
    assert engine.empty_stack() == 1

    assert store.counters.kept == 1
    assert store.counters.binned == 2
    assert [r.id for r in store.records] == [records[2].id]
    assert engine.stacked == ()
    assert _conserved(store, engine) == 4


def test_decisions_publish_events(make_record, mover) -> None:
    record = make_record()
    events: list[SessionEvent] = []
    _, _, engine = _build([record], mover, events=events)

    _ = engine.apply(Decision.KEEP, record)
    _ = engine.undo()

    assert [event.name for event in events] == ["decision.keep", "decision.undo"]
    assert events[0].file_id == record.id


ARCHIVE = Path("/Users/me/Archive")


def test_move_to_folder_records_destination_and_counts(make_record, mover, folder_mover) -> None:
    records = [make_record(), make_record()]
    store, history, engine = _build(records, mover, folder_mover=folder_mover)

    assert engine.move_to_folder(records[0], ARCHIVE)

    assert folder_mover.moved == {records[0].id: ARCHIVE / records[0].name}
    assert store.counters.relocated == 1
    assert engine.relocated[0].path == ARCHIVE / records[0].name
    assert engine.relocated[0].decision is Decision.MOVE
    assert history.entries[0].destination == ARCHIVE / records[0].name
    assert store.current() == records[1]
    assert _conserved(store, engine) == 2


def test_move_undo_and_redo_round_trip(make_record, mover, folder_mover) -> None:
    record = make_record()
    store, _, engine = _build([record], mover, folder_mover=folder_mover)
    _ = engine.move_to_folder(record, ARCHIVE)

    assert engine.undo() is not None
    assert folder_mover.restored == [(ARCHIVE / record.name, record.path)]
    assert store.counters.relocated == 0
    assert engine.relocated == ()

    folder_mover.moved.clear()
    assert engine.redo() is not None
    assert folder_mover.moved == {record.id: ARCHIVE / record.name}
    assert store.counters.relocated == 1


def test_move_failure_or_missing_folder_commits_nothing(make_record, mover, folder_mover) -> None:
    record = make_record()
    folder_mover.fail_ids.add(record.id)
    events: list[SessionEvent] = []
    store, history, engine = _build([record], mover, folder_mover=folder_mover, events=events)

    assert not engine.move_to_folder(record, ARCHIVE)
    assert not engine.apply(Decision.MOVE, record)

    assert len(store) == 1
    assert len(history) == 0
    assert [event.name for event in events] == ["move.failed", "move.failed"]


def test_move_all_skips_protected_apps(make_record, mover, folder_mover) -> None:
    app = make_record("Safari.app", file_type=FileType.APP, folder=Path("/Applications"))
    files = [make_record(), make_record()]
    store, _, engine = _build([app, *files], mover, folder_mover=folder_mover)

    assert engine.move_all_to_folder([app, *files], ARCHIVE) == 2

    assert sorted(folder_mover.moved) == sorted(f.id for f in files)
    assert store.records == (app,)
    assert _conserved(store, engine) == 3


def test_entering_a_folder_parks_history_until_return(make_record, mover) -> None:
    folder = make_record("Projects", file_type=FileType.FOLDER)
    loose = make_record()
    store, history, engine = _build([folder, loose], mover)
    _ = engine.apply(Decision.KEEP, folder)
    _ = engine.undo()
    child = make_record(folder=Path("/Users/me/Desktop/Projects"))

    engine.enter_folder(folder.path, [child])
    assert store.breadcrumb == "Desktop > Projects"
    assert not history.can_undo
    assert history.can_redo is False
    _ = engine.apply(Decision.KEEP, child)
    assert engine.return_to_parent()

    assert store.records == (folder, loose)
    assert store.counters.kept == 1
    assert history.can_redo
    assert engine.return_to_parent() is False
    titles = [entry.title for entry in engine.activity.entries()]
    assert titles[-3:] == ["Entered folder", "Keep", "Returned to parent folder"]
