"""Tests for the send2trash-backed mover."""

from __future__ import annotations

from pathlib import Path

import pytest
from pytest_mock import MockerFixture

from declutter.features.triage.adapters.trash_mover import TrashFileMover
from declutter.features.triage.domain.models import FileRecord, FileType
from declutter.features.triage.usecases.ports import MoveError


def _record(path: Path) -> FileRecord:
    return FileRecord(id="1", path=path, name=path.name, size=1, file_type=FileType.OTHER)


def test_trash_delegates_to_send2trash(tmp_path: Path, mocker: MockerFixture) -> None:
    target = tmp_path / "junk.tmp"
    _ = target.write_text("junk")
    send = mocker.patch("declutter.features.triage.adapters.trash_mover.send2trash.send2trash")

    TrashFileMover().trash(_record(target))

    send.assert_called_once_with(str(target))


def test_missing_file_raises_move_error(tmp_path: Path, mocker: MockerFixture) -> None:
    send = mocker.patch("declutter.features.triage.adapters.trash_mover.send2trash.send2trash")

    with pytest.raises(MoveError):
        TrashFileMover().trash(_record(tmp_path / "gone.txt"))

    send.assert_not_called()


def test_os_errors_become_move_errors(tmp_path: Path, mocker: MockerFixture) -> None:
    target = tmp_path / "locked.txt"
    _ = target.write_text("x")
    _ = mocker.patch(
        "declutter.features.triage.adapters.trash_mover.send2trash.send2trash",
        side_effect=OSError("permission denied"),
    )

    with pytest.raises(MoveError) as excinfo:
        TrashFileMover().trash(_record(target))

    assert "permission denied" in excinfo.value.reason
