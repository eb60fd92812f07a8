"""Tests for file type classification and hidden entry detection."""

from __future__ import annotations

from pathlib import Path

import pytest

from declutter.features.triage.domain.classification import classify, is_hidden_or_system
from declutter.features.triage.domain.models import FileType


@pytest.mark.parametrize(
    ("name", "is_directory", "expected"),
    [
        ("Screenshot 2024.PNG", False, FileType.IMAGE),
        ("clip.mov", False, FileType.VIDEO),
        ("song.flac", False, FileType.AUDIO),
        ("report.pdf", False, FileType.DOCUMENT),
        ("backup.zip", False, FileType.ARCHIVE),
        ("Tool.app", True, FileType.APP),
        ("Projects", True, FileType.FOLDER),
        ("mystery.xyz", False, FileType.OTHER),
        ("Makefile", False, FileType.OTHER),
    ],
)
def test_classify(name: str, is_directory: bool, expected: FileType) -> None:
    assert classify(Path(name), is_directory=is_directory) is expected


@pytest.mark.parametrize("name", [".DS_Store", "$RECYCLE.BIN", "desktop.ini", "Thumbs.db"])
def test_hidden_and_system_entries(name: str) -> None:
    assert is_hidden_or_system(name)


def test_regular_names_are_visible() -> None:
    assert not is_hidden_or_system("notes.txt")


def test_file_type_from_user_input_accepts_labels() -> None:
    assert FileType.from_user_input(" Images ") is FileType.IMAGE
    assert FileType.from_user_input("video") is FileType.VIDEO
    with pytest.raises(ValueError):
        _ = FileType.from_user_input("spreadsheets")
