"""Tests for sampled content fingerprints."""

from __future__ import annotations

from pathlib import Path

from declutter.features.suggestions.adapters.fingerprint import SampledContentFingerprinter
from declutter.features.triage.domain.models import FileRecord, FileType


def _record(path: Path) -> FileRecord:
    size = path.stat().st_size if path.is_file() else 0
    return FileRecord(id=path.name, path=path, name=path.name, size=size, file_type=FileType.OTHER)


def test_identical_content_shares_fingerprint(tmp_path: Path) -> None:
    first = tmp_path / "a.bin"
    second = tmp_path / "b.bin"
    different = tmp_path / "c.bin"
    _ = first.write_bytes(b"payload")
    _ = second.write_bytes(b"payload")
    _ = different.write_bytes(b"PAYLOAD")
    fingerprinter = SampledContentFingerprinter()

    assert fingerprinter.fingerprint(_record(first)) == fingerprinter.fingerprint(_record(second))
    assert fingerprinter.fingerprint(_record(first)) != fingerprinter.fingerprint(_record(different))


def test_only_head_sample_is_read(tmp_path: Path) -> None:
    first = tmp_path / "a.bin"
    second = tmp_path / "b.bin"
    _ = first.write_bytes(b"same-head" + b"1" * 100)
    _ = second.write_bytes(b"same-head" + b"2" * 100)
    fingerprinter = SampledContentFingerprinter(sample_bytes=9, chunk_size=4)

    assert fingerprinter.fingerprint(_record(first)) == fingerprinter.fingerprint(_record(second))


def test_directories_and_missing_files_have_no_fingerprint(tmp_path: Path) -> None:
    fingerprinter = SampledContentFingerprinter()

    assert fingerprinter.fingerprint(_record(tmp_path)) is None
    assert fingerprinter.fingerprint(_record(tmp_path / "missing.bin")) is None
