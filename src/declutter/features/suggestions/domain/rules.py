"""Summary: Pure detection rules producing suggestions for a focused file.
Why: Keep the heuristics free of threads and I/O so they stay easy to test."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePath
from typing import Final

from declutter.config.settings import (
    LARGE_FILE_BYTES,
    OLD_FILE_DAYS,
    SAME_SESSION_WINDOW_SECONDS,
    SIMILAR_NAMES_MIN_GROUP,
)
from declutter.features.triage.domain.models import FileRecord

from .models import (
    Duplicate,
    LargeFile,
    OldFile,
    SameSession,
    SimilarNames,
    Suggestion,
    SuggestionKind,
    TemporaryFile,
    kind_label,
)

SignatureFn = Callable[[FileRecord], str | None]
Checkpoint = Callable[[], None]

_MB: Final[int] = 1024 * 1024
_HUGE_FILE_BYTES: Final[int] = 500 * _MB
_DAYS_PER_YEAR: Final[float] = 365.25

_TEMP_EXTENSIONS: Final[frozenset[str]] = frozenset({"tmp", "cache", "log", "bak", "old"})
_TEMP_MARKERS: Final[tuple[str, ...]] = ("temp", "cache", "backup", "~")

_NUMBERED_PATTERNS: Final[tuple[tuple[re.Pattern[str], str], ...]] = (
    (re.compile(r"_\d{3,}"), "Numbered sequence"),
    (re.compile(r"_v\d+"), "Versioned files"),
    (re.compile(r"\s\(\d+\)"), "Numbered copies"),
)
_DATE_PATTERNS: Final[tuple[re.Pattern[str], ...]] = (
    re.compile(r"\d{4}[-_]\d{2}[-_]\d{2}"),
    re.compile(r"\d{8}"),
)


@dataclass(frozen=True, slots=True)
class DetectionThresholds:
    """Tunable limits for the detection rules."""

    same_session_seconds: float = SAME_SESSION_WINDOW_SECONDS
    similar_names_min_group: int = SIMILAR_NAMES_MIN_GROUP
    old_file_days: int = OLD_FILE_DAYS
    large_file_bytes: int = LARGE_FILE_BYTES


@dataclass(frozen=True, slots=True)
class NamePattern:
    """Naming family a file belongs to: ``category`` plus the part shared by members."""

    category: str
    shared_prefix: str
    label: str


def _no_checkpoint() -> None:
    return None


def _make(focused: FileRecord, kind: SuggestionKind, priority: int, message: str, hint: str | None) -> Suggestion:
    return Suggestion(
        id=f"{focused.id}:{kind_label(kind)}",
        kind=kind,
        priority=priority,
        message=message,
        action_hint=hint,
    )


# Duplicate -------------------------------------------------------------------


def detect_duplicates(
    focused: FileRecord,
    others: Sequence[FileRecord],
    signature: SignatureFn,
    checkpoint: Checkpoint = _no_checkpoint,
) -> Suggestion | None:
    """Files with the same size and content signature.

    When a signature is unavailable on either side, equal names stand in for it.
    """

    focused_signature: str | None = None
    signature_loaded = False
    matches: list[str] = []
    for other in others:
        checkpoint()
        if other.size != focused.size:
            continue
        if not signature_loaded:
            focused_signature = signature(focused)
            signature_loaded = True
        other_signature = signature(other) if focused_signature is not None else None
        if focused_signature is not None and other_signature is not None:
            same = focused_signature == other_signature
        else:
            same = other.name == focused.name
        if same:
            matches.append(other.id)

    if not matches:
        return None
    count = len(matches) + 1
    kind = Duplicate(count=count, member_ids=(focused.id, *matches))
    return _make(focused, kind, 10, f"{count} copies of this file", "Keep one, delete others?")


# Similar names ---------------------------------------------------------------


def name_pattern(name: str) -> NamePattern | None:
    """Classify ``name`` into a naming family, or ``None`` when it has none."""

    lowered = name.lower()
    if "cleanshot_" in lowered:
        return NamePattern("cleanshot", "cleanshot_", "CleanShot screenshots")
    if "screen shot" in lowered or "screenshot" in lowered:
        return NamePattern("screenshot", "screenshot", "Screenshots")
    for pattern, label in _NUMBERED_PATTERNS:
        match = pattern.search(lowered)
        if match is not None:
            return NamePattern("numbered", lowered[: match.start()], label)
    for pattern in _DATE_PATTERNS:
        match = pattern.search(lowered)
        if match is not None:
            stamp = match.group(0)
            return NamePattern("date", stamp, f"Files from {stamp}")
    return None


def detect_similar_names(
    focused: FileRecord,
    others: Sequence[FileRecord],
    *,
    min_group: int = SIMILAR_NAMES_MIN_GROUP,
    checkpoint: Checkpoint = _no_checkpoint,
) -> Suggestion | None:
    family = name_pattern(focused.name)
    if family is None:
        return None

    matches: list[str] = []
    for other in others:
        checkpoint()
        other_family = name_pattern(other.name)
        if other_family is None:
            continue
        if (other_family.category, other_family.shared_prefix) == (
            family.category,
            family.shared_prefix,
        ):
            matches.append(other.id)

    count = len(matches) + 1
    if count < min_group:
        return None
    kind = SimilarNames(
        shared_prefix=family.shared_prefix,
        count=count,
        member_ids=(focused.id, *matches),
        pattern=family.label,
    )
    return _make(focused, kind, 8, f"{count} {family.label.lower()}", "Review together?")


# Same session ----------------------------------------------------------------


def detect_same_session(
    focused: FileRecord,
    others: Sequence[FileRecord],
    *,
    window_seconds: float = SAME_SESSION_WINDOW_SECONDS,
    checkpoint: Checkpoint = _no_checkpoint,
) -> Suggestion | None:
    """Files created within ``window_seconds`` of the focused file (at least two others)."""

    if focused.created_at is None:
        return None

    matches: list[str] = []
    for other in others:
        checkpoint()
        if other.created_at is None:
            continue
        delta = abs((focused.created_at - other.created_at).total_seconds())
        if delta <= window_seconds:
            matches.append(other.id)

    if len(matches) < 2:
        return None
    kind = SameSession(member_ids=(focused.id, *matches))
    return _make(
        focused,
        kind,
        5,
        f"{len(matches) + 1} files from same session",
        "Created together - review together?",
    )


# Single-file rules -----------------------------------------------------------


def describe_age(days: int) -> str:
    """Human phrase for an age in days."""

    years = int(days / _DAYS_PER_YEAR)
    if years >= 2:
        return f"Created {years} years ago"
    if years == 1:
        return "Created over a year ago"
    months = days // 30
    if months >= 2:
        return f"Created {months} months ago"
    return f"Created {days} days ago"


def detect_old_file(
    focused: FileRecord,
    now: datetime,
    *,
    threshold_days: int = OLD_FILE_DAYS,
) -> Suggestion | None:
    if focused.created_at is None:
        return None
    age_days = (now - focused.created_at).days
    if age_days < threshold_days:
        return None
    if age_days / _DAYS_PER_YEAR >= 2:
        return _make(focused, OldFile(age_days=age_days), 6, describe_age(age_days), "Still needed?")
    return _make(focused, OldFile(age_days=age_days), 4, describe_age(age_days), None)


def detect_large_file(
    focused: FileRecord,
    *,
    threshold_bytes: int = LARGE_FILE_BYTES,
) -> Suggestion | None:
    if focused.size < threshold_bytes:
        return None
    message = f"{focused.size / _MB:.1f} MB - Large file"
    kind = LargeFile(size_bytes=focused.size)
    if focused.size >= _HUGE_FILE_BYTES:
        return _make(focused, kind, 7, message, "Taking up significant space")
    return _make(focused, kind, 5, message, None)


def detect_temporary_file(focused: FileRecord) -> Suggestion | None:
    lowered = focused.name.lower()
    extension = PurePath(lowered).suffix.lstrip(".")
    if extension in _TEMP_EXTENSIONS or any(marker in lowered for marker in _TEMP_MARKERS):
        return _make(focused, TemporaryFile(), 9, "Looks like a temporary file", "Safe to delete?")
    return None


# Orchestration ---------------------------------------------------------------


def detect_all(
    focused: FileRecord,
    window: Sequence[FileRecord],
    *,
    now: datetime,
    signature: SignatureFn,
    thresholds: DetectionThresholds | None = None,
    checkpoint: Checkpoint = _no_checkpoint,
) -> list[Suggestion]:
    """Run every rule for ``focused`` against ``window``; highest priority first.

    ``checkpoint`` is called between rules and candidates; it raises to abort.
    """

    limits = thresholds or DetectionThresholds()
    others = [record for record in window if record.id != focused.id]

    found: list[Suggestion | None] = []
    found.append(detect_duplicates(focused, others, signature, checkpoint))
    checkpoint()
    found.append(
        detect_similar_names(
            focused, others, min_group=limits.similar_names_min_group, checkpoint=checkpoint
        )
    )
    checkpoint()
    found.append(detect_old_file(focused, now, threshold_days=limits.old_file_days))
    found.append(detect_large_file(focused, threshold_bytes=limits.large_file_bytes))
    checkpoint()
    found.append(
        detect_same_session(
            focused, others, window_seconds=limits.same_session_seconds, checkpoint=checkpoint
        )
    )
    found.append(detect_temporary_file(focused))
    checkpoint()

    suggestions = [item for item in found if item is not None]
    suggestions.sort(key=lambda item: item.priority, reverse=True)
    return suggestions


__all__ = [
    "Checkpoint",
    "DetectionThresholds",
    "NamePattern",
    "SignatureFn",
    "describe_age",
    "detect_all",
    "detect_duplicates",
    "detect_large_file",
    "detect_old_file",
    "detect_same_session",
    "detect_similar_names",
    "detect_temporary_file",
    "name_pattern",
]
