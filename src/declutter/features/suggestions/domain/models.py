"""Data structures describing suggestions about the focused file.

Where: features/suggestions/domain/models.py
What: The closed union of suggestion kinds and the ``Suggestion`` envelope.
Why: Consumers match kinds exhaustively instead of branching on loose strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias, assert_never


@dataclass(frozen=True, slots=True)
class Duplicate:
    """Files that share size and content signature with the focused file."""

    count: int
    member_ids: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class SimilarNames:
    """Files following the same naming pattern as the focused file."""

    shared_prefix: str
    count: int
    member_ids: tuple[str, ...]
    pattern: str


@dataclass(frozen=True, slots=True)
class SameSession:
    """Files created within a short window of the focused file."""

    member_ids: tuple[str, ...]

    @property
    def count(self) -> int:
        return len(self.member_ids)


@dataclass(frozen=True, slots=True)
class OldFile:
    age_days: int


@dataclass(frozen=True, slots=True)
class LargeFile:
    size_bytes: int


@dataclass(frozen=True, slots=True)
class TemporaryFile:
    pass


SuggestionKind: TypeAlias = Duplicate | SimilarNames | SameSession | OldFile | LargeFile | TemporaryFile
GroupKind: TypeAlias = Duplicate | SimilarNames | SameSession


@dataclass(frozen=True, slots=True)
class Suggestion:
    """A derived, read-only hint attached to one file."""

    id: str
    kind: SuggestionKind
    priority: int
    message: str
    action_hint: str | None = None

    @property
    def member_ids(self) -> tuple[str, ...]:
        return member_ids_of(self.kind)

    @property
    def is_group(self) -> bool:
        return bool(self.member_ids)


def member_ids_of(kind: SuggestionKind) -> tuple[str, ...]:
    """Group members (focused file first) or an empty tuple for single-file kinds."""

    if isinstance(kind, Duplicate | SimilarNames | SameSession):
        return kind.member_ids
    if isinstance(kind, OldFile | LargeFile | TemporaryFile):
        return ()
    assert_never(kind)


def kind_label(kind: SuggestionKind) -> str:
    """Short label used for suggestion ids and display."""

    if isinstance(kind, Duplicate):
        return "duplicate"
    if isinstance(kind, SimilarNames):
        return "similar_names"
    if isinstance(kind, SameSession):
        return "same_session"
    if isinstance(kind, OldFile):
        return "old_file"
    if isinstance(kind, LargeFile):
        return "large_file"
    if isinstance(kind, TemporaryFile):
        return "temporary_file"
    assert_never(kind)


__all__ = [
    "Duplicate",
    "GroupKind",
    "LargeFile",
    "OldFile",
    "SameSession",
    "SimilarNames",
    "Suggestion",
    "SuggestionKind",
    "TemporaryFile",
    "kind_label",
    "member_ids_of",
]
