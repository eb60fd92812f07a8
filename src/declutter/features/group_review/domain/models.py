"""Data structures for reviewing one suggestion's group of files.

Where: features/group_review/domain/models.py
What: Review context, smart actions and group statistics.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from declutter.features.suggestions.domain.models import Suggestion
from declutter.features.triage.domain.models import FileRecord


@dataclass(frozen=True, slots=True)
class SmartAction:
    """Bulk action proposed for a group: which members to keep and which to bin."""

    title: str
    description: str
    icon: str
    keep_ids: tuple[str, ...] = ()
    bin_ids: tuple[str, ...] = ()


@dataclass(slots=True)
class ReviewContext:
    """Open group review: the originating suggestion plus its live members."""

    suggestion: Suggestion
    members: list[FileRecord] = field(default_factory=list)

    @property
    def member_ids(self) -> tuple[str, ...]:
        return tuple(member.id for member in self.members)

    @property
    def is_empty(self) -> bool:
        return not self.members

    def discard(self, record_ids: Iterable[str]) -> None:
        dropped = set(record_ids)
        self.members = [member for member in self.members if member.id not in dropped]

    def attach_preview(self, record_id: str, preview: object | None) -> bool:
        for index, member in enumerate(self.members):
            if member.id == record_id:
                self.members[index] = replace(member, preview=preview)
                return True
        return False


@dataclass(frozen=True, slots=True)
class GroupStats:
    count: int
    total_bytes: int
    date_range: str | None


__all__ = ["GroupStats", "ReviewContext", "SmartAction"]
