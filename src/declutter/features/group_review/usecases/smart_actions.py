"""Summary: Derive bulk actions and statistics for a review context.
Why: Smart actions are recomputed from live members each time they are shown or applied."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta
from typing import Final, assert_never

from declutter.features.suggestions.domain.models import (
    Duplicate,
    LargeFile,
    OldFile,
    SameSession,
    SimilarNames,
    TemporaryFile,
)
from declutter.features.triage.domain.models import FileRecord

from ..domain.models import GroupStats, ReviewContext, SmartAction

SIMILAR_NAMES_KEEP_LIMIT: Final[int] = 5
STALE_MEMBER_AGE: Final[timedelta] = timedelta(days=7)

_MB: Final[float] = 1024 * 1024


def newest_first(members: Sequence[FileRecord]) -> list[FileRecord]:
    """Sort by creation time, newest first; unknown timestamps sort as oldest."""

    return sorted(
        members,
        key=lambda member: member.created_at or datetime.min,
        reverse=True,
    )


def _megabytes(records: Sequence[FileRecord]) -> str:
    return f"{sum(record.size for record in records) / _MB:.1f}"


def _ids(records: Sequence[FileRecord]) -> tuple[str, ...]:
    return tuple(record.id for record in records)


def derive_smart_actions(context: ReviewContext, now: datetime) -> list[SmartAction]:
    """Ordered candidate bulk actions for the live members of ``context``."""

    members = list(context.members)
    if not members:
        return []
    kind = context.suggestion.kind

    if isinstance(kind, Duplicate):
        ordered = newest_first(members)
        return [
            SmartAction(
                title="Keep newest, delete others",
                description=f"Keep 1 file, delete {len(ordered) - 1}",
                icon="clock",
                keep_ids=_ids(ordered[:1]),
                bin_ids=_ids(ordered[1:]),
            )
        ]

    if isinstance(kind, SimilarNames):
        ordered = newest_first(members)
        keep_count = min(SIMILAR_NAMES_KEEP_LIMIT, len(ordered))
        to_bin = ordered[keep_count:]
        actions = [
            SmartAction(
                title=f"Keep newest {keep_count}, delete rest",
                description=f"Free {_megabytes(to_bin)} MB",
                icon="sparkles",
                keep_ids=_ids(ordered[:keep_count]),
                bin_ids=_ids(to_bin),
            )
        ]
        cutoff = now - STALE_MEMBER_AGE
        stale = [m for m in members if m.created_at is not None and m.created_at < cutoff]
        if stale:
            actions.append(
                SmartAction(
                    title="Delete files older than 1 week",
                    description=f"{len(stale)} files, {_megabytes(stale)} MB",
                    icon="calendar",
                    bin_ids=_ids(stale),
                )
            )
        return actions

    if isinstance(kind, SameSession):
        return [
            SmartAction(
                title="Keep all (created together)",
                description="These files are related",
                icon="check",
                keep_ids=_ids(members),
            ),
            SmartAction(
                title="Delete all",
                description=f"Free {_megabytes(members)} MB",
                icon="trash",
                bin_ids=_ids(members),
            ),
        ]

    if isinstance(kind, OldFile | LargeFile | TemporaryFile):
        return []
    assert_never(kind)


def format_date_range(earliest: datetime, latest: datetime, now: datetime) -> str:
    if earliest.date() == latest.date():
        day = "Today" if earliest.date() == now.date() else earliest.strftime("%b %d, %Y")
        return f"{day} {earliest:%H:%M} - {latest:%H:%M}"
    return f"{earliest:%b %d, %Y %H:%M} - {latest:%b %d, %Y %H:%M}"


def group_stats(context: ReviewContext, now: datetime) -> GroupStats:
    """Total size and creation-date span of the members."""

    members = context.members
    dates = [member.created_at for member in members if member.created_at is not None]
    date_range = format_date_range(min(dates), max(dates), now) if dates else None
    return GroupStats(
        count=len(members),
        total_bytes=sum(member.size for member in members),
        date_range=date_range,
    )


__all__ = [
    "SIMILAR_NAMES_KEEP_LIMIT",
    "STALE_MEMBER_AGE",
    "derive_smart_actions",
    "format_date_range",
    "group_stats",
    "newest_first",
]
