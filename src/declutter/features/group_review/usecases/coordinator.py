"""Summary: Open, act on and close a review of one suggestion's file group.
Why: Bulk keep/bin/move over a group must go through the decision engine in one step."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path

from declutter.features.suggestions.domain.models import Suggestion, member_ids_of
from declutter.features.triage.domain.models import Decision
from declutter.features.triage.usecases.decision_engine import DecisionEngine
from declutter.features.triage.usecases.ports import PreviewCallback, ThumbnailPort
from declutter.features.triage.usecases.session_store import SessionStore
from declutter.platform.logging import logger

from ..domain.models import GroupStats, ReviewContext, SmartAction
from .smart_actions import derive_smart_actions, group_stats


class GroupReviewCoordinator:
    """Hold at most one open ``ReviewContext`` and apply bulk decisions to it."""

    def __init__(
        self,
        store: SessionStore,
        engine: DecisionEngine,
        *,
        thumbnails: ThumbnailPort | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store: SessionStore = store
        self._engine: DecisionEngine = engine
        self._thumbnails: ThumbnailPort | None = thumbnails
        self._clock: Callable[[], datetime] = clock
        self._context: ReviewContext | None = None

    @property
    def context(self) -> ReviewContext | None:
        return self._context

    @property
    def is_open(self) -> bool:
        return self._context is not None

    def start_review(
        self,
        suggestion: Suggestion,
        on_preview: PreviewCallback | None = None,
    ) -> ReviewContext | None:
        """Open a review over the suggestion's members still in the working list."""

        member_ids = member_ids_of(suggestion.kind)
        if not member_ids:
            logger.debug("Suggestion %s has no group to review", suggestion.id)
            return None

        members = [
            record
            for record_id in member_ids
            if (record := self._store.get(record_id)) is not None
        ]
        if not members:
            logger.debug("No members of %s remain in the session", suggestion.id)
            return None

        self._context = ReviewContext(suggestion=suggestion, members=members)
        if self._thumbnails is not None and on_preview is not None:
            for member in members:
                if member.preview is None:
                    self._thumbnails.request(member, on_preview)
        return self._context

    def close(self) -> None:
        self._context = None

    def attach_preview(self, record_id: str, preview: object | None) -> bool:
        if self._context is None:
            return False
        return self._context.attach_preview(record_id, preview)

    def derive_smart_actions(self) -> list[SmartAction]:
        context = self._live_context()
        if context is None:
            return []
        return derive_smart_actions(context, self._clock())

    def group_stats(self) -> GroupStats | None:
        context = self._live_context()
        if context is None:
            return None
        return group_stats(context, self._clock())

    def apply_bulk(self, to_keep: Sequence[str], to_bin: Sequence[str]) -> tuple[int, int]:
        """Keep then bin the given members; returns ``(kept, binned)``.

        Processed members leave the context; an emptied context closes the review.
        """

        context = self._live_context()
        if context is None:
            return (0, 0)

        keep_ids = set(to_keep)
        bin_ids = set(to_bin) - keep_ids
        keep_records = [m for m in context.members if m.id in keep_ids]
        bin_records = [m for m in context.members if m.id in bin_ids]

        kept = self._engine.apply_all(Decision.KEEP, keep_records) if keep_records else 0
        binned = self._engine.apply_all(Decision.BIN, bin_records) if bin_records else 0

        context.discard(record.id for record in keep_records + bin_records)
        self._drop_absent(context)
        if context.is_empty:
            self.close()
        return (kept, binned)

    def move_to_folder(self, member_ids: Sequence[str], folder: Path) -> int:
        """Move the given members into ``folder``; returns how many moved.

        Members the engine refuses (protected apps, failed moves) stay in the review.
        """

        context = self._live_context()
        if context is None:
            return 0

        wanted = set(member_ids)
        records = [m for m in context.members if m.id in wanted]
        moved = self._engine.move_all_to_folder(records, folder) if records else 0

        self._drop_absent(context)
        if context.is_empty:
            self.close()
        return moved

    def apply_action(self, index: int) -> SmartAction | None:
        """Re-derive the smart actions and apply the one at ``index``."""

        actions = self.derive_smart_actions()
        if not 0 <= index < len(actions):
            return None
        action = actions[index]
        _ = self.apply_bulk(action.keep_ids, action.bin_ids)
        return action

    def _live_context(self) -> ReviewContext | None:
        context = self._context
        if context is None:
            return None
        self._drop_absent(context)
        if context.is_empty:
            self.close()
            return None
        return context

    def _drop_absent(self, context: ReviewContext) -> None:
        absent = [m.id for m in context.members if not self._store.contains(m.id)]
        if absent:
            context.discard(absent)


__all__ = ["GroupReviewCoordinator"]
