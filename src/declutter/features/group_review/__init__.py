"""Public API for the group review feature."""

from .domain.models import GroupStats, ReviewContext, SmartAction
from .usecases.coordinator import GroupReviewCoordinator
from .usecases.smart_actions import derive_smart_actions, group_stats

__all__ = [
    "GroupReviewCoordinator",
    "GroupStats",
    "ReviewContext",
    "SmartAction",
    "derive_smart_actions",
    "group_stats",
]
