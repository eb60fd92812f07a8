"""Public API for the suggestions feature."""

from .domain.models import (
    Duplicate,
    GroupKind,
    LargeFile,
    OldFile,
    SameSession,
    SimilarNames,
    Suggestion,
    SuggestionKind,
    TemporaryFile,
)
from .domain.rules import DetectionThresholds, detect_all
from .usecases.cancellation import CancellationToken, SuggestionCancelled
from .usecases.ports import FingerprintPort
from .usecases.suggestion_engine import EngineState, SuggestionEngine

__all__ = [
    "CancellationToken",
    "DetectionThresholds",
    "Duplicate",
    "EngineState",
    "FingerprintPort",
    "GroupKind",
    "LargeFile",
    "OldFile",
    "SameSession",
    "SimilarNames",
    "Suggestion",
    "SuggestionCancelled",
    "SuggestionEngine",
    "SuggestionKind",
    "TemporaryFile",
    "detect_all",
]
