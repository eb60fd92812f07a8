"""Ports for suggestion use cases.

Where: features/suggestions/usecases/ports.py
What: Protocol for the optional content-fingerprint provider.
Why: Duplicate detection can run on names and sizes alone when no provider is wired.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from declutter.features.triage.domain.models import FileRecord


@runtime_checkable
class FingerprintPort(Protocol):
    """Compute a content-equality signal for a file."""

    def fingerprint(self, record: FileRecord) -> str | None:
        """Return a signature, or ``None`` when the content cannot be read."""
        ...


__all__ = ["FingerprintPort"]
