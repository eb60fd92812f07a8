"""Summary: Cooperative cancellation for background suggestion work.
Why: Abandoned computations must stop at the next boundary without killing threads."""

from __future__ import annotations

import threading


class SuggestionCancelled(Exception):
    """Raised inside a computation once its token has been cancelled."""


class CancellationToken:
    """One-shot cancellation flag backed by ``threading.Event``."""

    def __init__(self) -> None:
        self._event: threading.Event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds; returns ``True`` if cancelled meanwhile."""

        if timeout <= 0:
            return self._event.is_set()
        return self._event.wait(timeout)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise SuggestionCancelled()


__all__ = ["CancellationToken", "SuggestionCancelled"]
