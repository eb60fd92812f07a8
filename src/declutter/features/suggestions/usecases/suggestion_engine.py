"""Summary: Debounced, cancellable background suggestion computation.
Why: Navigation must stay instant while duplicates and groups are found off-thread.

The engine keeps at most one computation logically active. A focus change
cancels the previous token and bumps a generation counter; a result commits
only when its generation is still current, the file is still focused and
present, and nothing else filled the cache slot first.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from datetime import datetime
from enum import Enum

from declutter.config.settings import COMPARISON_WINDOW, SUGGESTION_DEBOUNCE_SECONDS
from declutter.features.triage.domain.models import FileRecord
from declutter.features.triage.usecases.session_store import SessionStore
from declutter.platform.logging import logger

from ..domain.models import Suggestion
from ..domain.rules import DetectionThresholds, detect_all
from .cancellation import CancellationToken, SuggestionCancelled
from .ports import FingerprintPort

SuggestionListener = Callable[[str | None, tuple[Suggestion, ...]], None]
ExecutorFactory = Callable[[], Executor]


class EngineState(str, Enum):
    IDLE = "idle"
    COMPUTING = "computing"


def _default_executor() -> Executor:
    return ThreadPoolExecutor(max_workers=1, thread_name_prefix="declutter-suggest")


class SuggestionEngine:
    """Compute suggestions for the focused file of a ``SessionStore``.

    ``lock`` must be the lock that serialises mutations of ``store``; the
    worker takes it only to commit a finished result. ``focus`` returns the
    cached (or empty) result to publish right away; ``on_suggestions`` is
    invoked from the worker thread, outside the lock, after a commit.
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        lock: threading.RLock | None = None,
        fingerprinter: FingerprintPort | None = None,
        debounce_seconds: float = SUGGESTION_DEBOUNCE_SECONDS,
        window_size: int = COMPARISON_WINDOW,
        thresholds: DetectionThresholds | None = None,
        clock: Callable[[], datetime] = datetime.now,
        executor_factory: ExecutorFactory | None = None,
        on_suggestions: SuggestionListener | None = None,
    ) -> None:
        self._store: SessionStore = store
        self._lock: threading.RLock = lock if lock is not None else threading.RLock()
        self._fingerprinter: FingerprintPort | None = fingerprinter
        self._debounce: float = max(0.0, debounce_seconds)
        self._window_size: int = window_size
        self._thresholds: DetectionThresholds = thresholds or DetectionThresholds()
        self._clock: Callable[[], datetime] = clock
        self._executor: Executor = (executor_factory or _default_executor)()
        self.on_suggestions: SuggestionListener | None = on_suggestions

        self._token: CancellationToken | None = None
        self._generation: int = 0
        self._future: Future[None] | None = None
        self._focused_id: str | None = None
        self._current: tuple[Suggestion, ...] = ()
        self._state: EngineState = EngineState.IDLE
        self._fingerprints: dict[str, str | None] = {}
        self._fingerprint_lock: threading.Lock = threading.Lock()
        self._closed: bool = False

    # Queries ---------------------------------------------------------------

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def current(self) -> tuple[Suggestion, ...]:
        """Suggestions published for the focused file."""

        return self._current

    @property
    def focused_id(self) -> str | None:
        return self._focused_id

    # Commands (coordinating thread, under ``lock``) ------------------------

    def focus(self, record: FileRecord | None) -> tuple[Suggestion, ...]:
        """React to a focus change; returns what should be published right away."""

        with self._lock:
            self._cancel_locked()
            self._focused_id = record.id if record is not None else None
            self._current = ()
            if record is None or self._closed:
                return self._current

            cached = self._store.cached_suggestions(record.id)
            if cached is not None:
                self._current = cached
                return self._current

            token = CancellationToken()
            self._token = token
            generation = self._generation
            window = tuple(self._store.window(self._window_size))
            self._state = EngineState.COMPUTING
            self._future = self._executor.submit(self._run, record, window, token, generation)
            return self._current

    def cancel(self) -> None:
        with self._lock:
            self._cancel_locked()

    def reset(self) -> None:
        """Cancel work and drop fingerprints (a new location was loaded)."""

        with self._lock:
            self._cancel_locked()
            self._focused_id = None
            self._current = ()
        with self._fingerprint_lock:
            self._fingerprints.clear()

    def detect_now(self, record: FileRecord, window: Sequence[FileRecord]) -> list[Suggestion]:
        """Run every rule synchronously, bypassing debounce and the cache."""

        return detect_all(
            record,
            window,
            now=self._clock(),
            signature=self._signature,
            thresholds=self._thresholds,
        )

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the in-flight computation finishes; ``False`` on timeout."""

        future = self._future
        if future is None:
            return True
        done, _ = wait_futures([future], timeout=timeout)
        return bool(done)

    def shutdown(self) -> None:
        with self._lock:
            self._closed = True
            self._cancel_locked()
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _cancel_locked(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None
        self._generation += 1
        self._state = EngineState.IDLE

    # Worker ----------------------------------------------------------------

    def _run(
        self,
        record: FileRecord,
        window: tuple[FileRecord, ...],
        token: CancellationToken,
        generation: int,
    ) -> None:
        if token.wait(self._debounce):
            logger.debug("Suggestion computation for %s cancelled during debounce", record.name)
            return
        try:
            results = detect_all(
                record,
                window,
                now=self._clock(),
                signature=self._signature,
                thresholds=self._thresholds,
                checkpoint=token.raise_if_cancelled,
            )
        except SuggestionCancelled:
            logger.debug("Suggestion computation for %s cancelled", record.name)
            return
        except Exception as exc:  # pragma: no cover - rule bug
            logger.exception("Suggestion computation failed for %s: %s", record.name, exc)
            return

        self._commit(record, tuple(results), token, generation)

    def _commit(
        self,
        record: FileRecord,
        results: tuple[Suggestion, ...],
        token: CancellationToken,
        generation: int,
    ) -> None:
        with self._lock:
            if token.cancelled or generation != self._generation:
                logger.debug("Discarding stale suggestions for %s", record.name)
                return
            self._state = EngineState.IDLE
            self._token = None
            if self._store.focused_id != record.id or not self._store.contains(record.id):
                logger.debug("Discarding suggestions for %s: focus moved", record.name)
                return
            if not self._store.store_suggestions(record.id, results):
                logger.debug("Discarding suggestions for %s: cache already filled", record.name)
                return
            self._current = results

        logger.debug("Published %d suggestions for %s", len(results), record.name)
        if self.on_suggestions is not None:
            self.on_suggestions(record.id, results)

    def _signature(self, record: FileRecord) -> str | None:
        if record.fingerprint is not None:
            return record.fingerprint
        if self._fingerprinter is None:
            return None
        with self._fingerprint_lock:
            if record.id in self._fingerprints:
                return self._fingerprints[record.id]
        value = self._fingerprinter.fingerprint(record)
        with self._fingerprint_lock:
            self._fingerprints[record.id] = value
        return value


__all__ = ["EngineState", "ExecutorFactory", "SuggestionEngine", "SuggestionListener"]
