"""Summary: Background preview generation with Pillow.
Why: Keep image decoding off the command path and collapse duplicate requests."""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from PIL import Image

from declutter.config.settings import THUMBNAIL_SIZE, THUMBNAIL_WORKERS
from declutter.platform.logging import logger

from ..domain.models import FileRecord, FileType
from ..usecases.ports import PreviewCallback, ThumbnailPort


class PillowThumbnailProvider(ThumbnailPort):
    """Render bounded-size previews for image files on a small worker pool.

    Only one render per file is in flight at a time. Non-image files and
    unreadable images produce ``None``.
    """

    def __init__(
        self,
        *,
        max_workers: int = THUMBNAIL_WORKERS,
        size: tuple[int, int] = THUMBNAIL_SIZE,
    ) -> None:
        self._executor: ThreadPoolExecutor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="declutter-thumb"
        )
        self._size: tuple[int, int] = size
        self._lock: threading.Lock = threading.Lock()
        self._in_flight: dict[str, Future[Image.Image | None]] = {}
        self._cancelled: set[str] = set()

    def request(self, record: FileRecord, on_ready: PreviewCallback) -> None:
        with self._lock:
            if record.id in self._in_flight:
                return
            self._cancelled.discard(record.id)
            future = self._executor.submit(self._render, record.path, record.file_type, self._size)
            self._in_flight[record.id] = future
        future.add_done_callback(lambda done: self._finish(record.id, done, on_ready))

    def cancel(self, record_id: str) -> None:
        with self._lock:
            future = self._in_flight.get(record_id)
            if future is None:
                return
            self._cancelled.add(record_id)
        # A queued future runs its done-callbacks inline, and _finish takes the lock.
        _ = future.cancel()

    def pending(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._in_flight)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _finish(
        self,
        record_id: str,
        future: Future[Image.Image | None],
        on_ready: PreviewCallback,
    ) -> None:
        with self._lock:
            _ = self._in_flight.pop(record_id, None)
            dropped = record_id in self._cancelled
            self._cancelled.discard(record_id)
        if dropped or future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.debug("Thumbnail worker failed for %s: %s", record_id, exc)
            on_ready(record_id, None)
            return
        on_ready(record_id, future.result())

    @staticmethod
    def _render(path: Path, file_type: FileType, size: tuple[int, int]) -> Image.Image | None:
        if file_type is not FileType.IMAGE:
            return None
        try:
            with Image.open(path) as image:
                image.thumbnail(size)
                return image.copy()
        except (OSError, ValueError) as exc:
            logger.debug("Could not render preview for %s: %s", path, exc)
            return None


__all__ = ["PillowThumbnailProvider"]
