"""Summary: Content fingerprints from a bounded head sample of each file.
Why: Duplicate detection needs content equality without reading whole videos."""

from __future__ import annotations

import hashlib

from declutter.config.settings import FINGERPRINT_CHUNK_SIZE, FINGERPRINT_SAMPLE_BYTES
from declutter.features.triage.domain.models import FileRecord
from declutter.platform.logging import logger

from ..usecases.ports import FingerprintPort


class SampledContentFingerprinter(FingerprintPort):
    """SHA-256 over the size and the first ``sample_bytes`` of a regular file."""

    def __init__(
        self,
        *,
        sample_bytes: int = FINGERPRINT_SAMPLE_BYTES,
        chunk_size: int = FINGERPRINT_CHUNK_SIZE,
    ) -> None:
        self._sample_bytes: int = sample_bytes
        self._chunk_size: int = chunk_size

    def fingerprint(self, record: FileRecord) -> str | None:
        if not record.path.is_file():
            return None

        digest = hashlib.sha256()
        digest.update(str(record.size).encode())
        remaining = self._sample_bytes
        try:
            with record.path.open("rb") as handle:
                while remaining > 0:
                    chunk = handle.read(min(self._chunk_size, remaining))
                    if not chunk:
                        break
                    digest.update(chunk)
                    remaining -= len(chunk)
        except OSError as exc:
            logger.debug("Could not fingerprint %s: %s", record.path, exc)
            return None
        return digest.hexdigest()


__all__ = ["SampledContentFingerprinter"]
