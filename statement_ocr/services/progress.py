"""Progress tracking for extraction batches.

Each batch owns its own tracker; nothing here is shared between sessions.
Listeners receive a snapshot after every change, and the processed count only
ever moves forward.
"""

import logging
from collections.abc import Callable

from statement_ocr.models import ProgressSnapshot

logger = logging.getLogger(__name__)

ProgressListener = Callable[[ProgressSnapshot], None]


class ProgressTracker:
    """Tracks processed/total/current-document for one batch."""

    def __init__(self, total: int, listener: ProgressListener | None = None):
        self._snapshot = ProgressSnapshot(processed=0, total=total)
        self._listener = listener

    @property
    def snapshot(self) -> ProgressSnapshot:
        return self._snapshot

    def start_document(self, name: str) -> None:
        """Mark a document as currently processing."""
        self._update(
            current_document=name,
            status="processing",
            message=f"Processing {name} ({self._snapshot.processed + 1}/{self._snapshot.total})",
        )

    def finish_document(self, name: str, succeeded: bool) -> None:
        """Advance the processed count after a document completes or fails."""
        processed = self._snapshot.processed + 1
        if processed > self._snapshot.total:
            raise RuntimeError(f"Processed count would exceed total ({self._snapshot.total})")
        outcome = "done" if succeeded else "failed"
        self._update(processed=processed, message=f"{name} {outcome}")

    def complete(self) -> None:
        self._update(current_document=None, status="complete", message="All documents processed")

    def fail(self, message: str) -> None:
        self._update(current_document=None, status="error", message=message)

    def _update(self, **changes) -> None:
        self._snapshot = self._snapshot.model_copy(update=changes)
        snap = self._snapshot
        logger.info(f"[PROGRESS] {snap.processed}/{snap.total} ({snap.percent:.0f}%) - {snap.message}")
        if self._listener is not None:
            self._listener(self._snapshot)
