"""Tests for batch progress tracking."""

import pytest

from statement_ocr.services.progress import ProgressTracker


class TestProgressTracker:
    """Test ProgressTracker."""

    def test_starts_idle(self):
        """Should start with nothing processed."""
        snap = ProgressTracker(total=3).snapshot
        assert snap.processed == 0
        assert snap.pending == 3
        assert snap.status == "idle"

    def test_counts_processed_documents(self):
        """Should count both successes and failures as processed."""
        tracker = ProgressTracker(total=2)
        tracker.start_document("a.pdf")
        tracker.finish_document("a.pdf", succeeded=True)
        tracker.start_document("b.pdf")
        tracker.finish_document("b.pdf", succeeded=False)

        assert tracker.snapshot.processed == 2
        assert tracker.snapshot.percent == 100.0
        assert tracker.snapshot.message == "b.pdf failed"

    def test_never_exceeds_total(self):
        """Should refuse to advance past the total."""
        tracker = ProgressTracker(total=1)
        tracker.finish_document("a.pdf", succeeded=True)
        with pytest.raises(RuntimeError):
            tracker.finish_document("b.pdf", succeeded=True)

    def test_notifies_listener(self):
        """Should pass a snapshot to the listener on every change."""
        seen = []
        tracker = ProgressTracker(total=1, listener=seen.append)
        tracker.start_document("a.pdf")
        tracker.finish_document("a.pdf", succeeded=True)
        tracker.complete()

        assert [s.status for s in seen] == ["processing", "processing", "complete"]
        assert seen[0].current_document == "a.pdf"
        assert seen[-1].current_document is None

    def test_snapshots_are_independent(self):
        """Should not mutate snapshots already handed out."""
        tracker = ProgressTracker(total=2)
        first = tracker.snapshot
        tracker.finish_document("a.pdf", succeeded=True)
        assert first.processed == 0
        assert tracker.snapshot.processed == 1

    def test_fail_sets_error_status(self):
        """Should mark the batch as failed."""
        tracker = ProgressTracker(total=1)
        tracker.fail("Extraction failed on a.pdf")
        assert tracker.snapshot.status == "error"
        assert tracker.snapshot.message == "Extraction failed on a.pdf"

    def test_percent_of_empty_batch(self):
        """Should report 0% when there is nothing to process."""
        assert ProgressTracker(total=0).snapshot.percent == 0.0
