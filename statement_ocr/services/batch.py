"""Drive the extraction pipeline across every document in a batch."""

import logging
from collections.abc import Sequence

from statement_ocr.errors import (
    BatchExtractionError,
    DocumentError,
    MalformedResponseError,
    ServiceUnavailableError,
)
from statement_ocr.models import BatchResult, DocumentFailure, DocumentInput, DocumentJob, Transaction
from statement_ocr.parsers.extractor import ExtractionInvoker
from statement_ocr.parsers.rasterizer import Rasterizer
from statement_ocr.parsers.validation import ValidationPolicy, validate_response
from statement_ocr.services.progress import ProgressListener, ProgressTracker

logger = logging.getLogger(__name__)

DOCUMENT_ERRORS = (DocumentError, ServiceUnavailableError, MalformedResponseError)


def sort_by_date(transactions: Sequence[Transaction]) -> list[Transaction]:
    """Stable sort by date ascending; ties keep arrival order."""
    return sorted(transactions, key=lambda txn: txn.date)


class BatchAggregator:
    """
    Processes documents one at a time, in input order, and merges the results.

    By default a single failed document fails the whole batch and nothing
    extracted so far is returned. With ``skip_failed=True`` failed documents
    are reported in the result instead.
    """

    def __init__(
        self,
        rasterizer: Rasterizer,
        invoker: ExtractionInvoker,
        policy: ValidationPolicy = ValidationPolicy.STRICT,
        skip_failed: bool = False,
    ):
        self.rasterizer = rasterizer
        self.invoker = invoker
        self.policy = policy
        self.skip_failed = skip_failed

    async def run(
        self,
        documents: Sequence[DocumentInput],
        on_progress: ProgressListener | None = None,
    ) -> BatchResult:
        """
        Extract, merge and order transactions from all documents.

        Args:
            documents: Input documents in processing order
            on_progress: Optional callback receiving a snapshot after each change

        Returns:
            BatchResult with the globally date-ordered aggregate

        Raises:
            ValueError: If no documents are given
            BatchExtractionError: If a document fails and skipping is disabled
        """
        if not documents:
            raise ValueError("Please select one or more files first.")

        jobs = [DocumentJob(index=i, document=doc) for i, doc in enumerate(documents)]
        tracker = ProgressTracker(total=len(jobs), listener=on_progress)
        collected: list[Transaction] = []
        failures: list[DocumentFailure] = []

        for job in jobs:
            name = job.document.name
            tracker.start_document(name)

            try:
                await self._process(job)
            except DOCUMENT_ERRORS as e:
                job.status = "failed"
                job.error = e
                tracker.finish_document(name, succeeded=False)
                logger.error(f"Document {job.index + 1}/{len(jobs)} ({name}) failed: {e}")

                if not self.skip_failed:
                    tracker.fail(f"Extraction failed on {name}")
                    raise BatchExtractionError(name, job.index, e) from e

                failures.append(
                    DocumentFailure(
                        document_name=name,
                        document_index=job.index,
                        kind=type(e).__name__,
                        message=e.message,
                    )
                )
                continue

            tracker.finish_document(name, succeeded=True)
            collected.extend(job.transactions)

        tracker.complete()
        ordered = sort_by_date(collected)

        logger.info(
            f"Batch complete: {len(ordered)} transactions from "
            f"{len(jobs) - len(failures)}/{len(jobs)} documents"
        )
        return BatchResult(
            transactions=tuple(ordered),
            total_documents=len(jobs),
            succeeded_documents=len(jobs) - len(failures),
            failures=failures,
        )

    async def _process(self, job: DocumentJob) -> None:
        job.status = "processing"
        logger.info(f"Processing {job.document.name} ({job.document.mime_type}, sha256 {job.content_hash[:8]}...)")

        job.frames = await self.rasterizer.rasterize(job.document)
        raw_text = await self.invoker.extract(job.frames)
        report = validate_response(raw_text, self.policy)

        job.transactions = report.transactions
        job.status = "succeeded"
        logger.info(
            f"Extracted {len(job.transactions)} transactions from {job.document.name} "
            f"({len(job.frames)} frame(s))"
        )
