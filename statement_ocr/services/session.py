"""One end-to-end extraction session: batch extraction, then insights."""

import logging
from collections.abc import Sequence

from pydantic import BaseModel

from statement_ocr.config import Settings
from statement_ocr.errors import ServiceUnavailableError
from statement_ocr.models import CategorySpending, DocumentFailure, DocumentInput, FinancialSummary, InsightReport, Transaction
from statement_ocr.parsers.extractor import ExtractionInvoker
from statement_ocr.parsers.llm_client import LLMClient
from statement_ocr.parsers.rasterizer import Rasterizer
from statement_ocr.parsers.validation import ValidationPolicy
from statement_ocr.services.batch import BatchAggregator
from statement_ocr.services.insights import InsightGenerator, spending_by_category, summarize
from statement_ocr.services.progress import ProgressListener

logger = logging.getLogger(__name__)

INSIGHTS_ERROR_MESSAGE = "Could not generate AI insights for this statement."


class SessionResult(BaseModel):
    """Ledger plus derived artifacts for one session."""

    transactions: list[Transaction]
    summary: FinancialSummary
    categories: list[CategorySpending]
    insights: InsightReport | None = None
    insights_error: str | None = None
    failures: list[DocumentFailure] = []


class ExtractionSession:
    """
    Owns the pipeline components for one extraction session.

    Credentials are checked once, here. Each call to ``run`` builds its own
    job list and aggregate, so concurrent runs never share state.
    """

    def __init__(self, settings: Settings):
        settings.validate_credentials()
        self.settings = settings

        client = LLMClient(settings)
        self.aggregator = BatchAggregator(
            rasterizer=Rasterizer(settings),
            invoker=ExtractionInvoker(settings, client),
            policy=ValidationPolicy(settings.validation_policy),
            skip_failed=settings.skip_failed_documents,
        )
        self.insight_generator = InsightGenerator(settings, client)

    async def run(
        self,
        documents: Sequence[DocumentInput],
        on_progress: ProgressListener | None = None,
    ) -> SessionResult:
        """
        Extract all documents, then request insights for the finished aggregate.

        Raises:
            ValueError: If no documents are given
            BatchExtractionError: If any document fails (and skipping is disabled)
        """
        batch = await self.aggregator.run(documents, on_progress=on_progress)
        transactions = list(batch.transactions)

        insights: InsightReport | None = None
        insights_error: str | None = None
        try:
            insights = await self.insight_generator.generate(batch.transactions)
        except ServiceUnavailableError as e:
            logger.warning(f"Insight generation failed: {e}")
            insights_error = INSIGHTS_ERROR_MESSAGE

        return SessionResult(
            transactions=transactions,
            summary=summarize(transactions),
            categories=spending_by_category(transactions),
            insights=insights,
            insights_error=insights_error,
            failures=batch.failures,
        )
