"""Spending summaries and LLM-generated financial insights."""

import json
import logging
from collections import defaultdict
from collections.abc import Sequence

from statement_ocr.config import Settings
from statement_ocr.models import CategorySpending, FinancialSummary, InsightReport, Transaction
from statement_ocr.parsers.llm_client import LLMClient
from statement_ocr.services.dedup import compute_aggregate_fingerprint

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"

INSIGHTS_PROMPT = """You are a helpful financial analyst. Based on the following JSON transaction data, provide a concise and practical financial insights summary.
The summary should be written in a human-readable format. Use markdown for structure.

The analysis must include:
1.  **Financial Summary:** A short, 1-2 sentence overview of the financial activity (e.g., "This month saw a healthy income, though spending on dining was significant.").
2.  **Top 3 Spending Categories:** Identify and list the top three spending categories by total amount.
3.  **Unusual or Large Transactions:** Point out 1-2 transactions that are unusually large compared to the others or are from a noteworthy category (e.g., a large one-time purchase, a significant cash withdrawal).
4.  **Potential Recurring Payments:** Detect and list 2-3 potential recurring payments or subscriptions (e.g., Netflix, Spotify, Gym Membership).
5.  **Smart Saving Suggestions:** Provide 2-3 actionable saving suggestions based directly on the spending patterns observed in the data.

Here is the transaction data:
{transactions_json}

Please format your entire response using Markdown, starting each section with a heading (e.g., '### Financial Summary').
"""


def summarize(transactions: Sequence[Transaction]) -> FinancialSummary:
    """Count, total spending (negative), total income and net for an aggregate."""
    total_spending = sum(t.amount for t in transactions if t.amount < 0)
    total_income = sum(t.amount for t in transactions if t.amount > 0)
    return FinancialSummary(
        total_transactions=len(transactions),
        total_spending=total_spending,
        total_income=total_income,
        net=total_income + total_spending,
    )


def spending_by_category(transactions: Sequence[Transaction]) -> list[CategorySpending]:
    """Absolute outflow per category, largest first."""
    totals: dict[str, float] = defaultdict(float)
    for txn in transactions:
        if txn.amount < 0:
            totals[txn.category or UNCATEGORIZED] += abs(txn.amount)

    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [CategorySpending(category=category, total=total) for category, total in ranked]


def build_insights_prompt(transactions: Sequence[Transaction]) -> str:
    payload = [txn.model_dump(mode="json", exclude_none=True) for txn in transactions]
    return INSIGHTS_PROMPT.format(transactions_json=json.dumps(payload, indent=2))


class InsightGenerator:
    """Requests a free-text analysis of a finalized aggregate."""

    def __init__(self, settings: Settings, client: LLMClient | None = None):
        self.settings = settings
        self.client = client or LLMClient(settings)

    async def generate(self, transactions: Sequence[Transaction]) -> InsightReport | None:
        """
        Generate an insight report for the given aggregate.

        Args:
            transactions: The finalized, ordered aggregate (read-only)

        Returns:
            InsightReport, or None when the aggregate is empty (no request is made)

        Raises:
            ServiceUnavailableError: If the summary service fails
        """
        if not transactions:
            logger.info("Skipping insights: no transactions")
            return None

        logger.info(f"Requesting insights for {len(transactions)} transactions")
        text = await self.client.complete(
            [{"role": "user", "content": build_insights_prompt(transactions)}],
            service="summary",
            timeout=self.settings.summary_timeout,
            temperature=self.settings.summary_temperature,
        )
        return InsightReport(text=text, aggregate_fingerprint=compute_aggregate_fingerprint(transactions))
