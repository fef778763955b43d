"""Send rasterized statement pages to the extraction service."""

import logging
from typing import Any

from statement_ocr.config import Settings
from statement_ocr.models import Frame
from statement_ocr.parsers.llm_client import LLMClient
from statement_ocr.parsers.schema import response_format

logger = logging.getLogger(__name__)

EXTRACTION_PROMPT = """You are an expert financial assistant specialized in extracting transaction data from bank statements.
Analyze the following bank statement pages. These pages may come from one or more documents. Extract all individual transactions.
Ignore headers, footers, summaries, advertisements, and any non-transactional information.
For each transaction, provide the date, a clean description, and the amount.
- Format all dates as YYYY-MM-DD. If the year is not present, infer it from the statement date if available, otherwise assume the current year.
- Represent withdrawals, debits, and expenses as negative numbers.
- Represent deposits, credits, and payments to the account as positive numbers.
- Assign a relevant category to each transaction (e.g., Groceries, Dining, Transport, Salary, Bills, Shopping, Entertainment, Rent, Other). Other categories may be used when none of these fit.
- Provide the output ONLY as a valid JSON array of objects. Do not include any other text, explanations, or markdown formatting.
Each object in the array should have the keys: "date", "description", "amount", and "category".
"""


class ExtractionInvoker:
    """Issues exactly one extraction request per document."""

    def __init__(self, settings: Settings, client: LLMClient | None = None):
        self.settings = settings
        self.client = client or LLMClient(settings)

    def build_messages(self, frames: list[Frame]) -> list[dict[str, Any]]:
        """Instruction first, then every frame in page order."""
        content: list[dict[str, Any]] = [{"type": "text", "text": EXTRACTION_PROMPT}]
        for frame in frames:
            content.append({"type": "image_url", "image_url": {"url": frame.to_data_url()}})
        return [{"role": "user", "content": content}]

    async def extract(self, frames: list[Frame]) -> str:
        """
        Request transaction extraction for one document.

        Args:
            frames: Non-empty, ordered frames of a single document

        Returns:
            Raw response text, trimmed; parsing is left to the validator

        Raises:
            ValueError: If no frames are given
            ServiceUnavailableError: On transport/provider failure
        """
        if not frames:
            raise ValueError("At least one frame is required for extraction")

        logger.info(f"Requesting extraction for {len(frames)} frame(s)")
        raw_text = await self.client.complete(
            self.build_messages(frames),
            service="extraction",
            timeout=self.settings.extraction_timeout,
            temperature=self.settings.extraction_temperature,
            max_tokens=self.settings.extraction_max_tokens,
            response_format=response_format(),
        )
        logger.debug(f"Extraction response: {len(raw_text)} chars")
        return raw_text
