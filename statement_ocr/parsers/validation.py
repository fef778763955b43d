"""Validation of extraction service responses and uploaded document contents."""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from statement_ocr.errors import MalformedResponseError
from statement_ocr.models import Transaction
from statement_ocr.parsers.schema import RawTransaction

logger = logging.getLogger(__name__)

RAW_PREVIEW_CHARS = 200


class ValidationPolicy(str, Enum):
    """How invalid elements in an otherwise well-formed response are handled."""

    STRICT = "strict"  # Any invalid element rejects the whole document
    TOLERANT = "tolerant"  # Invalid elements are dropped, valid ones kept


@dataclass
class ValidationReport:
    """Result of validating one extraction response."""

    transactions: list[Transaction]
    total_elements: int = 0
    rejected_elements: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """Calculate the share of elements that were accepted."""
        if self.total_elements == 0:
            return 0.0
        return (len(self.transactions) / self.total_elements) * 100


class ValidationError(Exception):
    """Raised when document contents fail basic checks."""

    pass


def validate_file_contents(contents: bytes, min_size: int = 10) -> None:
    """
    Validate file contents before rasterizing.

    Args:
        contents: Raw file bytes
        min_size: Minimum expected file size in bytes

    Raises:
        ValidationError: If validation fails
    """
    if not contents:
        raise ValidationError("File is empty")

    if len(contents) < min_size:
        raise ValidationError(f"File too small ({len(contents)} bytes), minimum {min_size} bytes expected")


def _format_errors(index: int, error: PydanticValidationError) -> list[str]:
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<item>"
        messages.append(f"item {index}: {location}: {detail['msg']}")
    return messages


def validate_response(raw_text: str, policy: ValidationPolicy = ValidationPolicy.STRICT) -> ValidationReport:
    """
    Parse raw service text into transactions.

    The text must be exactly one JSON array of transaction objects. No
    markdown stripping or numeric coercion is attempted.

    Args:
        raw_text: Verbatim response text from the extraction service
        policy: Strict (all-or-nothing) or tolerant (drop invalid elements)

    Returns:
        ValidationReport with the accepted transactions in response order

    Raises:
        MalformedResponseError: If the text is not JSON, is not an array, or
            (under the strict policy) any element is invalid
    """
    try:
        data: Any = json.loads(raw_text)
    except (json.JSONDecodeError, RecursionError, TypeError) as e:
        logger.error(f"Invalid JSON from extraction service: {e}")
        logger.error(f"Content preview: {str(raw_text)[:RAW_PREVIEW_CHARS]}...")
        raise MalformedResponseError(f"response is not valid JSON ({e})", raw_text) from e

    if not isinstance(data, list):
        logger.error(f"Expected a JSON array but received {type(data).__name__}")
        raise MalformedResponseError(
            f"expected a JSON array but received {type(data).__name__}",
            raw_text,
        )

    report = ValidationReport(transactions=[], total_elements=len(data))

    for index, item in enumerate(data):
        if not isinstance(item, dict):
            problems = [f"item {index}: expected an object but received {type(item).__name__}"]
        else:
            try:
                report.transactions.append(RawTransaction.model_validate(item).to_transaction())
                continue
            except PydanticValidationError as e:
                problems = _format_errors(index, e)

        if policy == ValidationPolicy.STRICT:
            logger.error(f"Rejected response: {problems[0]}")
            raise MalformedResponseError(problems[0], raw_text, problems)

        report.rejected_elements += 1
        report.errors.extend(problems)

    log_validation_report(report)
    return report


def log_validation_report(report: ValidationReport) -> None:
    """Log validation results for debugging."""
    logger.info(
        f"Validated {len(report.transactions)} transactions "
        f"({report.total_elements} elements, {report.rejected_elements} rejected)"
    )
    for error in report.errors[:5]:
        logger.warning(f"  Dropped: {error}")
