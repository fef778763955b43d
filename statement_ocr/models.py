"""Data models for Statement OCR."""

import base64
import math
import mimetypes
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from statement_ocr.services.dedup import compute_aggregate_fingerprint, compute_file_hash


class MediaKind(str, Enum):
    """How a document is turned into frames."""

    IMAGE = "image"
    PAGINATED = "paginated"


class Transaction(BaseModel):
    """One ledger entry. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    date: date
    description: str = Field(min_length=1)
    amount: float  # Negative for debits/expenses, positive for credits/deposits
    category: str
    notes: str | None = None

    @field_validator("description")
    @classmethod
    def _description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description must not be blank")
        return value

    @field_validator("amount")
    @classmethod
    def _amount_finite(cls, value: float) -> float:
        if not math.isfinite(value):
            raise ValueError("amount must be a finite number")
        return value


@dataclass(frozen=True)
class Frame:
    """One raster image payload prepared for the extraction service."""

    data: bytes
    mime_type: str

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    def to_data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.to_base64()}"


@dataclass
class DocumentInput:
    """An uploaded document with its declared media type."""

    name: str
    content: bytes
    mime_type: str

    @classmethod
    def from_filename(cls, name: str, content: bytes, mime_type: str | None = None) -> "DocumentInput":
        """Build an input, guessing the MIME type from the name when none is declared."""
        if not mime_type or mime_type == "application/octet-stream":
            guessed, _ = mimetypes.guess_type(name)
            mime_type = guessed or "application/octet-stream"
        return cls(name=name, content=content, mime_type=mime_type)


JobStatus = Literal["pending", "processing", "succeeded", "failed"]


@dataclass
class DocumentJob:
    """Transient per-document processing unit owned by the batch aggregator."""

    index: int
    document: DocumentInput
    frames: list[Frame] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    status: JobStatus = "pending"
    error: Exception | None = None
    content_hash: str = field(init=False)

    def __post_init__(self):
        self.content_hash = compute_file_hash(self.document.content)


class DocumentFailure(BaseModel):
    """A document skipped under the skip-failed-documents policy."""

    document_name: str
    document_index: int
    kind: str
    message: str


class BatchResult(BaseModel):
    """Merged, date-ordered aggregate produced by one batch."""

    transactions: tuple[Transaction, ...]
    total_documents: int
    succeeded_documents: int
    failures: list[DocumentFailure] = Field(default_factory=list)

    @property
    def failed_documents(self) -> int:
        return len(self.failures)


class InsightReport(BaseModel):
    """Free-text analysis keyed to the exact aggregate that produced it."""

    model_config = ConfigDict(frozen=True)

    text: str
    aggregate_fingerprint: str
    generated_at: datetime = Field(default_factory=datetime.now)

    def matches(self, transactions: "list[Transaction] | tuple[Transaction, ...]") -> bool:
        """Whether this report was generated from exactly these transactions."""
        return compute_aggregate_fingerprint(transactions) == self.aggregate_fingerprint


class FinancialSummary(BaseModel):
    """Totals shown alongside the ledger."""

    total_transactions: int
    total_spending: float  # Sum of negative amounts (<= 0)
    total_income: float
    net: float


class CategorySpending(BaseModel):
    """Total absolute outflow for one category."""

    category: str
    total: float


class ProgressSnapshot(BaseModel):
    """Point-in-time view of batch progress."""

    processed: int
    total: int
    current_document: str | None = None
    status: Literal["idle", "processing", "complete", "error"] = "idle"
    message: str = ""

    @property
    def pending(self) -> int:
        return self.total - self.processed

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 0.0
        return (self.processed / self.total) * 100
