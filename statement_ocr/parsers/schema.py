"""Versioned transaction schema shared by the extraction request and the response validator."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from statement_ocr.models import Transaction

SCHEMA_VERSION = "1"
SCHEMA_NAME = "transaction_list"

_JSON_TYPES: dict[Any, str] = {str: "string", float: "number"}


class RawTransaction(BaseModel):
    """One transaction object as returned by the extraction service."""

    model_config = ConfigDict(extra="ignore")

    date: str = Field(
        strict=True, pattern=r"^\s*\d{4}-\d{2}-\d{2}\s*$", description="Transaction date in YYYY-MM-DD format."
    )
    description: str = Field(
        strict=True, min_length=1, description="A clean, concise description of the transaction."
    )
    amount: float = Field(
        strict=True,
        allow_inf_nan=False,
        description="Transaction amount. Negative for debits/expenses, positive for credits/deposits.",
    )
    category: str = Field(strict=True, description="A relevant category like 'Groceries', 'Salary', 'Bills', etc.")
    notes: str | None = Field(default=None, strict=True)

    @field_validator("date")
    @classmethod
    def _date_resolves(cls, value: str) -> str:
        try:
            date.fromisoformat(value.strip())
        except ValueError as e:
            raise ValueError(f"'{value}' is not a YYYY-MM-DD calendar date") from e
        return value

    @field_validator("description")
    @classmethod
    def _description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("description must not be blank")
        return value

    def to_transaction(self) -> Transaction:
        return Transaction(
            date=date.fromisoformat(self.date.strip()),
            description=self.description,
            amount=self.amount,
            category=self.category,
            notes=self.notes,
        )


def required_fields() -> list[str]:
    """Names of the fields every transaction object must carry."""
    return [name for name, info in RawTransaction.model_fields.items() if info.is_required()]


def transaction_array_schema() -> dict[str, Any]:
    """
    JSON schema sent to the extraction service.

    Built from ``RawTransaction`` so the request and the validator cannot drift apart.
    """
    properties = {}
    for name in required_fields():
        info = RawTransaction.model_fields[name]
        properties[name] = {"type": _JSON_TYPES[info.annotation], "description": info.description}

    return {
        "type": "array",
        "items": {
            "type": "object",
            "properties": properties,
            "required": required_fields(),
        },
    }


def response_format() -> dict[str, Any]:
    """LiteLLM ``response_format`` payload carrying the versioned schema."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": f"{SCHEMA_NAME}_v{SCHEMA_VERSION}",
            "schema": transaction_array_schema(),
        },
    }
