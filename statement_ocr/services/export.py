"""Delimited-text export of the transaction ledger."""

import csv
from collections.abc import Sequence
from io import StringIO

from statement_ocr.models import Transaction

CSV_HEADERS = ["Date", "Description", "Amount", "Category", "Notes"]


def _format_amount(amount: float) -> int | float:
    # 2000.0 is written as 2000, -4.5 stays -4.5
    return int(amount) if amount.is_integer() else amount


def transactions_to_csv(transactions: Sequence[Transaction]) -> str:
    """
    Render transactions as CSV.

    The header row is bare. Textual fields are always quoted with embedded
    quotes doubled; amounts are left unquoted.
    """
    buffer = StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    buffer.write(",".join(CSV_HEADERS) + "\n")
    for txn in transactions:
        writer.writerow(
            [
                txn.date.isoformat(),
                txn.description,
                _format_amount(txn.amount),
                txn.category,
                txn.notes or "",
            ]
        )
    return buffer.getvalue()
