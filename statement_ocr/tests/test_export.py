"""Tests for CSV export."""

import csv
from datetime import date
from io import StringIO

from statement_ocr.models import Transaction
from statement_ocr.services.export import CSV_HEADERS, transactions_to_csv


def _txn(description="Coffee", amount=-4.5, category="Dining", notes=None, day=1):
    return Transaction(date=date(2024, 3, day), description=description, amount=amount, category=category, notes=notes)


class TestTransactionsToCsv:
    """Test CSV rendering of the ledger."""

    def test_header_only_for_empty_ledger(self):
        """Should write a bare header row when there are no transactions."""
        assert transactions_to_csv([]) == "Date,Description,Amount,Category,Notes\n"

    def test_quotes_text_fields(self):
        """Should quote textual fields and leave amounts bare."""
        lines = transactions_to_csv([_txn()]).splitlines()
        assert lines[1] == '"2024-03-01","Coffee",-4.5,"Dining",""'

    def test_doubles_embedded_quotes(self):
        """Should escape quotes inside descriptions."""
        line = transactions_to_csv([_txn(description='Bob\'s "Diner", Main St')]).splitlines()[1]
        assert '"Bob\'s ""Diner"", Main St"' in line

    def test_integral_amounts(self):
        """Should write whole amounts without a decimal part."""
        line = transactions_to_csv([_txn(description="Salary", amount=2000.0, category="Salary")]).splitlines()[1]
        assert ",2000," in line

    def test_keeps_notes(self):
        """Should include notes when present."""
        line = transactions_to_csv([_txn(notes="card 1234")]).splitlines()[1]
        assert line.endswith('"card 1234"')

    def test_readable_by_csv_module(self):
        """Should round-trip through a standard CSV reader in ledger order."""
        ledger = [_txn(description="A, with comma", day=1), _txn(description="B", amount=12.25, day=2)]
        rows = list(csv.reader(StringIO(transactions_to_csv(ledger))))

        assert rows[0] == CSV_HEADERS
        assert rows[1][1] == "A, with comma"
        assert rows[2] == ["2024-03-02", "B", "12.25", "Dining", ""]
