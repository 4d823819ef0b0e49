"""
CSV Export

Renders a user's transactions as comma-separated text:

    Date,Type,Category,Description,Amount
    2025-01-15,Expense,Food,"Lunch with ""Sam"" today",45.50

The Description column is always quoted with embedded quotes doubled;
other columns are quoted only when they contain a delimiter, a quote or
a line break. Any RFC 4180 reader (csv.reader included) gets the original
values back.
"""

import csv
from pathlib import Path
from typing import Iterable, Union

from fiscalforge.models.finance import Transaction, quantize_amount
from fiscalforge.services.storage import TransactionStorageInterface


EXPORT_HEADER = ("Date", "Type", "Category", "Description", "Amount")

_DELIMITER = ","
_QUOTE = '"'
_LINE_END = "\n"


def _quote(value: str) -> str:
    return _QUOTE + value.replace(_QUOTE, _QUOTE * 2) + _QUOTE


def _quote_if_needed(value: str) -> str:
    if any(ch in value for ch in (_DELIMITER, _QUOTE, "\n", "\r")):
        return _quote(value)
    return value


def format_transaction(transaction: Transaction) -> str:
    """One CSV line (without terminator) for a transaction."""
    return _DELIMITER.join([
        transaction.date.isoformat(),
        transaction.type.value,
        _quote_if_needed(transaction.category),
        _quote(transaction.description or ""),
        f"{quantize_amount(transaction.amount):.2f}",
    ])


def format_transactions(transactions: Iterable[Transaction]) -> str:
    """Header plus one line per transaction, in the order given."""
    lines = [_DELIMITER.join(EXPORT_HEADER)]
    lines.extend(format_transaction(t) for t in transactions)
    return _LINE_END.join(lines) + _LINE_END


def parse_export(text: str) -> list[dict[str, str]]:
    """Read exported text back into row dicts keyed by header name."""
    reader = csv.DictReader(text.splitlines(keepends=True))
    return [dict(row) for row in reader]


class CsvExporter:
    """Produces the delimited-text export of a user's transactions."""

    def __init__(self, storage: TransactionStorageInterface):
        self._storage = storage

    def to_delimited_text(self, user_id: int) -> str:
        """
        Render all of a user's transactions, most recent date first.

        Pure: nothing is written anywhere.
        """
        text, _ = self.export(user_id)
        return text

    def export(self, user_id: int) -> tuple[str, int]:
        """Render the export and report how many transaction rows it holds."""
        rows = self._storage.list_transactions(user_id)
        return format_transactions(rows), len(rows)

    def write(self, user_id: int, destination: Union[str, Path]) -> int:
        """
        Write the export to `destination` as UTF-8.

        Returns:
            Number of transaction rows written
        """
        text, row_count = self.export(user_id)
        Path(destination).write_text(text, encoding="utf-8", newline="")
        return row_count
