"""Export package."""

from fiscalforge.export.csv_exporter import (
    EXPORT_HEADER,
    CsvExporter,
    format_transaction,
    format_transactions,
    parse_export,
)

__all__ = [
    "EXPORT_HEADER",
    "CsvExporter",
    "format_transaction",
    "format_transactions",
    "parse_export",
]
