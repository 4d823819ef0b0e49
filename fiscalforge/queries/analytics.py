"""
Analytics Engine

DESIGN DECISION: Aggregation is DECIMAL-EXACT.
Rows are fetched through the storage interface and summed in Python
with Decimal, never with binary floating point. This keeps totals
correct to the cent on every backend, including SQLite, whose SUM()
works on floats.

GUARANTEES:
- Only returns figures computed from stored rows
- An empty result is 0.00 or an empty mapping, never an error
- Every figure has exactly two fractional digits
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Optional

from fiscalforge.models.finance import (
    FinancialSummary,
    Transaction,
    TransactionType,
    quantize_amount,
)
from fiscalforge.services.storage import TransactionStorageInterface


ZERO = Decimal("0.00")
DEFAULT_TREND_MONTHS = 12


def sum_amounts(items: Iterable[Transaction]) -> Decimal:
    """Decimal sum of transaction amounts, quantized to cents."""
    return quantize_amount(sum((item.amount for item in items), ZERO))


class AnalyticsEngine:
    """
    Computes totals, category breakdowns and monthly trends for one user.

    Reads go through TransactionStorageInterface; a ReadError from the
    storage propagates unchanged.
    """

    def __init__(
        self,
        storage: TransactionStorageInterface,
        trend_months: int = DEFAULT_TREND_MONTHS,
    ):
        if trend_months < 1:
            raise ValueError("trend_months must be at least 1")
        self._storage = storage
        self._trend_months = trend_months

    def total_by_type(
        self,
        user_id: int,
        transaction_type: TransactionType,
    ) -> Decimal:
        """Sum of a user's Income or Expense amounts (0.00 if none)."""
        rows = self._storage.list_transactions(
            user_id,
            transaction_type=TransactionType(transaction_type),
        )
        return sum_amounts(rows)

    def sum_by_category(self, user_id: int) -> dict[str, Decimal]:
        """
        Expense totals per category, largest first.

        Income is never included. Equal totals are ordered by category name.
        """
        expenses = self._storage.list_transactions(
            user_id,
            transaction_type=TransactionType.EXPENSE,
        )

        groups: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for transaction in expenses:
            groups[transaction.category] += transaction.amount

        ordered = sorted(groups.items(), key=lambda item: (-item[1], item[0]))
        return {category: quantize_amount(total) for category, total in ordered}

    def sum_by_month(
        self,
        user_id: int,
        months: Optional[int] = None,
    ) -> dict[str, Decimal]:
        """
        Expense totals per calendar month ("YYYY-MM"), newest first.

        Only months containing at least one expense appear, and only the
        most recent `months` of those (default: the configured trend length).
        """
        limit = months if months is not None else self._trend_months
        if limit < 1:
            raise ValueError("months must be at least 1")

        expenses = self._storage.list_transactions(
            user_id,
            transaction_type=TransactionType.EXPENSE,
        )

        groups: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for transaction in expenses:
            groups[transaction.date.strftime("%Y-%m")] += transaction.amount

        recent = sorted(groups, reverse=True)[:limit]
        return {month: quantize_amount(groups[month]) for month in recent}

    def balance(self, user_id: int) -> Decimal:
        """Income minus expenses."""
        rows = self._storage.list_transactions(user_id)
        return quantize_amount(sum((row.signed_amount for row in rows), ZERO))

    def summary(self, user_id: int) -> FinancialSummary:
        """Income, expenses and balance from a single read."""
        rows = self._storage.list_transactions(user_id)
        income = sum_amounts(r for r in rows if r.type == TransactionType.INCOME)
        expenses = sum_amounts(r for r in rows if r.type == TransactionType.EXPENSE)
        return FinancialSummary(
            user_id=user_id,
            total_income=income,
            total_expenses=expenses,
            balance=income - expenses,
        )
