"""
Tests for transaction storage.
"""

from datetime import date
from decimal import Decimal

import pytest

from fiscalforge.models import TransactionType
from fiscalforge.services.storage import ConstraintError, SqlTransactionStorage


class TestAddTransaction:
    """Tests for add_transaction."""

    def test_returns_stored_copy_with_id(self, tracker, alice, make_transaction):
        stored = tracker.add_transaction(
            make_transaction(alice.id, amount="45.50", description="Lunch")
        )
        assert stored.id is not None
        assert stored.user_id == alice.id
        assert stored.amount == Decimal("45.50")
        assert stored.description == "Lunch"
        assert stored.created_at is not None

    def test_ids_are_unique(self, tracker, alice, make_transaction):
        first = tracker.add_transaction(make_transaction(alice.id))
        second = tracker.add_transaction(make_transaction(alice.id))
        assert first.id != second.id

    def test_amount_read_back_exactly(self, tracker, alice, make_transaction):
        """Test cents survive the NUMERIC(10, 2) round trip."""
        tracker.add_transaction(make_transaction(alice.id, amount="0.10"))
        tracker.add_transaction(make_transaction(alice.id, amount="99999999.99"))
        amounts = sorted(t.amount for t in tracker.list_all(alice.id))
        assert amounts == [Decimal("0.10"), Decimal("99999999.99")]

    def test_unknown_user_is_constraint_error(self, tracker, make_transaction):
        """Test the owning user must exist."""
        with pytest.raises(ConstraintError):
            tracker.add_transaction(make_transaction(user_id=9999))

    def test_missing_description_is_none(self, tracker, alice, make_transaction):
        stored = tracker.add_transaction(make_transaction(alice.id))
        assert stored.description is None


class TestListing:
    """Tests for list_all and list_recent."""

    def test_list_all_newest_date_first(self, tracker, alice, make_transaction):
        for day in (14, 16, 15):
            tracker.add_transaction(make_transaction(alice.id, on=date(2025, 1, day)))

        dates = [t.date for t in tracker.list_all(alice.id)]
        assert dates == [date(2025, 1, 16), date(2025, 1, 15), date(2025, 1, 14)]

    def test_list_all_only_returns_own_rows(self, tracker, alice, make_transaction):
        bob = tracker.register("bob", "pw")
        tracker.add_transaction(make_transaction(alice.id))
        tracker.add_transaction(make_transaction(bob.id))

        assert [t.user_id for t in tracker.list_all(alice.id)] == [alice.id]
        assert [t.user_id for t in tracker.list_all(bob.id)] == [bob.id]

    def test_list_all_empty(self, tracker, alice):
        assert tracker.list_all(alice.id) == []

    def test_same_day_ordered_by_latest_insert(self, tracker, alice, make_transaction):
        """Test ties on date put the most recently added first."""
        first = tracker.add_transaction(make_transaction(alice.id, category="A"))
        second = tracker.add_transaction(make_transaction(alice.id, category="B"))

        assert [t.id for t in tracker.list_recent(alice.id, 2)] == [second.id, first.id]

    def test_list_recent_is_prefix_of_list_all(self, tracker, alice, make_transaction):
        """Test recent rows are the head of the full listing."""
        for day in (3, 9, 1, 9, 5, 2, 9):
            tracker.add_transaction(make_transaction(alice.id, on=date(2025, 2, day)))

        everything = tracker.list_all(alice.id)
        for limit in range(0, len(everything) + 2):
            recent = tracker.list_recent(alice.id, limit)
            assert len(recent) == min(limit, len(everything))
            assert [t.id for t in recent] == [t.id for t in everything[:limit]]

    def test_list_recent_default_limit(self, tracker, alice, make_transaction):
        """Test the dashboard default of ten rows."""
        for day in range(1, 13):
            tracker.add_transaction(make_transaction(alice.id, on=date(2025, 3, day)))

        recent = tracker.list_recent(alice.id)
        assert len(recent) == 10
        assert recent[0].date == date(2025, 3, 12)

    def test_negative_limit_rejected(self, database):
        with pytest.raises(ValueError):
            SqlTransactionStorage(database).list_recent_transactions(1, -1)

    def test_filter_by_type(self, database, tracker, alice, make_transaction):
        tracker.add_transaction(make_transaction(alice.id, TransactionType.INCOME, "5.00"))
        tracker.add_transaction(make_transaction(alice.id, TransactionType.EXPENSE, "2.00"))

        incomes = SqlTransactionStorage(database).list_transactions(
            alice.id, transaction_type=TransactionType.INCOME
        )
        assert [t.type for t in incomes] == [TransactionType.INCOME]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
