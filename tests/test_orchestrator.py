"""
Integration tests for the FinanceTracker facade.
"""

import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from fiscalforge.config import AppSettings, validate_all_settings
from fiscalforge.models import FinancialSummary, TransactionType
from fiscalforge.orchestrator import create_app_components
from fiscalforge.services.storage import ConstraintError, ReadError, SchemaManager


@pytest.fixture
def lenient_tracker(database_settings):
    tracker = create_app_components(database_settings, AppSettings(lenient_reads=True))
    tracker.ensure_schema()
    yield tracker
    tracker.close()


def _audit_events(caplog) -> list[dict]:
    events = []
    for record in caplog.records:
        if record.name == "fiscalforge.audit":
            events.append(json.loads(record.getMessage()))
    return events


class TestFormFlows:
    """Tests for the *_from_input helpers."""

    def test_add_transaction_from_input(self, tracker, alice):
        stored, result = tracker.add_transaction_from_input(
            user_id=alice.id,
            date_value="2025-01-15",
            type_value="Expense",
            category="Food",
            description="Lunch",
            amount_text="45.50",
        )
        assert result.is_valid
        assert stored.id is not None
        assert tracker.list_all(alice.id) == [stored]

    def test_invalid_input_never_reaches_storage(self, tracker, alice):
        stored, result = tracker.add_transaction_from_input(
            user_id=alice.id,
            date_value="2025-01-15",
            type_value="Expense",
            category="Food",
            description=None,
            amount_text="forty",
        )
        assert stored is None
        assert result.issues[0].message == "Please enter a valid amount."
        assert tracker.list_all(alice.id) == []

    def test_register_from_input(self, tracker):
        user, result = tracker.register_from_input("alice", "secret1", "secret1")
        assert result.is_valid
        assert tracker.authenticate("alice", "secret1") == user

    def test_register_from_input_mismatch(self, tracker):
        user, result = tracker.register_from_input("alice", "secret1", "secret2")
        assert user is None
        assert not result.is_valid
        assert tracker.authenticate("alice", "secret1") is None

    def test_register_from_input_long_email(self, tracker):
        """Test an email wider than its column is reported, not stored."""
        user, result = tracker.register_from_input("bob", "pw", "pw", "a" * 95 + "@x.com")
        assert user is None
        assert result.issues[0].field == "email"
        assert tracker.authenticate("bob", "pw") is None

    def test_default_categories(self, tracker):
        assert tracker.default_categories == [
            "Food", "Transport", "Entertainment", "Bills", "Shopping", "Salary", "Other",
        ]


class TestReadFailures:
    """Tests for strict and lenient read handling."""

    def test_strict_reads_raise(self, database, tracker, alice):
        SchemaManager(database).drop_schema()

        with pytest.raises(ReadError):
            tracker.list_all(alice.id)
        with pytest.raises(ReadError):
            tracker.total_by_type(alice.id, TransactionType.INCOME)
        with pytest.raises(ReadError):
            tracker.to_delimited_text(alice.id)

    def test_lenient_reads_degrade_to_empty(self, database, lenient_tracker):
        alice = lenient_tracker.register("alice", "secret1")
        SchemaManager(database).drop_schema()

        assert lenient_tracker.list_all(alice.id) == []
        assert lenient_tracker.list_recent(alice.id) == []
        assert lenient_tracker.total_by_type(alice.id, TransactionType.EXPENSE) == Decimal("0.00")
        assert lenient_tracker.sum_by_category(alice.id) == {}
        assert lenient_tracker.sum_by_month(alice.id) == {}
        assert lenient_tracker.summary(alice.id) == FinancialSummary(user_id=alice.id)
        assert lenient_tracker.to_delimited_text(alice.id) == "Date,Type,Category,Description,Amount\n"

    def test_degraded_export_is_not_logged_as_generated(self, caplog, database, lenient_tracker):
        alice = lenient_tracker.register("alice", "secret1")
        SchemaManager(database).drop_schema()
        caplog.clear()

        with caplog.at_level(logging.INFO, logger="fiscalforge.audit"):
            lenient_tracker.to_delimited_text(alice.id)

        events = _audit_events(caplog)
        assert [e["event_type"] for e in events] == ["read_failed"]
        assert events[0]["details"]["degraded_to_empty"] is True

    def test_writes_are_never_lenient(self, lenient_tracker, make_transaction):
        alice = lenient_tracker.register("alice", "secret1")
        with pytest.raises(ConstraintError):
            lenient_tracker.add_transaction(make_transaction(alice.id + 1))


class TestAuditTrail:
    """Tests for the structured audit log."""

    def test_failed_login_is_logged_without_password(self, caplog, tracker, alice):
        with caplog.at_level(logging.INFO, logger="fiscalforge.audit"):
            tracker.authenticate("alice", "wrong-password")

        events = _audit_events(caplog)
        assert [e["event_type"] for e in events] == ["login_failed"]
        assert "wrong-password" not in caplog.text

    def test_transaction_events(self, caplog, tracker, alice, make_transaction):
        with caplog.at_level(logging.INFO, logger="fiscalforge.audit"):
            stored = tracker.add_transaction(make_transaction(alice.id, amount="45.50"))
            with pytest.raises(ConstraintError):
                tracker.add_transaction(make_transaction(alice.id + 100))
            tracker.to_delimited_text(alice.id)

        events = _audit_events(caplog)
        assert [e["event_type"] for e in events] == [
            "transaction_added",
            "transaction_rejected",
            "export_generated",
        ]
        assert events[0]["entity_id"] == stored.id
        assert events[2]["details"]["row_count"] == 1

    def test_export_write_failure_is_logged(self, caplog, tmp_path, tracker, alice):
        """Test an unwritable destination raises and leaves an error event."""
        with caplog.at_level(logging.INFO, logger="fiscalforge.audit"):
            with pytest.raises(OSError):
                tracker.export_to_file(alice.id, tmp_path)

        events = _audit_events(caplog)
        assert [e["event_type"] for e in events] == ["system_error"]
        assert events[0]["details"]["destination"] == str(tmp_path)


class TestFactory:
    """Tests for create_app_components."""

    def test_settings_validate(self):
        results = validate_all_settings()
        assert results["database"] is True
        assert results["app"] is True

    def test_two_trackers_share_one_database(self, database_settings, tracker, alice, make_transaction):
        tracker.add_transaction(make_transaction(alice.id, on=date(2025, 1, 1)))

        other = create_app_components(database_settings, AppSettings())
        try:
            assert other.authenticate("alice", "secret1") == alice
            assert len(other.list_all(alice.id)) == 1
        finally:
            other.close()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
