"""
Tests for FiscalForge models

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for flows against a throwaway SQLite database
3. No database server or network access in tests
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from fiscalforge.models import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
    Budget,
    FinancialSummary,
    Transaction,
    TransactionType,
    User,
    ValidationIssue,
    ValidationResult,
    quantize_amount,
)


class TestTransactionModels:
    """Tests for transaction-related Pydantic models."""

    def test_transaction_creation(self):
        """Test Transaction model creation."""
        transaction = Transaction(
            user_id=1,
            date=date(2025, 1, 15),
            type=TransactionType.EXPENSE,
            category="Food",
            description="Lunch",
            amount=Decimal("45.5"),
        )
        assert transaction.id is None
        assert transaction.category == "Food"
        assert transaction.amount == Decimal("45.50")

    def test_amount_always_has_two_fractional_digits(self):
        """Test that amounts are normalized to cents."""
        transaction = Transaction(
            user_id=1,
            date=date(2025, 1, 15),
            type="Income",
            category="Salary",
            amount=Decimal("3000"),
        )
        assert str(transaction.amount) == "3000.00"
        assert transaction.type == TransactionType.INCOME

    def test_transaction_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            Transaction(
                user_id=1,
                date=date(2025, 1, 15),
                type=TransactionType.EXPENSE,
                category="Food",
                amount=Decimal("-1.00"),
            )

    def test_transaction_rejects_three_decimal_places(self):
        """Test that sub-cent amounts are rejected."""
        with pytest.raises(ValueError):
            Transaction(
                user_id=1,
                date=date(2025, 1, 15),
                type=TransactionType.EXPENSE,
                category="Food",
                amount=Decimal("1.005"),
            )

    def test_transaction_rejects_unknown_type(self):
        """Test that only Income and Expense are accepted."""
        with pytest.raises(ValueError):
            Transaction(
                user_id=1,
                date=date(2025, 1, 15),
                type="Transfer",
                category="Food",
                amount=Decimal("1.00"),
            )

    def test_transaction_strips_whitespace(self):
        """Test that whitespace is stripped from category."""
        transaction = Transaction(
            user_id=1,
            date=date(2025, 1, 15),
            type=TransactionType.EXPENSE,
            category="  Food  ",
            amount=Decimal("1.00"),
        )
        assert transaction.category == "Food"

    def test_signed_amount(self):
        """Test that expenses count negative and income positive."""
        expense = Transaction(
            user_id=1, date=date(2025, 1, 15), type="Expense",
            category="Food", amount=Decimal("45.50"),
        )
        income = Transaction(
            user_id=1, date=date(2025, 1, 14), type="Income",
            category="Salary", amount=Decimal("3000.00"),
        )
        assert expense.signed_amount == Decimal("-45.50")
        assert income.signed_amount == Decimal("3000.00")

    def test_user_has_no_password_field(self):
        """Test that the caller-facing user never carries a digest."""
        user = User(id=1, username="alice")
        assert "password_hash" not in user.model_dump()

    def test_budget_date_validation(self):
        """Test that budget end date cannot precede start date."""
        with pytest.raises(ValueError):
            Budget(
                user_id=1,
                category="Food",
                amount=Decimal("200.00"),
                period="monthly",
                start_date=date(2025, 2, 1),
                end_date=date(2025, 1, 1),
            )

    def test_financial_summary_overspent(self):
        """Test the overspent flag."""
        summary = FinancialSummary(
            user_id=1,
            total_income=Decimal("10.00"),
            total_expenses=Decimal("12.00"),
            balance=Decimal("-2.00"),
        )
        assert summary.is_overspent
        assert not FinancialSummary(user_id=1).is_overspent

    def test_quantize_amount(self):
        assert quantize_amount(Decimal("0.1") + Decimal("0.2")) == Decimal("0.30")


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            description="User registered: alice",
        )
        assert event.event_type == AuditEventType.USER_REGISTERED
        assert event.severity == AuditSeverity.INFO
        assert event.event_id is not None
        assert event.timestamp.tzinfo is not None

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        correlation_id = uuid4()
        event = AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_id=7,
            user_id=1,
            correlation_id=correlation_id,
            description="Expense of 45.50 recorded",
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "transaction_added"
        assert log_dict["entity_id"] == 7
        assert log_dict["correlation_id"] == str(correlation_id)

    def test_audit_event_builder_user_registered(self):
        """Test the user_registered builder."""
        event = AuditEventBuilder.user_registered(user_id=3, username="alice")
        assert event.event_type == AuditEventType.USER_REGISTERED
        assert event.entity_id == 3
        assert event.is_user_action is True
        assert event.details["username"] == "alice"

    def test_login_failed_never_reveals_the_cause(self):
        """Test that failed logins carry one fixed description."""
        event = AuditEventBuilder.login_failed(username="nobody")
        assert event.severity == AuditSeverity.WARNING
        assert event.description == "Login failed: invalid username or password"
        assert "password" not in event.details

    def test_audit_event_builder_read_failed(self):
        """Test the read_failed builder."""
        event = AuditEventBuilder.read_failed(
            operation="list_all",
            user_id=1,
            error_message="no such table",
            degraded=True,
        )
        assert event.severity == AuditSeverity.ERROR
        assert event.details == {"operation": "list_all", "degraded_to_empty": True}


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            schema_valid=False,
            semantic_valid=True,
            is_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="invalid_format",
                    message="Please enter a valid amount.",
                    severity="error",
                )
            ],
        )
        assert result.has_errors
        assert result.error_count == 1

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=True,
            is_valid=True,
            issues=[
                ValidationIssue(
                    field="date",
                    issue_type="future_date",
                    message="Date is in the future",
                    severity="warning",
                )
            ],
        )
        assert not result.has_errors
        assert result.warnings == ["Date is in the future"]

    def test_issue_severity_is_restricted(self):
        with pytest.raises(ValueError):
            ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="fatal",
            )


class TestTransactionTypes:
    """Tests for transaction type enum."""

    def test_type_values(self):
        """Test the stored type values."""
        assert TransactionType.INCOME.value == "Income"
        assert TransactionType.EXPENSE.value == "Expense"
        assert len(TransactionType) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
