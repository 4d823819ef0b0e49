"""
Two-Stage Input Validation

Form input from the UI is validated here, before anything reaches storage.

STAGE 1 - SCHEMA VALIDATION:
- Amount parses as a decimal number
- Type is Income or Expense
- Required fields are present
- Date is a real calendar date

STAGE 2 - SEMANTIC VALIDATION:
- Amount fits the NUMERIC(10, 2) column
- Date is not far in the future

Stage 2 only runs when stage 1 passes. Validation NEVER silently fixes
input (beyond trimming whitespace); it reports issues for the user.
"""

import re
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from fiscalforge.config import AppSettings, get_settings
from fiscalforge.models.finance import (
    MAX_EMAIL_LENGTH,
    MAX_USERNAME_LENGTH,
    Transaction,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MAX_CATEGORY_LENGTH = 50


def _result(schema_issues: list[ValidationIssue], semantic_issues: list[ValidationIssue]) -> ValidationResult:
    schema_valid = not any(i.severity == "error" for i in schema_issues)
    semantic_valid = not any(i.severity == "error" for i in semantic_issues)
    return ValidationResult(
        schema_valid=schema_valid,
        semantic_valid=semantic_valid,
        is_valid=schema_valid and semantic_valid,
        issues=schema_issues + semantic_issues,
    )


class TransactionInputValidator:
    """
    Validates raw transaction and registration form input.

    Produces a Transaction only when there are no error-level issues.
    """

    def __init__(self, settings: Optional[AppSettings] = None):
        self._settings = settings or get_settings().app

    def validate_transaction(
        self,
        user_id: int,
        date_value: Union[date, str, None],
        type_value: Union[TransactionType, str, None],
        category: Optional[str],
        description: Optional[str],
        amount_text: Union[str, Decimal, None],
        today: Optional[date] = None,
    ) -> tuple[Optional[Transaction], ValidationResult]:
        """
        Parse and check one transaction form submission.

        Returns:
            (transaction, result) - transaction is None when result has errors
        """
        schema_issues: list[ValidationIssue] = []

        amount = self._parse_amount(amount_text, schema_issues)
        transaction_type = self._parse_type(type_value, schema_issues)
        transaction_date = self._parse_date(date_value, schema_issues)

        category = (category or "").strip()
        if not category:
            schema_issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message="Category is required",
                severity="error",
                suggested_fix="Pick a category such as Food or Salary",
            ))
        elif len(category) > MAX_CATEGORY_LENGTH:
            schema_issues.append(ValidationIssue(
                field="category",
                issue_type="too_long",
                message=f"Category must be at most {MAX_CATEGORY_LENGTH} characters",
                severity="error",
            ))

        semantic_issues: list[ValidationIssue] = []
        if not any(i.severity == "error" for i in schema_issues):
            semantic_issues = self._validate_semantic(
                amount,
                transaction_date,
                today or date.today(),
            )

        result = _result(schema_issues, semantic_issues)
        if not result.is_valid:
            return None, result

        description = (description or "").strip() or None
        transaction = Transaction(
            user_id=user_id,
            date=transaction_date,
            type=transaction_type,
            category=category,
            description=description,
            amount=amount,
        )
        return transaction, result

    def validate_registration(
        self,
        username: Optional[str],
        password: Optional[str],
        confirm_password: Optional[str] = None,
        email: Optional[str] = None,
    ) -> ValidationResult:
        """Check a registration form before it reaches the account service."""
        issues: list[ValidationIssue] = []
        username = (username or "").strip()
        email = (email or "").strip()

        if not username or not password:
            issues.append(ValidationIssue(
                field="username" if not username else "password",
                issue_type="missing",
                message="Username and password are required.",
                severity="error",
            ))
        if len(username) > MAX_USERNAME_LENGTH:
            issues.append(ValidationIssue(
                field="username",
                issue_type="too_long",
                message=f"Username must be at most {MAX_USERNAME_LENGTH} characters",
                severity="error",
            ))
        if confirm_password is not None and password != confirm_password:
            issues.append(ValidationIssue(
                field="confirm_password",
                issue_type="mismatch",
                message="Passwords do not match.",
                severity="error",
                suggested_fix="Type the same password in both fields",
            ))
        if len(email) > MAX_EMAIL_LENGTH:
            issues.append(ValidationIssue(
                field="email",
                issue_type="too_long",
                message=f"Email must be at most {MAX_EMAIL_LENGTH} characters",
                severity="error",
            ))
        elif email and not _EMAIL_PATTERN.match(email):
            issues.append(ValidationIssue(
                field="email",
                issue_type="invalid_format",
                message=f"Email address looks invalid: {email}",
                severity="error",
            ))

        return _result(issues, [])

    def _parse_amount(
        self,
        amount_text: Union[str, Decimal, None],
        issues: list[ValidationIssue],
    ) -> Optional[Decimal]:
        raw = str(amount_text).strip() if amount_text is not None else ""
        if not raw:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="missing",
                message="Amount is required",
                severity="error",
            ))
            return None

        try:
            amount = Decimal(raw)
        except InvalidOperation:
            amount = None
        if amount is None or not amount.is_finite():
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_format",
                message="Please enter a valid amount.",
                severity="error",
                suggested_fix="Use digits with an optional decimal point, e.g. 45.50",
            ))
            return None

        if amount < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="negative",
                message="Amount cannot be negative; choose Expense instead",
                severity="error",
            ))
        if amount.as_tuple().exponent < -2:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="too_precise",
                message="Amount can have at most 2 decimal places",
                severity="error",
            ))
        return amount

    def _parse_type(
        self,
        type_value: Union[TransactionType, str, None],
        issues: list[ValidationIssue],
    ) -> Optional[TransactionType]:
        raw = type_value.value if isinstance(type_value, TransactionType) else (type_value or "")
        for member in TransactionType:
            if raw.strip().lower() == member.value.lower():
                return member
        issues.append(ValidationIssue(
            field="type",
            issue_type="invalid_value",
            message=f"Type must be Income or Expense, got {raw!r}",
            severity="error",
        ))
        return None

    def _parse_date(
        self,
        date_value: Union[date, str, None],
        issues: list[ValidationIssue],
    ) -> Optional[date]:
        if isinstance(date_value, date):
            return date_value
        raw = (date_value or "").strip()
        if not raw:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Date is required",
                severity="error",
            ))
            return None
        try:
            return date.fromisoformat(raw)
        except ValueError:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date must be YYYY-MM-DD, got {raw!r}",
                severity="error",
            ))
            return None

    def _validate_semantic(
        self,
        amount: Decimal,
        transaction_date: date,
        today: date,
    ) -> list[ValidationIssue]:
        issues = []

        if amount > self._settings.max_transaction_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="out_of_range",
                message=f"Amount exceeds the maximum of {self._settings.max_transaction_amount}",
                severity="error",
            ))

        tolerance = timedelta(days=self._settings.future_date_tolerance_days)
        if transaction_date > today + tolerance:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Date {transaction_date.isoformat()} is in the future",
                severity="warning",
                suggested_fix="Check the date picker",
            ))

        return issues
