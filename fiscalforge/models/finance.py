"""
Core Data Models for FiscalForge

These models define the strict schemas for all data flowing through the system.
They are designed to:
1. Enforce type safety at runtime
2. Keep money in Decimal with exactly two fractional digits
3. Provide clear validation error messages
4. Be serializable for storage and logging

DESIGN DECISION: The models carry no session state. Every record names
its owning user explicitly through user_id.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# Currency precision for every stored and aggregated amount
CENT = Decimal("0.01")

# Column widths of users.username and users.email
MAX_USERNAME_LENGTH = 50
MAX_EMAIL_LENGTH = 100


def quantize_amount(value: Decimal) -> Decimal:
    """Normalize a Decimal to exactly two fractional digits."""
    return Decimal(value).quantize(CENT)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """
    Direction of a transaction.

    The sign of an amount is implied by its type; amounts themselves
    are stored non-negative.
    """
    INCOME = "Income"
    EXPENSE = "Expense"


# =============================================================================
# ACCOUNT MODELS
# =============================================================================

class User(BaseModel):
    """
    A registered user as seen by callers.

    The password digest is deliberately absent: it never leaves the
    storage layer.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: int = Field(
        ...,
        description="System-assigned user identifier"
    )
    username: str = Field(
        ...,
        min_length=1,
        max_length=MAX_USERNAME_LENGTH,
        description="Unique login name"
    )
    email: Optional[str] = Field(
        default=None,
        max_length=MAX_EMAIL_LENGTH,
        description="Optional contact address"
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description="When the account was registered"
    )


# =============================================================================
# TRANSACTION MODELS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense record.

    id and created_at are assigned by the store; any value supplied
    on input is ignored when the transaction is added.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = Field(
        default=None,
        description="System-assigned identifier (populated after insert)"
    )
    user_id: int = Field(
        ...,
        description="Owning user"
    )
    date: date
    type: TransactionType
    category: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Free-text category label"
    )
    description: Optional[str] = Field(
        default=None,
        description="Optional free-text note"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        max_digits=10,
        decimal_places=2,
        description="Non-negative amount with currency precision"
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description="Insert timestamp used to order same-day transactions"
    )

    @field_validator('amount')
    @classmethod
    def normalize_amount(cls, v: Decimal) -> Decimal:
        """Always carry exactly two fractional digits."""
        return quantize_amount(v)

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign implied by the transaction type."""
        if self.type == TransactionType.EXPENSE:
            return -self.amount
        return self.amount


class Budget(BaseModel):
    """
    Budget goal for a category over a period.

    Present in the schema for forward compatibility; no operation
    reads or writes budgets yet.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Optional[int] = None
    user_id: int
    category: str = Field(..., min_length=1, max_length=50)
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    period: str = Field(..., min_length=1, max_length=20)
    start_date: date
    end_date: date

    @model_validator(mode='after')
    def validate_dates(self) -> 'Budget':
        """Validate date relationships."""
        if self.end_date < self.start_date:
            raise ValueError("Budget end date cannot be before start date")
        return self


# =============================================================================
# SUMMARY MODELS
# =============================================================================

class FinancialSummary(BaseModel):
    """Headline figures for a user's dashboard."""

    user_id: int
    total_income: Decimal = Field(default=Decimal("0.00"))
    total_expenses: Decimal = Field(default=Decimal("0.00"))
    balance: Decimal = Field(default=Decimal("0.00"))

    @property
    def is_overspent(self) -> bool:
        return self.balance < 0


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found in caller input."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'out_of_range')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage input validation.

    Stage 1: Schema validation (parsing, required fields)
    Stage 2: Semantic validation (range and plausibility checks)
    """

    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?"
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        """Messages of non-blocking issues."""
        return [issue.message for issue in self.issues if issue.severity == "warning"]
