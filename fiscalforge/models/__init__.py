"""
Data Models Package

This package contains all Pydantic models used in FiscalForge.
All data flowing through the system must conform to these schemas.
"""

from fiscalforge.models.finance import (
    CENT,
    MAX_EMAIL_LENGTH,
    MAX_USERNAME_LENGTH,
    Budget,
    FinancialSummary,
    Transaction,
    TransactionType,
    User,
    ValidationIssue,
    ValidationResult,
    quantize_amount,
)
from fiscalforge.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Finance models
    "CENT",
    "MAX_EMAIL_LENGTH",
    "MAX_USERNAME_LENGTH",
    "Budget",
    "FinancialSummary",
    "Transaction",
    "TransactionType",
    "User",
    "ValidationIssue",
    "ValidationResult",
    "quantize_amount",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
