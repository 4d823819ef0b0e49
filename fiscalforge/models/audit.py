"""
Audit Models for FiscalForge

Registrations, logins, transaction writes, failed reads and exports each
produce one AuditEvent, so a user's history can be reconstructed from the
log alone and failures can be traced back to the request that caused them.

DESIGN DECISION: Audit events never carry passwords or password digests.
Login failures are recorded identically whether the username exists or not.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Startup
    SCHEMA_ENSURED = "schema_ensured"
    SCHEMA_FAILED = "schema_failed"

    # Accounts
    USER_REGISTERED = "user_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_REJECTED = "transaction_rejected"
    VALIDATION_FAILED = "validation_failed"

    # Reads and export
    READ_FAILED = "read_failed"
    EXPORT_GENERATED = "export_generated"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Maps onto the stdlib log level the event is written at."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    One entry in the structured log. Builders in AuditEventBuilder fill
    in the type, severity and entity for each kind of action.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="UTC time the event was created"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Subject of the event
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'user', 'transaction', 'schema')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="Database id of the entity this event relates to"
    )
    user_id: Optional[int] = Field(
        default=None,
        description="User the action was performed for"
    )

    # Groups the events of one form submission
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one form submission)"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="One-line summary for humans reading the log"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Set for failures only
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="True when a person, not startup or a query, caused it"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Factory methods, one per audited action.

    Usage:
        event = AuditEventBuilder.user_registered(user_id, username)
        event = AuditEventBuilder.transaction_added(transaction_id, user_id, "Expense", "45.50")
    """

    @staticmethod
    def schema_ensured(database: str, tables: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEMA_ENSURED,
            entity_type="schema",
            description=f"Schema ready on {database}",
            details={"database": database, "tables": tables},
        )

    @staticmethod
    def schema_failed(database: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SCHEMA_FAILED,
            severity=AuditSeverity.CRITICAL,
            entity_type="schema",
            description=f"Schema could not be created on {database}",
            details={"database": database},
            error_message=error_message,
        )

    @staticmethod
    def user_registered(
        user_id: int,
        username: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"User registered: {username}",
            details={"username": username},
            is_user_action=True,
        )

    @staticmethod
    def registration_rejected(
        username: str,
        reason: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            correlation_id=correlation_id,
            description=f"Registration rejected for {username}: {reason}",
            details={"username": username, "reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def login_succeeded(
        user_id: int,
        username: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            entity_type="user",
            entity_id=user_id,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"User logged in: {username}",
            details={"username": username},
            is_user_action=True,
        )

    @staticmethod
    def login_failed(
        username: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            correlation_id=correlation_id,
            description="Login failed: invalid username or password",
            details={"username": username},
            is_user_action=True,
        )

    @staticmethod
    def transaction_added(
        transaction_id: int,
        user_id: int,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"{transaction_type} of {amount} recorded",
            details={"type": transaction_type, "amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def transaction_rejected(
        user_id: int,
        reason: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="transaction",
            user_id=user_id,
            correlation_id=correlation_id,
            description="Transaction could not be stored",
            error_message=reason,
        )

    @staticmethod
    def validation_failed(
        form: str,
        issues: list[dict],
        user_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=form,
            user_id=user_id,
            correlation_id=correlation_id,
            description=f"{form.capitalize()} input failed validation with {len(issues)} issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def read_failed(
        operation: str,
        user_id: int,
        error_message: str,
        degraded: bool
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.READ_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="query",
            user_id=user_id,
            description=f"Read failed: {operation}",
            details={"operation": operation, "degraded_to_empty": degraded},
            error_message=error_message,
        )

    @staticmethod
    def export_generated(
        user_id: int,
        row_count: int,
        destination: Optional[str] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPORT_GENERATED,
            entity_type="export",
            user_id=user_id,
            description=f"Exported {row_count} transactions",
            details={"row_count": row_count, "destination": destination},
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
