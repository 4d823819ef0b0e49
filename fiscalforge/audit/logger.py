"""
Audit Logger

DESIGN DECISION: Audit events go to the local structured log only.
The schema holds users, transactions and budgets; there is no audit table.

The audit logger:
- Writes structured JSON through structlog
- Never raises (a logging failure must not break the main flow)
- Tags related events with a shared correlation id
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from fiscalforge.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# JSON lines through the stdlib logging tree
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(format="%(message)s", level=level)
    logging.getLogger("fiscalforge").setLevel(level)


class AuditLogger:
    """Writes AuditEvents to the "fiscalforge.audit" logger."""

    def __init__(self, logger_name: str = "fiscalforge.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> None:
        """Log an audit event at a level matching its severity."""
        log_dict = event.to_log_dict()

        try:
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            logging.getLogger(__name__).warning(
                "Failed to write audit event %s: %s", event.event_id, e
            )

    def log_schema_ensured(self, database: str, tables: list[str]) -> None:
        self.log(AuditEventBuilder.schema_ensured(database=database, tables=tables))

    def log_schema_failed(self, database: str, error_message: str) -> None:
        self.log(AuditEventBuilder.schema_failed(
            database=database,
            error_message=error_message,
        ))

    def log_user_registered(
        self,
        user_id: int,
        username: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new account."""
        self.log(AuditEventBuilder.user_registered(
            user_id=user_id,
            username=username,
            correlation_id=correlation_id,
        ))

    def log_registration_rejected(
        self,
        username: str,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.registration_rejected(
            username=username,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_login_succeeded(
        self,
        user_id: int,
        username: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.login_succeeded(
            user_id=user_id,
            username=username,
            correlation_id=correlation_id,
        ))

    def log_login_failed(
        self,
        username: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed login. Same event for unknown user and bad password."""
        self.log(AuditEventBuilder.login_failed(
            username=username,
            correlation_id=correlation_id,
        ))

    def log_transaction_added(
        self,
        transaction_id: int,
        user_id: int,
        transaction_type: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            user_id=user_id,
            transaction_type=transaction_type,
            amount=amount,
            correlation_id=correlation_id,
        ))

    def log_transaction_rejected(
        self,
        user_id: int,
        reason: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        self.log(AuditEventBuilder.transaction_rejected(
            user_id=user_id,
            reason=reason,
            correlation_id=correlation_id,
        ))

    def log_validation_failed(
        self,
        form: str,
        issues: list[dict],
        user_id: Optional[int] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log rejected form input."""
        self.log(AuditEventBuilder.validation_failed(
            form=form,
            issues=issues,
            user_id=user_id,
            correlation_id=correlation_id,
        ))

    def log_read_failed(
        self,
        operation: str,
        user_id: int,
        error_message: str,
        degraded: bool,
    ) -> None:
        self.log(AuditEventBuilder.read_failed(
            operation=operation,
            user_id=user_id,
            error_message=error_message,
            degraded=degraded,
        ))

    def log_export_generated(
        self,
        user_id: int,
        row_count: int,
        destination: Optional[str] = None,
    ) -> None:
        self.log(AuditEventBuilder.export_generated(
            user_id=user_id,
            row_count=row_count,
            destination=destination,
        ))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """
    New id shared by every event of one user action, such as a form
    submission and the write it leads to.
    """
    return uuid4()
