"""
Main Orchestrator for FiscalForge

This module ties together all the components and exposes the single
operation surface the UI layer calls:

    ensure_schema, register, authenticate, get_user, add_transaction, list_all,
    list_recent, total_by_type, sum_by_category, sum_by_month,
    to_delimited_text (plus summary and export helpers)

DESIGN DECISION: The orchestrator holds no "current user". Every call
names the user it acts for, so each operation can be exercised on its
own and two users never share state.

Read failures raise ReadError by default. With `lenient_reads` enabled
they are logged and degraded to empty results, which is what a dashboard
that prefers blank charts over error dialogs wants.
"""

from decimal import Decimal
from pathlib import Path
from typing import Callable, Optional, TypeVar, Union
from uuid import UUID

from fiscalforge.audit import AuditLogger, configure_logging, create_correlation_id
from fiscalforge.config import AppSettings, DatabaseSettings, get_settings
from fiscalforge.export import CsvExporter, format_transactions
from fiscalforge.models.finance import (
    FinancialSummary,
    Transaction,
    TransactionType,
    User,
    ValidationResult,
)
from fiscalforge.queries import AnalyticsEngine
from fiscalforge.services.auth import AccountService, CredentialHasher
from fiscalforge.services.storage import (
    DatabaseClient,
    NotFoundError,
    SchemaManager,
    SqlAccountStorage,
    SqlTransactionStorage,
    StorageError,
    TransactionStorageInterface,
)
from fiscalforge.validation import TransactionInputValidator


T = TypeVar("T")


class FinanceTracker:
    """
    Facade over accounts, transactions, analytics and export.

    Build one with create_app_components(); call ensure_schema() once
    at startup before anything else.
    """

    def __init__(
        self,
        schema_manager: SchemaManager,
        account_service: AccountService,
        transaction_storage: TransactionStorageInterface,
        analytics: AnalyticsEngine,
        exporter: CsvExporter,
        validator: TransactionInputValidator,
        audit_logger: AuditLogger,
        settings: AppSettings,
        database: Optional[DatabaseClient] = None,
    ):
        self._schema_manager = schema_manager
        self._accounts = account_service
        self._transactions = transaction_storage
        self._analytics = analytics
        self._exporter = exporter
        self._validator = validator
        self._audit_logger = audit_logger
        self._settings = settings
        self._database = database

    # -------------------------------------------------------------------------
    # Startup
    # -------------------------------------------------------------------------

    def ensure_schema(self) -> bool:
        """Create the database and tables if missing. Failure is fatal."""
        return self._schema_manager.ensure_schema()

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def register(
        self,
        username: str,
        password: str,
        email: Optional[str] = None,
    ) -> User:
        """
        Register a new user.

        Raises:
            DuplicateError: Username already taken
            ValueError: Username or password empty, or a field too long
        """
        return self._accounts.register(username, password, email)

    def authenticate(self, username: str, password: str) -> Optional[User]:
        """Return the user for valid credentials, None otherwise."""
        return self._accounts.authenticate(username, password)

    def get_user(self, user_id: int) -> User:
        """
        Look up a user by id.

        Raises:
            NotFoundError: No user has this id
        """
        user = self._accounts.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        return user

    def register_from_input(
        self,
        username: str,
        password: str,
        confirm_password: str,
        email: Optional[str] = None,
    ) -> tuple[Optional[User], ValidationResult]:
        """
        Validate a registration form, then register.

        Returns:
            (user, result) - user is None when validation failed.
            DuplicateError still propagates so the UI can say so.
        """
        correlation_id = create_correlation_id()
        result = self._validator.validate_registration(
            username, password, confirm_password, email
        )
        if not result.is_valid:
            self._audit_logger.log_validation_failed(
                form="registration",
                issues=[issue.model_dump() for issue in result.issues],
                correlation_id=correlation_id,
            )
            return None, result

        user = self._accounts.register(
            username, password, email, correlation_id=correlation_id
        )
        return user, result

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def add_transaction(
        self,
        transaction: Transaction,
        correlation_id: Optional[UUID] = None,
    ) -> Transaction:
        """
        Store a transaction and return it with its id.

        Raises:
            ConstraintError: The owning user does not exist
            StorageError: The write failed
        """
        try:
            stored = self._transactions.add_transaction(transaction)
        except StorageError as e:
            self._audit_logger.log_transaction_rejected(
                user_id=transaction.user_id,
                reason=str(e),
                correlation_id=correlation_id,
            )
            raise

        self._audit_logger.log_transaction_added(
            transaction_id=stored.id,
            user_id=stored.user_id,
            transaction_type=stored.type.value,
            amount=f"{stored.amount:.2f}",
            correlation_id=correlation_id,
        )
        return stored

    def add_transaction_from_input(
        self,
        user_id: int,
        date_value,
        type_value,
        category: Optional[str],
        description: Optional[str],
        amount_text,
    ) -> tuple[Optional[Transaction], ValidationResult]:
        """
        Validate raw form fields, then store the transaction.

        Malformed input never reaches the database.

        Returns:
            (stored_transaction, result) - transaction is None when invalid
        """
        correlation_id = create_correlation_id()
        transaction, result = self._validator.validate_transaction(
            user_id=user_id,
            date_value=date_value,
            type_value=type_value,
            category=category,
            description=description,
            amount_text=amount_text,
        )
        if transaction is None:
            self._audit_logger.log_validation_failed(
                form="transaction",
                issues=[issue.model_dump() for issue in result.issues],
                user_id=user_id,
                correlation_id=correlation_id,
            )
            return None, result

        return self.add_transaction(transaction, correlation_id=correlation_id), result

    def list_all(self, user_id: int) -> list[Transaction]:
        """All of a user's transactions, most recent date first."""
        return self._read(
            "list_all",
            user_id,
            lambda: self._transactions.list_transactions(user_id),
            [],
        )

    def list_recent(self, user_id: int, limit: Optional[int] = None) -> list[Transaction]:
        """The user's latest transactions (default limit from settings)."""
        if limit is None:
            limit = self._settings.recent_transactions_limit
        return self._read(
            "list_recent",
            user_id,
            lambda: self._transactions.list_recent_transactions(user_id, limit),
            [],
        )

    # -------------------------------------------------------------------------
    # Analytics
    # -------------------------------------------------------------------------

    def total_by_type(self, user_id: int, transaction_type: TransactionType) -> Decimal:
        return self._read(
            "total_by_type",
            user_id,
            lambda: self._analytics.total_by_type(user_id, transaction_type),
            Decimal("0.00"),
        )

    def sum_by_category(self, user_id: int) -> dict[str, Decimal]:
        return self._read(
            "sum_by_category",
            user_id,
            lambda: self._analytics.sum_by_category(user_id),
            {},
        )

    def sum_by_month(self, user_id: int) -> dict[str, Decimal]:
        return self._read(
            "sum_by_month",
            user_id,
            lambda: self._analytics.sum_by_month(user_id),
            {},
        )

    def summary(self, user_id: int) -> FinancialSummary:
        """Total income, total expenses and balance."""
        return self._read(
            "summary",
            user_id,
            lambda: self._analytics.summary(user_id),
            FinancialSummary(user_id=user_id),
        )

    def format_amount(self, amount: Decimal) -> str:
        """Amount with the configured currency symbol, e.g. £45.50."""
        sign = "-" if amount < 0 else ""
        return f"{sign}{self._settings.currency_symbol}{abs(amount):,.2f}"

    @property
    def default_categories(self) -> list[str]:
        """Category suggestions for the entry form."""
        return self._settings.default_categories_list

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def to_delimited_text(self, user_id: int) -> str:
        """CSV text of all of a user's transactions."""
        exported = self._read(
            "to_delimited_text",
            user_id,
            lambda: self._exporter.export(user_id),
            None,
        )
        if exported is None:
            return format_transactions([])

        text, row_count = exported
        self._audit_logger.log_export_generated(user_id=user_id, row_count=row_count)
        return text

    def export_to_file(self, user_id: int, destination: Union[str, Path]) -> int:
        """Write the CSV export to a path chosen by the caller."""
        try:
            row_count = self._exporter.write(user_id, destination)
        except OSError as e:
            self._audit_logger.log_error(
                error_type="export_write_failed",
                error_message=str(e),
                details={"user_id": user_id, "destination": str(destination)},
            )
            raise
        self._audit_logger.log_export_generated(
            user_id=user_id,
            row_count=row_count,
            destination=str(destination),
        )
        return row_count

    def close(self) -> None:
        """Release pooled database connections."""
        if self._database is not None:
            self._database.dispose()

    def _read(
        self,
        operation: str,
        user_id: int,
        query: Callable[[], T],
        fallback: T,
    ) -> T:
        try:
            return query()
        except StorageError as e:
            lenient = self._settings.lenient_reads
            self._audit_logger.log_read_failed(
                operation=operation,
                user_id=user_id,
                error_message=str(e),
                degraded=lenient,
            )
            if lenient:
                return fallback
            raise


def create_app_components(
    database_settings: Optional[DatabaseSettings] = None,
    app_settings: Optional[AppSettings] = None,
) -> FinanceTracker:
    """
    Factory function to create all application components.

    Args:
        database_settings: Overrides the environment-derived database settings
        app_settings: Overrides the environment-derived app settings

    Returns:
        A FinanceTracker wired to one shared database engine
    """
    settings = get_settings()
    database_settings = database_settings or settings.database
    app_settings = app_settings or settings.app

    configure_logging("DEBUG" if app_settings.debug_mode else app_settings.log_level)
    audit_logger = AuditLogger()

    database = DatabaseClient(database_settings)
    transaction_storage = SqlTransactionStorage(database)

    account_service = AccountService(
        storage=SqlAccountStorage(database),
        hasher=CredentialHasher(app_settings.password_hash_algorithm),
        audit_logger=audit_logger,
    )

    return FinanceTracker(
        schema_manager=SchemaManager(database, audit_logger),
        account_service=account_service,
        transaction_storage=transaction_storage,
        analytics=AnalyticsEngine(transaction_storage, trend_months=app_settings.trend_months),
        exporter=CsvExporter(transaction_storage),
        validator=TransactionInputValidator(app_settings),
        audit_logger=audit_logger,
        settings=app_settings,
        database=database,
    )
