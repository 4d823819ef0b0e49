"""
Schema Manager

Defines the persisted entities and creates them on startup.

DESIGN DECISION: Schema creation is idempotent. `ensure_schema()` runs on
every launch and only creates what is missing; existing tables and rows
are never altered. A failure here is fatal: the application cannot run
without a valid schema.
"""

from pathlib import Path
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
    create_engine,
    func,
    inspect,
    text,
)
from sqlalchemy.engine import URL
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError

from fiscalforge.audit import AuditLogger
from fiscalforge.services.storage.database import DatabaseClient
from fiscalforge.services.storage.interface import ConnectionError, SchemaError


metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(50), unique=True, nullable=False),
    Column("password_hash", String(128), nullable=False),
    Column("email", String(100)),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)

transactions = Table(
    "transactions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("date", Date, nullable=False),
    Column("type", String(20), nullable=False),
    Column("category", String(50), nullable=False),
    Column("description", Text),
    Column("amount", Numeric(10, 2), nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    CheckConstraint("type IN ('Income', 'Expense')", name="ck_transactions_type"),
)

# Placeholder for budget goals; no operation reads or writes it yet
budgets = Table(
    "budgets",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("category", String(50), nullable=False),
    Column("amount", Numeric(10, 2), nullable=False),
    Column("period", String(20), nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
)

TABLE_NAMES = [table.name for table in metadata.sorted_tables]

# Database each server backend is reached through before ours exists
_SERVER_DATABASES = {
    "mysql": None,
    "postgresql": "postgres",
}


class SchemaManager:
    """Creates the database and its tables if they are missing."""

    def __init__(
        self,
        database: DatabaseClient,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._database = database
        self._audit_logger = audit_logger

    def ensure_schema(self) -> bool:
        """
        Create the database (if absent) and the users, transactions and
        budgets tables (if absent).

        Returns:
            True once the schema is in place

        Raises:
            ConnectionError: If the server cannot be reached or refuses access
            SchemaError: If the DDL fails for any other reason
        """
        engine = self._database.connect()
        display_url = self._database.display_url

        try:
            self._ensure_database(engine.url)
            metadata.create_all(engine, checkfirst=True)
        except (OperationalError, InterfaceError, OSError) as e:
            self._log_failure(display_url, str(e))
            raise ConnectionError(f"Could not reach database {display_url}: {e}") from e
        except SQLAlchemyError as e:
            self._log_failure(display_url, str(e))
            raise SchemaError(f"Failed to create schema on {display_url}: {e}") from e

        if self._audit_logger:
            self._audit_logger.log_schema_ensured(display_url, TABLE_NAMES)
        return True

    def existing_tables(self) -> list[str]:
        """Names of the tables currently present in the database."""
        return inspect(self._database.connect()).get_table_names()

    def drop_schema(self) -> None:
        """Drop all tables. Development and tests only."""
        try:
            metadata.drop_all(self._database.connect(), checkfirst=True)
        except SQLAlchemyError as e:
            raise SchemaError(f"Failed to drop schema: {e}") from e

    def _ensure_database(self, url: URL) -> None:
        backend = url.get_backend_name()

        if backend == "sqlite":
            if url.database and url.database != ":memory:" and not url.database.startswith("file:"):
                Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
            return

        if backend not in _SERVER_DATABASES or not url.database:
            return

        server_engine = create_engine(
            url.set(database=_SERVER_DATABASES[backend]),
            isolation_level="AUTOCOMMIT",
        )
        try:
            quoted = server_engine.dialect.identifier_preparer.quote(url.database)
            with server_engine.connect() as conn:
                if backend == "mysql":
                    conn.execute(text(f"CREATE DATABASE IF NOT EXISTS {quoted}"))
                else:
                    exists = conn.execute(
                        text("SELECT 1 FROM pg_database WHERE datname = :name"),
                        {"name": url.database},
                    ).scalar()
                    if not exists:
                        conn.execute(text(f"CREATE DATABASE {quoted}"))
        finally:
            server_engine.dispose()

    def _log_failure(self, display_url: str, error_message: str) -> None:
        if self._audit_logger:
            self._audit_logger.log_schema_failed(display_url, error_message)
