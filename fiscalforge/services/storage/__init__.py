"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Currently implements a SQLAlchemy relational backend (SQLite by default,
MySQL or PostgreSQL by URL), but designed to be swappable.
"""

from fiscalforge.services.storage.interface import (
    AccountStorageInterface,
    ConnectionError,
    ConstraintError,
    DuplicateError,
    NotFoundError,
    ReadError,
    SchemaError,
    StorageError,
    TransactionStorageInterface,
)
from fiscalforge.services.storage.database import DatabaseClient
from fiscalforge.services.storage.schema import (
    SchemaManager,
    budgets,
    metadata,
    transactions,
    users,
)
from fiscalforge.services.storage.sql_storage import (
    SqlAccountStorage,
    SqlTransactionStorage,
)

__all__ = [
    # Interfaces
    "AccountStorageInterface",
    "TransactionStorageInterface",
    # Exceptions
    "ConnectionError",
    "ConstraintError",
    "DuplicateError",
    "NotFoundError",
    "ReadError",
    "SchemaError",
    "StorageError",
    # SQL implementation
    "DatabaseClient",
    "SchemaManager",
    "SqlAccountStorage",
    "SqlTransactionStorage",
    # Tables
    "budgets",
    "metadata",
    "transactions",
    "users",
]
