"""Services package."""

from fiscalforge.services.auth import (
    AccountService,
    CredentialHasher,
    HashingError,
    hash_password,
)
from fiscalforge.services.storage import (
    AccountStorageInterface,
    ConnectionError,
    ConstraintError,
    DatabaseClient,
    DuplicateError,
    NotFoundError,
    ReadError,
    SchemaError,
    SchemaManager,
    SqlAccountStorage,
    SqlTransactionStorage,
    StorageError,
    TransactionStorageInterface,
)

__all__ = [
    # Auth services
    "AccountService",
    "CredentialHasher",
    "HashingError",
    "hash_password",
    # Storage services
    "AccountStorageInterface",
    "ConnectionError",
    "ConstraintError",
    "DatabaseClient",
    "DuplicateError",
    "NotFoundError",
    "ReadError",
    "SchemaError",
    "SchemaManager",
    "SqlAccountStorage",
    "SqlTransactionStorage",
    "StorageError",
    "TransactionStorageInterface",
]
