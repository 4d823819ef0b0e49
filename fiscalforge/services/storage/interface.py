"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap SQLite for MySQL or PostgreSQL without touching business logic
2. Use stub storage in tests to simulate failures
3. Keep analytics and export decoupled from SQL

The interface is intentionally simple - we're not building a full ORM.
Just the operations the tracker needs.
"""

from abc import ABC, abstractmethod
from typing import Optional

from fiscalforge.models.finance import Transaction, TransactionType, User


class AccountStorageInterface(ABC):
    """
    Abstract interface for user account storage.

    Implementations store digests only; hashing happens before
    anything reaches this layer.
    """

    @abstractmethod
    def create_user(
        self,
        username: str,
        password_hash: str,
        email: Optional[str] = None,
    ) -> User:
        """
        Insert a new user row.

        Args:
            username: Unique login name
            password_hash: Digest of the user's password
            email: Optional contact address

        Returns:
            The stored user with its assigned id

        Raises:
            DuplicateError: If the username is already taken
            StorageError: If the insert fails for any other reason
        """
        pass

    @abstractmethod
    def find_user_by_credentials(
        self,
        username: str,
        password_hash: str,
    ) -> Optional[User]:
        """
        Look up the user matching both username and digest.

        Returns:
            The user if both match, None otherwise. The two miss cases
            (unknown username, wrong digest) are not distinguished.
        """
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """
        Retrieve a user by id.

        Returns:
            The user if found, None otherwise
        """
        pass


class TransactionStorageInterface(ABC):
    """
    Abstract interface for transaction storage.

    Every read is scoped to one user.
    """

    @abstractmethod
    def add_transaction(self, transaction: Transaction) -> Transaction:
        """
        Save a transaction.

        Args:
            transaction: The transaction to save (its id is ignored)

        Returns:
            The stored copy with id and created_at populated

        Raises:
            ConstraintError: If the owning user does not exist
            StorageError: If save fails
        """
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: int,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        """
        List a user's transactions, most recent date first.

        Args:
            user_id: Owning user
            transaction_type: Only return Income or Expense rows

        Raises:
            ReadError: If the query fails
        """
        pass

    @abstractmethod
    def list_recent_transactions(
        self,
        user_id: int,
        limit: int,
    ) -> list[Transaction]:
        """
        List a user's latest transactions.

        Ordered by date, then creation time, both descending.

        Args:
            user_id: Owning user
            limit: Maximum number of rows

        Raises:
            ReadError: If the query fails
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class ConstraintError(StorageError):
    """Row violates an integrity constraint other than uniqueness."""
    pass


class ReadError(StorageError):
    """A read query failed. Distinct from an empty result."""
    pass


class SchemaError(StorageError):
    """Schema could not be created."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
