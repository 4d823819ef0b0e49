"""
SQL Storage Implementation

DESIGN DECISION: SQLAlchemy Core is used rather than the ORM because:
1. The tracker only needs a handful of fixed queries
2. Rows map directly onto our pydantic models
3. The same statements run on SQLite, MySQL and PostgreSQL

Each method opens one connection in a `with` block, so the connection
is released on every exit path. Driver exceptions are translated into
the storage exception hierarchy before they leave this module.
"""

from typing import Optional

from sqlalchemy import insert, select
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError

from fiscalforge.models.finance import Transaction, TransactionType, User
from fiscalforge.services.storage.database import DatabaseClient
from fiscalforge.services.storage.interface import (
    AccountStorageInterface,
    ConnectionError,
    ConstraintError,
    DuplicateError,
    ReadError,
    StorageError,
    TransactionStorageInterface,
)
from fiscalforge.services.storage.schema import transactions, users


# Never select password_hash into a caller-facing model
USER_COLUMNS = (
    users.c.id,
    users.c.username,
    users.c.email,
    users.c.created_at,
)


class SqlAccountStorage(AccountStorageInterface):
    """
    Relational implementation of account storage.

    Usernames are unique at the database level; a duplicate insert
    surfaces as DuplicateError and leaves stored data untouched.
    """

    def __init__(self, database: DatabaseClient):
        self._database = database

    def _row_to_user(self, row: RowMapping) -> User:
        """Convert a users row to a User."""
        return User(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            created_at=row["created_at"],
        )

    def create_user(
        self,
        username: str,
        password_hash: str,
        email: Optional[str] = None,
    ) -> User:
        """Insert a user and return it with its assigned id."""
        stmt = insert(users).values(
            username=username,
            password_hash=password_hash,
            email=email,
        )
        try:
            with self._database.begin() as conn:
                result = conn.execute(stmt)
                user_id = result.inserted_primary_key[0]
                row = conn.execute(
                    select(*USER_COLUMNS).where(users.c.id == user_id)
                ).mappings().first()
        except IntegrityError as e:
            raise DuplicateError(f"Username already exists: {username}") from e
        except (OperationalError, InterfaceError) as e:
            raise ConnectionError(f"Failed to register user: {e}") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to register user: {e}") from e

        return self._row_to_user(row)

    def find_user_by_credentials(
        self,
        username: str,
        password_hash: str,
    ) -> Optional[User]:
        """Return the user matching both username and digest, if any."""
        stmt = select(*USER_COLUMNS).where(
            users.c.username == username,
            users.c.password_hash == password_hash,
        )
        try:
            with self._database.open() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as e:
            raise ReadError(f"Failed to look up user: {e}") from e

        return self._row_to_user(row) if row else None

    def get_user(self, user_id: int) -> Optional[User]:
        """Retrieve a user by id."""
        stmt = select(*USER_COLUMNS).where(users.c.id == user_id)
        try:
            with self._database.open() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as e:
            raise ReadError(f"Failed to get user {user_id}: {e}") from e

        return self._row_to_user(row) if row else None


class SqlTransactionStorage(TransactionStorageInterface):
    """
    Relational implementation of transaction storage.

    Amounts are bound and read back through a NUMERIC(10, 2) column,
    so every Transaction leaving this class carries a two-digit Decimal.
    """

    def __init__(self, database: DatabaseClient):
        self._database = database

    def _row_to_transaction(self, row: RowMapping) -> Transaction:
        """Convert a transactions row to a Transaction."""
        return Transaction(
            id=row["id"],
            user_id=row["user_id"],
            date=row["date"],
            type=TransactionType(row["type"]),
            category=row["category"],
            description=row["description"],
            amount=row["amount"],
            created_at=row["created_at"],
        )

    def add_transaction(self, transaction: Transaction) -> Transaction:
        """Insert a transaction and return the stored copy."""
        stmt = insert(transactions).values(
            user_id=transaction.user_id,
            date=transaction.date,
            type=transaction.type.value,
            category=transaction.category,
            description=transaction.description,
            amount=transaction.amount,
        )
        try:
            with self._database.begin() as conn:
                result = conn.execute(stmt)
                transaction_id = result.inserted_primary_key[0]
                row = conn.execute(
                    select(transactions).where(transactions.c.id == transaction_id)
                ).mappings().first()
        except IntegrityError as e:
            raise ConstraintError(
                f"Transaction rejected for user {transaction.user_id}: {e.orig}"
            ) from e
        except (OperationalError, InterfaceError) as e:
            raise ConnectionError(f"Failed to save transaction: {e}") from e
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to save transaction: {e}") from e

        return self._row_to_transaction(row)

    def list_transactions(
        self,
        user_id: int,
        transaction_type: Optional[TransactionType] = None,
    ) -> list[Transaction]:
        """List a user's transactions, most recent date first."""
        stmt = select(transactions).where(transactions.c.user_id == user_id)
        if transaction_type is not None:
            stmt = stmt.where(
                transactions.c.type == TransactionType(transaction_type).value
            )
        stmt = stmt.order_by(transactions.c.date.desc(), transactions.c.id.desc())

        try:
            with self._database.open() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            raise ReadError(f"Failed to list transactions for user {user_id}: {e}") from e

        return [self._row_to_transaction(row) for row in rows]

    def list_recent_transactions(
        self,
        user_id: int,
        limit: int,
    ) -> list[Transaction]:
        """List at most `limit` transactions, newest date then newest insert first."""
        if limit < 0:
            raise ValueError(f"limit must be non-negative, got {limit}")

        stmt = (
            select(transactions)
            .where(transactions.c.user_id == user_id)
            .order_by(
                transactions.c.date.desc(),
                transactions.c.created_at.desc(),
                transactions.c.id.desc(),
            )
            .limit(limit)
        )
        try:
            with self._database.open() as conn:
                rows = conn.execute(stmt).mappings().all()
        except SQLAlchemyError as e:
            raise ReadError(f"Failed to list recent transactions for user {user_id}: {e}") from e

        return [self._row_to_transaction(row) for row in rows]
