"""
Shared fixtures.

Every test gets its own file-backed SQLite database under tmp_path,
so tests never share rows and never need a database server.
"""

from datetime import date
from decimal import Decimal

import pytest

from fiscalforge.config import AppSettings, DatabaseSettings
from fiscalforge.models import Transaction, TransactionType
from fiscalforge.orchestrator import create_app_components
from fiscalforge.services.storage import DatabaseClient, SchemaManager


@pytest.fixture
def database_settings(tmp_path):
    return DatabaseSettings(url=f"sqlite:///{tmp_path / 'fiscalforge.db'}")


@pytest.fixture
def app_settings():
    return AppSettings()


@pytest.fixture
def database(database_settings):
    """Database client with the schema already created."""
    client = DatabaseClient(database_settings)
    SchemaManager(client).ensure_schema()
    yield client
    client.dispose()


@pytest.fixture
def tracker(database_settings, app_settings):
    """Fully wired FinanceTracker over a fresh database."""
    tracker = create_app_components(database_settings, app_settings)
    tracker.ensure_schema()
    yield tracker
    tracker.close()


@pytest.fixture
def alice(tracker):
    return tracker.register("alice", "secret1")


def _build_transaction(
    user_id: int,
    transaction_type: TransactionType = TransactionType.EXPENSE,
    amount: str = "10.00",
    category: str = "Food",
    on: date = date(2025, 1, 15),
    description: str = None,
) -> Transaction:
    """Build an unsaved transaction with sensible defaults."""
    return Transaction(
        user_id=user_id,
        date=on,
        type=transaction_type,
        category=category,
        description=description,
        amount=Decimal(amount),
    )


@pytest.fixture
def make_transaction():
    return _build_transaction
