"""
Database Client

Low-level wrapper around a SQLAlchemy engine. Every storage operation
opens its own connection through `begin()` or `connect()` and hands it
back to the pool when the `with` block exits, on success or error.
"""

from typing import Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import ArgumentError

from fiscalforge.config import DatabaseSettings, get_settings
from fiscalforge.services.storage.interface import ConnectionError


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless this is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class DatabaseClient:
    """
    Owns the engine shared by all storage components.

    The engine is created lazily on first use so that constructing
    the client never touches the network.
    """

    def __init__(self, settings: Optional[DatabaseSettings] = None):
        self._settings = settings or get_settings().database
        self._engine: Optional[Engine] = None

    @property
    def settings(self) -> DatabaseSettings:
        return self._settings

    def connect(self) -> Engine:
        """Create the engine if needed and return it."""
        if self._engine is None:
            connect_args = {}
            if self._settings.is_sqlite:
                connect_args = {"check_same_thread": False}
            try:
                engine = create_engine(
                    self._settings.url,
                    echo=self._settings.echo,
                    pool_pre_ping=self._settings.pool_pre_ping,
                    connect_args=connect_args,
                )
            except (ArgumentError, ImportError) as e:
                raise ConnectionError(f"Invalid database configuration: {e}") from e

            if engine.dialect.name == "sqlite":
                event.listen(engine, "connect", _enable_sqlite_foreign_keys)
            self._engine = engine

        return self._engine

    def begin(self):
        """Open a connection with a transaction that commits on success."""
        return self.connect().begin()

    def open(self) -> Connection:
        """Open a plain connection for reads."""
        return self.connect().connect()

    @property
    def display_url(self) -> str:
        """Database URL with the password masked, for logs."""
        return self.connect().url.render_as_string(hide_password=True)

    def dispose(self) -> None:
        """Close all pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
