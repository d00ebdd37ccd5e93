"""Database connection management with SQLAlchemy."""

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from sqlalchemy import Connection, Engine, create_engine, text

from db_table_gateway.models.config import DatabaseConfig

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Connection factory over a SQLAlchemy engine and its pool."""

    def __init__(self, config: DatabaseConfig):
        """
        Initialize database connection.

        Args:
            config: Database configuration with connection URL and pool settings
        """
        self.config = config
        self.engine: Optional[Engine] = None
        self._dialect = config.dialect
        self._driver = config.driver

    def initialize(self) -> None:
        """Create the engine; repeated calls are no-ops."""
        if self.engine is not None:
            return  # Already initialized

        engine_args: dict[str, Any] = {
            "echo": self.config.echo_sql,
            "connect_args": dict(self.config.properties),
        }

        # SQLite picks its own pool class, which may not accept sizing arguments
        if self._dialect != "sqlite":
            engine_args.update(
                pool_size=self.config.pool_size,
                max_overflow=self.config.max_overflow,
                pool_timeout=self.config.pool_timeout,
                pool_pre_ping=True,  # Verify connections before using
            )

        self.engine = create_engine(self.config.resolved_url, **engine_args)
        logger.info(
            f"Initialized {self._dialect} engine for "
            f"{self.engine.url.render_as_string(hide_password=True)}"
        )

    def dispose(self) -> None:
        """Dispose of the connection pool and cleanup resources."""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None

    @contextmanager
    def get_connection(self) -> Iterator[Connection]:
        """
        Borrow a connection from the pool as a context manager.

        The connection is closed on every exit path; uncommitted work is
        rolled back.

        Yields:
            Connection for executing statements

        Raises:
            RuntimeError: If engine not initialized
        """
        if self.engine is None:
            raise RuntimeError(
                "DatabaseConnection not initialized. Call initialize() first."
            )

        with self.engine.connect() as conn:
            yield conn

    @property
    def dialect(self) -> str:
        """Get database dialect name."""
        return self._dialect

    @property
    def driver(self) -> str:
        """Get database driver name."""
        return self._driver

    @property
    def is_initialized(self) -> bool:
        """Check if engine is initialized."""
        return self.engine is not None

    def test_connection(self) -> bool:
        """
        Test database connectivity.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            with self.get_connection() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.debug("Connection test failed", exc_info=True)
            return False

    def get_version(self) -> str:
        """
        Server version reported by the dialect when it first connected.

        Returns:
            Dotted version such as ``3.45.1``, or ``Unknown`` if the dialect
            does not report one
        """
        with self.get_connection() as conn:
            version_info = conn.dialect.server_version_info

        if not version_info:
            return "Unknown"
        return ".".join(str(part) for part in version_info)

    def __enter__(self) -> "DatabaseConnection":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()
