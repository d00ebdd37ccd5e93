"""Statement execution over borrowed connections."""

import logging
import time
from typing import Any, Callable, Optional, TypeVar

from sqlalchemy import Row, text

from db_table_gateway.core.connection import DatabaseConnection
from db_table_gateway.models.query import Page, SQLStatement

logger = logging.getLogger(__name__)

F = TypeVar("F")


class StatementExecutor:
    """Runs built statements, one borrowed connection per call."""

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize statement executor.

        Args:
            connection: Database connection manager
        """
        self.connection = connection

    def execute_update(self, statement: SQLStatement) -> int:
        """
        Execute a statement that changes data or schema and commit it.

        Args:
            statement: Statement to execute

        Returns:
            Number of affected rows as reported by the driver (-1 if unknown)
        """
        logger.debug(f"Executing update: {statement.literal}")

        with self.connection.get_connection() as conn:
            result = conn.execute(text(statement.sql), statement.params)
            conn.commit()
            return result.rowcount

    def execute_scalar(self, statement: SQLStatement) -> Any:
        """
        Execute a query and return the first column of its first row.

        Args:
            statement: Query to execute

        Returns:
            The value, or None if the query returned no rows
        """
        logger.debug(f"Executing scalar query: {statement.literal}")

        with self.connection.get_connection() as conn:
            return conn.execute(text(statement.sql), statement.params).scalar()

    def execute_query(
        self,
        statement: SQLStatement,
        factory: Callable[[Row], F],
        start: int = 0,
        count: Optional[int] = None,
    ) -> Page[F]:
        """
        Execute a query and convert one window of its rows.

        Rows before ``start`` are skipped and at most ``count`` rows are
        converted; the remaining rows are still read so that the page knows
        the size of the full result.

        Args:
            statement: Query to execute
            factory: Creates an object from a result row
            start: Index of the first row to return
            count: Maximum number of rows to return (None for no limit)

        Returns:
            Page of converted rows

        Raises:
            ValueError: If start or count is negative
        """
        if start < 0:
            raise ValueError(f"Start index must not be negative, got {start}")
        if count is not None and count < 0:
            raise ValueError(f"Count must not be negative, got {count}")

        logger.debug(f"Executing query: {statement.literal}")
        start_time = time.time()

        with self.connection.get_connection() as conn:
            result = conn.execute(text(statement.sql), statement.params)

            items: list[F] = []
            total_count = 0
            for row in result:
                if total_count >= start and (count is None or len(items) < count):
                    items.append(factory(row))
                total_count += 1

        execution_time = (time.time() - start_time) * 1000  # Convert to ms

        return Page(
            items=items,
            start_index=start,
            total_count=total_count,
            query=statement.literal,
            execution_time_ms=execution_time,
        )
