"""Table gateway: CRUD access to one database table."""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Generic, Optional, Protocol, Sequence, TypeVar, Union

from sqlalchemy import Row
from sqlalchemy.exc import SQLAlchemyError

from db_table_gateway.core import sql
from db_table_gateway.core.cache import Clock, RecordCountCache
from db_table_gateway.core.connection import DatabaseConnection
from db_table_gateway.core.executor import StatementExecutor
from db_table_gateway.core.expressions import Join, Where
from db_table_gateway.core.inspector import MetadataInspector
from db_table_gateway.models.cache import CachePolicy
from db_table_gateway.models.column import Column
from db_table_gateway.models.metadata import ColumnMetaData
from db_table_gateway.models.migration import MigrationPlan, MigrationStep
from db_table_gateway.models.query import Page, SQLStatement

logger = logging.getLogger(__name__)

T = TypeVar("T")
F_co = TypeVar("F_co", covariant=True)

ColumnValue = tuple[Column, Any]


class RowFactory(Protocol[F_co]):
    """Creates objects from result rows."""

    def retrieve(self, row: Row) -> F_co: ...


class Table(ABC, Generic[T]):
    """Gateway for accessing one table through SQL.

    Subclasses implement :meth:`insert` to store an object and
    :meth:`retrieve` to build an object from a result row.

    Every operation borrows a connection and releases it before returning.
    The record count can be cached; the default policy keeps it always
    expired.
    """

    def __init__(
        self,
        connection: DatabaseConnection,
        name: str,
        *columns: Column,
        cache_policy: Optional[CachePolicy] = None,
        clock: Clock = time.monotonic,
    ):
        """
        Initialize the gateway.

        Args:
            connection: Connection factory for the database
            name: Table name
            *columns: Column definitions, in table order
            cache_policy: Record count cache policy (default: no caching)
            clock: Time source for the record count cache
        """
        self.connection = connection
        self.executor = StatementExecutor(connection)
        self.inspector = MetadataInspector(connection)
        self._name = name
        self._columns = tuple(columns)
        self._primary_keys = tuple(column for column in columns if column.primary_key)
        self._default_order_by: tuple[Column, ...] = ()
        self._record_count_cache = RecordCountCache(cache_policy, clock)

    @property
    def name(self) -> str:
        return self._name

    @property
    def columns(self) -> tuple[Column, ...]:
        return self._columns

    @property
    def primary_keys(self) -> tuple[Column, ...]:
        """Primary key columns in declaration order, if any."""
        return self._primary_keys

    @property
    def default_order_by(self) -> tuple[Column, ...]:
        """Columns to sort on when a select gives no ordering."""
        return self._default_order_by

    @default_order_by.setter
    def default_order_by(self, order_by: Sequence[Column]) -> None:
        self._default_order_by = tuple(order_by)

    @property
    def cache_policy(self) -> CachePolicy:
        return self._record_count_cache.policy

    @cache_policy.setter
    def cache_policy(self, policy: CachePolicy) -> None:
        self._record_count_cache.policy = policy

    @abstractmethod
    def insert(self, obj: T) -> None:
        """Store an object as a new row."""
        ...

    @abstractmethod
    def retrieve(self, row: Row) -> T:
        """Create an object from a result row."""
        ...

    # ==================== Definition ====================

    def get_sql_definition(self) -> str:
        """Column definitions suitable for ``CREATE TABLE name (definition)``."""
        definitions = [
            f"{column.name} {self.get_column_sql_definition(column)}"
            for column in self.columns
        ]
        if len(self.primary_keys) > 1:
            definitions.append(f"{sql.PRIMARY_KEY}({self.create_list(*self.primary_keys)})")
        return sql.create_list(*definitions)

    def get_column_sql_definition(self, column: Column) -> str:
        """
        SQL definition of a column, not including its name.

        Args:
            column: Column to define

        Returns:
            Type, then any DEFAULT clause, then PRIMARY KEY if the column is
            the only primary key
        """
        definition = column.type + sql.format_default_clause(column.default)
        if len(self.primary_keys) == 1 and column.primary_key:
            definition += f" {sql.PRIMARY_KEY}"
        return definition

    # ==================== Lifecycle ====================

    def exists(self) -> bool:
        """
        Check whether the table exists by querying it.

        Any database error from the probe query is taken to mean the table
        does not exist.
        """
        try:
            self.executor.execute_scalar(sql.probe(self.name))
            return True
        except SQLAlchemyError as e:
            logger.debug(f"Table {self.name} probe failed: {e}")
            return False

    def create(self, drop: bool = True) -> None:
        """
        Create the table.

        Args:
            drop: Whether to drop an existing table first
        """
        if drop:
            self.drop(if_exists=True)
        self.executor.execute_update(sql.create_table(self.name, self.get_sql_definition()))
        self.invalidate_cached_record_count()
        logger.info(f"Created table {self.name}")

    def drop(self, if_exists: bool = True) -> None:
        """
        Drop the table.

        Args:
            if_exists: Whether to tolerate a missing table
        """
        self.executor.execute_update(sql.drop_table(self.name, if_exists))
        self.invalidate_cached_record_count()
        logger.info(f"Dropped table {self.name}")

    def add_column(self, column: Column) -> None:
        """Add a column; existing rows take the column default, if any."""
        self.executor.execute_update(self._add_column_statement(column))
        logger.info(f"Added column {column.name} to table {self.name}")

    def _add_column_statement(self, column: Column) -> SQLStatement:
        return sql.alter_table_add_column(
            self.name, column.name, self.get_column_sql_definition(column)
        )

    # ==================== Schema synchronization ====================

    def get_column_metadata(self) -> list[ColumnMetaData]:
        """Describe the columns of the table as it exists in the database."""
        return self.inspector.get_column_metadata(self.name)

    def plan_synchronization(self) -> MigrationPlan:
        """
        Compare the table definition with the database without changing it.

        Returns:
            Plan creating the table if it is missing, otherwise adding every
            declared column the database lacks; existing columns with no
            definition are listed but never dropped

        Raises:
            RuntimeError: If the table exists but reflection finds no columns
        """
        if not self.exists():
            return MigrationPlan(
                table_name=self.name,
                steps=[
                    MigrationStep(
                        action="create_table",
                        statement=sql.create_table(self.name, self.get_sql_definition()),
                    )
                ],
            )

        remote_columns = self.get_column_metadata()
        if not remote_columns:
            raise RuntimeError(
                f"Table {self.name} exists but its columns could not be reflected"
            )

        # Keyed case-insensitively; databases may fold unquoted names
        missing = {column.name.casefold(): column for column in self.columns}
        undeclared: list[ColumnMetaData] = []
        for column_metadata in remote_columns:
            if missing.pop(column_metadata.name.casefold(), None) is None:
                undeclared.append(column_metadata)

        return MigrationPlan(
            table_name=self.name,
            steps=[
                MigrationStep(
                    action="add_column",
                    column=column.name,
                    statement=self._add_column_statement(column),
                )
                for column in missing.values()
            ],
            undeclared_columns=undeclared,
        )

    def apply_migration(self, plan: MigrationPlan) -> None:
        """
        Execute a migration plan step by step.

        Steps run in separate statements with no enclosing transaction; a
        failure leaves earlier steps applied.

        Raises:
            ValueError: If the plan is for another table
        """
        if plan.table_name != self.name:
            raise ValueError(
                f"Migration plan for table {plan.table_name} "
                f"cannot be applied to table {self.name}"
            )

        for column_metadata in plan.undeclared_columns:
            # TODO drop undeclared columns once plans can express destructive steps
            logger.warning(
                f"Table {self.name} has undeclared column {column_metadata.name}"
            )

        for step in plan.steps:
            logger.info(f"Synchronizing table {self.name}: {step.sql}")
            self.executor.execute_update(step.statement)

        if plan.creates_table:
            self.invalidate_cached_record_count()

    def synchronize(self) -> MigrationPlan:
        """Plan and apply the changes that bring the table up to date."""
        logger.info(f"Synchronizing table {self.name}")
        plan = self.plan_synchronization()
        self.apply_migration(plan)
        return plan

    # ==================== Record count ====================

    def get_record_count(self) -> int:
        """Number of rows in the table, from the cache while it is valid."""
        cached = self._record_count_cache.get()
        if cached is not None:
            return cached

        record_count = int(self.executor.execute_scalar(sql.count(self.name)) or 0)
        self._record_count_cache.store(record_count)
        return record_count

    def invalidate_cached_record_count(self) -> None:
        self._record_count_cache.invalidate()

    # ==================== Writes ====================

    def insert_values(self, *values: Any) -> None:
        """Insert one row holding the given values in column order."""
        self.executor.execute_update(sql.insert_values(self.name, *values))
        self.invalidate_cached_record_count()

    def delete(self, where: sql.Predicate = None) -> int:
        """
        Delete rows from the table.

        Args:
            where: Rows to delete, or None to delete every row

        Returns:
            Number of deleted rows as reported by the driver
        """
        deleted = self.executor.execute_update(sql.delete(self.name, where))
        self.invalidate_cached_record_count()
        return deleted

    def delete_by_primary_key(self, *primary_key_values: Any) -> int:
        """
        Delete the rows matching primary key values.

        Raises:
            ValueError: If no key values are given, or more values than
                primary key columns
        """
        where = self._primary_key_where(primary_key_values)
        return self.delete(where)

    def update(
        self,
        update_values: Sequence[ColumnValue],
        where: sql.Predicate = None,
    ) -> int:
        """
        Set column values on matching rows.

        Args:
            update_values: Columns and their new values
            where: Rows to change, or None for every row

        Returns:
            Number of changed rows as reported by the driver

        Raises:
            ValueError: If no update values are given
        """
        statement = sql.update_table(self.name, self.create_names_values(update_values), where)
        return self.executor.execute_update(statement)

    def update_by_primary_key(
        self, update_values: Sequence[ColumnValue], *primary_key_values: Any
    ) -> int:
        """
        Set column values on the rows matching primary key values.

        Raises:
            ValueError: If no update values or no key values are given, or
                more key values than primary key columns
        """
        where = self._primary_key_where(primary_key_values)
        return self.update(update_values, where)

    # ==================== Reads ====================

    def select(
        self,
        where: sql.Predicate = None,
        start: int = 0,
        count: Optional[int] = None,
        order_by: Sequence[Column] = (),
        select_expression: str = sql.WILDCARD,
        join: Union[Join, str, None] = None,
        factory: Optional[RowFactory[Any]] = None,
    ) -> Page[Any]:
        """
        Select a window of rows.

        Args:
            where: Rows to select, or None for every row
            start: Index of the first row to return
            count: Maximum number of rows to return (None for no limit)
            order_by: Columns to sort on; the default ordering if empty
            select_expression: Columns to select
            join: Join expression, if tables are being joined
            factory: Creates objects from rows (default: this table)

        Returns:
            Page of objects, with the size of the full result
        """
        order = tuple(order_by) or self.default_order_by
        statement = sql.select(
            self.name,
            select_expression=select_expression,
            join=join,
            where=where,
            order_by=[column.name for column in order],
        )
        retrieve = factory.retrieve if factory is not None else self.retrieve
        return self.executor.execute_query(statement, retrieve, start=start, count=count)

    def select_all(
        self,
        start: int = 0,
        count: Optional[int] = None,
        order_by: Sequence[Column] = (),
    ) -> Page[T]:
        """Select a window of all rows in the table."""
        return self.select(None, start=start, count=count, order_by=order_by)

    def select_by_primary_key(self, *primary_key_values: Any) -> Optional[T]:
        """
        Select the row matching primary key values.

        Returns:
            The matching object, or None if no row matches

        Raises:
            ValueError: If no key values are given, or more values than
                primary key columns
        """
        where = self._primary_key_where(primary_key_values)
        return self.select(where, count=1).first()

    # ==================== Helpers ====================

    def _primary_key_where(self, primary_key_values: Sequence[Any]) -> Where:
        if not primary_key_values:
            raise ValueError("No key values were provided")
        return Where(*self.create_column_values(self.primary_keys, primary_key_values))

    @staticmethod
    def create_column_values(
        columns: Sequence[Column], values: Sequence[Any]
    ) -> list[ColumnValue]:
        """
        Pair columns with values; columns without a value are left out.

        Raises:
            ValueError: If there are more values than columns
        """
        if len(values) > len(columns):
            raise ValueError(
                f"There are {len(values)} values but only {len(columns)} columns."
            )
        return list(zip(columns, values))

    @staticmethod
    def create_names_values(column_values: Sequence[ColumnValue]) -> list[tuple[str, Any]]:
        """Replace the columns of column-value pairs by their names."""
        return [(column.name, value) for column, value in column_values]

    @staticmethod
    def create_list(*columns: Column) -> str:
        """SQL list of column names."""
        return sql.create_list(*(column.name for column in columns))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, columns={len(self.columns)})"
