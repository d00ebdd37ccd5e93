"""Metadata inspection using SQLAlchemy reflection."""

import logging
from typing import Any, Optional

from sqlalchemy import Inspector
from sqlalchemy import inspect as sa_inspect

from db_table_gateway.core.connection import DatabaseConnection
from db_table_gateway.models.metadata import ColumnMetaData

logger = logging.getLogger(__name__)


def split_table_name(name: str) -> tuple[Optional[str], str]:
    """Split ``schema.table`` into its schema (None if absent) and table name."""
    schema, separator, table_name = name.rpartition(".")
    if not separator:
        return None, name
    return schema, table_name


def table_name_candidates(table_name: str) -> list[str]:
    """Names a table may be stored under: as given, then lower and upper case."""
    return list(dict.fromkeys([table_name, table_name.lower(), table_name.upper()]))


class MetadataInspector:
    """Database metadata inspection using SQLAlchemy Inspector."""

    def __init__(self, connection: DatabaseConnection):
        """
        Initialize metadata inspector.

        Args:
            connection: Database connection manager
        """
        self.connection = connection

    def get_table_names(self, schema: Optional[str] = None) -> list[str]:
        """
        List tables in a schema.

        Args:
            schema: Schema name (None for default schema)

        Returns:
            Table names as reported by the database
        """
        with self.connection.get_connection() as conn:
            return sa_inspect(conn).get_table_names(schema=schema)

    def get_column_metadata(
        self, table_name: str, schema: Optional[str] = None
    ) -> list[ColumnMetaData]:
        """
        Describe the columns of an existing table.

        The name may carry a ``schema.`` prefix. Databases that fold unquoted
        names are matched by retrying the name in lower and upper case.

        Args:
            table_name: Table name
            schema: Schema name (None for default)

        Returns:
            Column metadata in table order, empty if the table does not exist
        """
        if schema is None:
            schema, table_name = split_table_name(table_name)

        with self.connection.get_connection() as conn:
            inspector = sa_inspect(conn)
            stored_name = self._find_table(inspector, table_name, schema)
            if stored_name is None:
                logger.debug(f"No table {table_name} to describe")
                return []

            columns_data = inspector.get_columns(stored_name, schema=schema)

        return [
            self._column_from_sa(col_data, position)
            for position, col_data in enumerate(columns_data, start=1)
        ]

    def _find_table(
        self, inspector: Inspector, table_name: str, schema: Optional[str]
    ) -> Optional[str]:
        """Return the name under which the database stores a table, if any."""
        for candidate in table_name_candidates(table_name):
            if inspector.has_table(candidate, schema=schema):
                return candidate
        return None

    def _column_from_sa(self, col_data: dict[str, Any], position: int) -> ColumnMetaData:
        """Convert SQLAlchemy column data to ColumnMetaData."""
        return ColumnMetaData(
            name=col_data["name"],
            data_type=str(col_data["type"]),
            nullable=col_data.get("nullable"),
            default=str(col_data["default"]) if col_data.get("default") else None,
            ordinal_position=position,
            comment=col_data.get("comment"),
        )
