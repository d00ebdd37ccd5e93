"""Utility modules for the table gateway."""

from db_table_gateway.utils.values import convert_value_to_sql_text

__all__ = [
    "convert_value_to_sql_text",
]
