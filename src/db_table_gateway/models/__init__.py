"""Pydantic models for table definitions, statements and results."""

from .cache import CachePolicy
from .column import Column
from .config import DatabaseConfig
from .metadata import ColumnMetaData
from .migration import MigrationPlan, MigrationStep
from .query import Page, SQLStatement

__all__ = [
    "CachePolicy",
    "Column",
    "ColumnMetaData",
    "DatabaseConfig",
    "MigrationPlan",
    "MigrationStep",
    "Page",
    "SQLStatement",
]
