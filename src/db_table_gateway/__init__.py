"""
db_table_gateway - Table gateways over SQLAlchemy connections

Builds SQL statements from typed column and table definitions and offers a
generic table gateway with CRUD operations, pagination, primary key lookup,
record count caching and schema synchronization.
"""

__version__ = "1.0.0"

from .core.connection import DatabaseConnection
from .core.expressions import Join, Where
from .core.sql import Conjunction
from .core.table import RowFactory, Table
from .models.cache import CachePolicy
from .models.column import Column
from .models.config import DatabaseConfig
from .models.metadata import ColumnMetaData
from .models.migration import MigrationPlan, MigrationStep
from .models.query import Page, SQLStatement

__all__ = [
    "CachePolicy",
    "Column",
    "ColumnMetaData",
    "Conjunction",
    "DatabaseConfig",
    "DatabaseConnection",
    "Join",
    "MigrationPlan",
    "MigrationStep",
    "Page",
    "RowFactory",
    "SQLStatement",
    "Table",
    "Where",
]
