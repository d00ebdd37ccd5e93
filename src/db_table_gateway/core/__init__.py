"""Core SQL building and table access layer."""

from .cache import RecordCountCache
from .connection import DatabaseConnection
from .executor import StatementExecutor
from .expressions import Join, Where
from .inspector import MetadataInspector
from .sql import Conjunction, StatementBuilder
from .table import RowFactory, Table

__all__ = [
    "Conjunction",
    "DatabaseConnection",
    "Join",
    "MetadataInspector",
    "RecordCountCache",
    "RowFactory",
    "StatementBuilder",
    "StatementExecutor",
    "Table",
    "Where",
]
