"""Column definition model."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# Separator between table and column names in qualified references
TABLE_COLUMN_SEPARATOR = "."


class Column(BaseModel):
    """Definition of a table column.

    Columns are immutable. Two columns are the same column when they share a
    table name and a column name, whatever their type or default.
    """

    model_config = ConfigDict(frozen=True)

    table_name: str = Field(..., description="Name of the owning table")
    name: str = Field(..., description="Column name")
    type: str = Field(..., description="SQL type, e.g. VARCHAR(64)")
    primary_key: bool = Field(
        default=False, description="Whether column is part of the primary key"
    )
    default: Optional[Any] = Field(None, description="Default value, if any")

    def __init__(
        self,
        table_name: str,
        name: str,
        type: str,
        primary_key: bool = False,
        default: Optional[Any] = None,
        **data: Any,
    ) -> None:
        super().__init__(
            table_name=table_name,
            name=name,
            type=type,
            primary_key=primary_key,
            default=default,
            **data,
        )

    @property
    def qualified_name(self) -> str:
        """Column reference in the form table.column."""
        return f"{self.table_name}{TABLE_COLUMN_SEPARATOR}{self.name}"

    @property
    def has_default(self) -> bool:
        return self.default is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Column):
            return NotImplemented
        return (self.table_name, self.name) == (other.table_name, other.name)

    def __hash__(self) -> int:
        return hash((self.table_name, self.name))

    def __str__(self) -> str:
        return self.qualified_name
