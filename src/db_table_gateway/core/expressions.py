"""WHERE and JOIN expression objects."""

from typing import Any

from db_table_gateway.core.sql import (
    EQUALS,
    JOIN,
    ON,
    Conjunction,
    StatementBuilder,
)
from db_table_gateway.models.column import Column


class Where:
    """Column/value predicates combined by a conjunction.

    A None value matches NULL columns.
    """

    def __init__(
        self,
        *column_values: tuple[Column, Any],
        conjunction: Conjunction = Conjunction.AND,
    ):
        """
        Create an expression matching columns and values.

        Args:
            *column_values: Column-value pairs to match
            conjunction: AND to require every match, OR to require any
        """
        self.column_values = column_values
        self.conjunction = conjunction

    @property
    def is_empty(self) -> bool:
        return not self.column_values

    def append_to(self, builder: StatementBuilder) -> StatementBuilder:
        """Append the predicate to a statement, binding every value."""
        for index, (column, value) in enumerate(self.column_values):
            if index > 0:
                builder.append(f" {self.conjunction.value} ")
            builder.append_comparison(column.name, value)
        return builder

    def __str__(self) -> str:
        return self.append_to(StatementBuilder()).build().literal

    def __repr__(self) -> str:
        return f"Where({str(self)!r})"


class Join:
    """Equality joins between columns of two tables."""

    def __init__(self, *joins: tuple[Column, Column]):
        """
        Create an expression joining columns.

        Args:
            *joins: Column pairs, the first column belonging to the joining
                table and the second to the table being joined
        """
        self.joins = joins

    def __str__(self) -> str:
        return " ".join(
            f"{JOIN} {joined.table_name} {ON} {joining.qualified_name}{EQUALS}{joined.qualified_name}"
            for joining, joined in self.joins
        )

    def __repr__(self) -> str:
        return f"Join({str(self)!r})"
