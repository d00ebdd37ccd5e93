"""SQL text building.

Statements are built as :class:`SQLStatement` objects carrying two renderings
of the same text: a parameterized one with named bind markers, which is what
gets executed, and a literal one with values inlined as escaped SQL strings,
which is what gets logged.
"""

import enum
from typing import TYPE_CHECKING, Any, Iterable, Optional, Sequence, Union

from db_table_gateway.models.query import SQLStatement
from db_table_gateway.utils.values import convert_value_to_sql_text

if TYPE_CHECKING:
    from db_table_gateway.core.expressions import Join, Where

SINGLE_QUOTE = "'"
ESCAPED_SINGLE_QUOTE = "''"
EQUALS = "="
LIST_SEPARATOR = ", "
WILDCARD = "*"

ADD = "ADD"
ALTER = "ALTER"
COUNT = "COUNT"
CREATE = "CREATE"
DEFAULT = "DEFAULT"
DELETE = "DELETE"
DROP = "DROP"
EXISTS = "EXISTS"
FROM = "FROM"
IF = "IF"
INSERT = "INSERT"
INTO = "INTO"
IS = "IS"
JOIN = "JOIN"
NULL = "NULL"
ON = "ON"
ORDER_BY = "ORDER BY"
PRIMARY_KEY = "PRIMARY KEY"
SELECT = "SELECT"
SET = "SET"
TABLE = "TABLE"
UPDATE = "UPDATE"
VALUES = "VALUES"
WHERE = "WHERE"

# Predicate is a Where, a trusted SQL expression, or None for no predicate
Predicate = Union["Where", str, None]


class Conjunction(str, enum.Enum):
    """Logical conjunction joining predicates."""

    AND = "AND"
    OR = "OR"

    def __str__(self) -> str:
        return self.value


def escape_sql_value(value: str) -> str:
    """Escape a value for an SQL string literal by doubling single quotes."""
    return value.replace(SINGLE_QUOTE, ESCAPED_SINGLE_QUOTE)


def create_sql_value(value: Any) -> str:
    """
    Render a value as an SQL literal.

    Args:
        value: Value to render

    Returns:
        NULL for None, otherwise the quoted and escaped text form of the value
    """
    text = convert_value_to_sql_text(value)
    if text is None:
        return NULL
    return f"{SINGLE_QUOTE}{escape_sql_value(text)}{SINGLE_QUOTE}"


def create_list(*items: str) -> str:
    """Create an SQL list such as a list of column names."""
    return LIST_SEPARATOR.join(items)


def _escape_bind_markers(fragment: str) -> str:
    # A bare colon in text() would start a bind parameter
    return fragment.replace(":", "\\:")


class StatementBuilder:
    """Accumulates parameterized and literal statement text side by side."""

    def __init__(self, prefix: str = "p"):
        self._prefix = prefix
        self._sql: list[str] = []
        self._literal: list[str] = []
        self._params: dict[str, Any] = {}

    def append(self, fragment: str) -> "StatementBuilder":
        """Append SQL text that contains no values."""
        self._sql.append(_escape_bind_markers(fragment))
        self._literal.append(fragment)
        return self

    def append_literal(self, value: Any) -> "StatementBuilder":
        """Append a value inlined as an SQL literal in both renderings.

        Used where the database does not accept bind parameters, such as
        DEFAULT clauses in DDL.
        """
        return self.append(create_sql_value(value))

    def bind(self, value: Any) -> "StatementBuilder":
        """Append a bound parameter value."""
        name = f"{self._prefix}{len(self._params)}"
        self._params[name] = value
        self._sql.append(f":{name}")
        self._literal.append(create_sql_value(value))
        return self

    def append_comparison(self, name: str, value: Any) -> "StatementBuilder":
        """Append ``name=value``, or ``name IS NULL`` for a None value."""
        if value is None:
            return self.append(f"{name} {IS} {NULL}")
        return self.append(f"{name}{EQUALS}").bind(value)

    def append_predicate(self, predicate: Predicate) -> "StatementBuilder":
        """Append `` WHERE <predicate>`` unless the predicate is empty."""
        if predicate is None:
            return self
        if isinstance(predicate, str):
            if predicate:
                self.append(f" {WHERE} {predicate}")
            return self
        if predicate.is_empty:
            return self
        self.append(f" {WHERE} ")
        predicate.append_to(self)
        return self

    def build(self) -> SQLStatement:
        return SQLStatement(
            sql="".join(self._sql),
            params=dict(self._params),
            literal="".join(self._literal),
        )


def create_expression(
    conjunction: Conjunction, names_values: Iterable[tuple[str, Any]]
) -> str:
    """
    Create a literal expression matching names and values.

    Args:
        conjunction: Conjunction combining the comparisons
        names_values: Column names and the values they must match

    Returns:
        Expression such as ``COL1='val1' AND COL2='val2'``
    """
    builder = StatementBuilder()
    for index, (name, value) in enumerate(names_values):
        if index > 0:
            builder.append(f" {conjunction.value} ")
        builder.append_comparison(name, value)
    return builder.build().literal


def create_table(name: str, definition: str) -> SQLStatement:
    """Build ``CREATE TABLE name (definition)``."""
    return StatementBuilder().append(f"{CREATE} {TABLE} {name} ({definition})").build()


def drop_table(name: str, if_exists: bool = True) -> SQLStatement:
    """Build ``DROP TABLE [IF EXISTS] name``."""
    condition = f"{IF} {EXISTS} " if if_exists else ""
    return StatementBuilder().append(f"{DROP} {TABLE} {condition}{name}").build()


def alter_table_add_column(
    table_name: str, column_name: str, column_definition: str
) -> SQLStatement:
    """Build ``ALTER TABLE table ADD column definition``."""
    return (
        StatementBuilder()
        .append(f"{ALTER} {TABLE} {table_name} {ADD} {column_name} {column_definition}")
        .build()
    )


def insert_values(name: str, *values: Any) -> SQLStatement:
    """Build ``INSERT INTO name VALUES (...)`` with every value bound."""
    builder = StatementBuilder().append(f"{INSERT} {INTO} {name} {VALUES} (")
    for index, value in enumerate(values):
        if index > 0:
            builder.append(LIST_SEPARATOR)
        builder.bind(value)
    return builder.append(")").build()


def update_table(
    name: str,
    names_values: Sequence[tuple[str, Any]],
    predicate: Predicate = None,
) -> SQLStatement:
    """
    Build ``UPDATE name SET col=value, ... [WHERE predicate]``.

    Args:
        name: Table name
        names_values: Column names and their new values
        predicate: Rows to change, or None for every row

    Raises:
        ValueError: If there are no values to set
    """
    if not names_values:
        raise ValueError("No column values were provided to update")

    builder = StatementBuilder().append(f"{UPDATE} {name} {SET} ")
    for index, (column_name, value) in enumerate(names_values):
        if index > 0:
            builder.append(LIST_SEPARATOR)
        # SET needs an assignment even for NULL
        builder.append(f"{column_name}{EQUALS}").bind(value)
    return builder.append_predicate(predicate).build()


def delete(name: str, predicate: Predicate = None) -> SQLStatement:
    """Build ``DELETE FROM name [WHERE predicate]``."""
    return (
        StatementBuilder()
        .append(f"{DELETE} {FROM} {name}")
        .append_predicate(predicate)
        .build()
    )


def select(
    name: str,
    select_expression: str = WILDCARD,
    join: Union["Join", str, None] = None,
    where: Predicate = None,
    order_by: Sequence[str] = (),
) -> SQLStatement:
    """
    Build ``SELECT expr FROM name [join] [WHERE where] [ORDER BY cols]``.

    Args:
        name: Table name
        select_expression: Columns to select
        join: Join expression, if tables are being joined
        where: Rows to select, or None for every row
        order_by: Names of the columns to sort on
    """
    builder = StatementBuilder().append(f"{SELECT} {select_expression} {FROM} {name}")
    if join is not None:
        join_expression = str(join)
        if join_expression:
            builder.append(f" {join_expression}")
    builder.append_predicate(where)
    if order_by:
        builder.append(f" {ORDER_BY} {create_list(*order_by)}")
    return builder.build()


def count(name: str) -> SQLStatement:
    """Build ``SELECT COUNT(*) FROM name``."""
    return StatementBuilder().append(f"{SELECT} {COUNT}({WILDCARD}) {FROM} {name}").build()


def probe(name: str) -> SQLStatement:
    """Build a query that succeeds, returning no rows, only if the table exists."""
    return StatementBuilder().append(f"{SELECT} {WILDCARD} {FROM} {name} {WHERE} 1 = 0").build()


def format_default_clause(value: Optional[Any]) -> str:
    """Render `` DEFAULT 'value'`` for a column default, or an empty string."""
    if value is None:
        return ""
    return f" {DEFAULT} {create_sql_value(value)}"
