"""Conversion of Python values to the text inlined in SQL literals.

Values bound as statement parameters go to the driver untouched; this text
form is only used where a value must be written into the SQL itself, such as
column DEFAULT clauses and the literal rendering of statements.
"""

import datetime
import enum
from typing import Any, Optional


def _bytes_to_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.hex()


def convert_value_to_sql_text(value: Any) -> Optional[str]:
    """
    Convert a value to its SQL text form.

    Args:
        value: Value to convert

    Returns:
        Text form of the value, or None for None
    """
    if value is None:
        return None

    # bool before int; bool is an int subclass
    if isinstance(value, bool):
        return "1" if value else "0"

    if isinstance(value, enum.Enum):
        return convert_value_to_sql_text(value.value)

    # datetime before date; datetime is a date subclass
    if isinstance(value, datetime.datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()

    if isinstance(value, (bytes, bytearray)):
        return _bytes_to_text(bytes(value))
    if isinstance(value, memoryview):
        return _bytes_to_text(value.tobytes())

    # Decimal, UUID, numbers and everything else
    return str(value)
