"""Statement and query result models."""

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class SQLStatement(BaseModel):
    """A built SQL statement.

    ``sql`` carries named bind markers (``:p0``, ``:p1``...) whose values are
    in ``params``; it is what gets executed. ``literal`` is the same statement
    with every value inlined as an escaped SQL literal, for logs and review.
    """

    model_config = ConfigDict(frozen=True)

    sql: str = Field(..., description="Parameterized SQL text")
    params: dict[str, Any] = Field(
        default_factory=dict, description="Bound parameter values by name"
    )
    literal: str = Field(..., description="SQL text with values inlined")

    @property
    def has_params(self) -> bool:
        return bool(self.params)

    def __str__(self) -> str:
        return self.literal


class Page(BaseModel, Generic[T]):
    """A window of rows cut from a larger query result."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[T] = Field(default_factory=list, description="Rows in this window")
    start_index: int = Field(
        default=0, ge=0, description="Index of the first row within the full result"
    )
    total_count: int = Field(
        default=0, ge=0, description="Number of rows in the full result"
    )
    query: Optional[str] = Field(None, description="Executed SQL query")
    execution_time_ms: Optional[float] = Field(
        None, description="Execution time in milliseconds"
    )

    @property
    def is_empty(self) -> bool:
        """Check if this window holds no rows."""
        return not self.items

    @property
    def end_index(self) -> int:
        """Index one past the last row of this window."""
        return self.start_index + len(self.items)

    @property
    def has_more(self) -> bool:
        """Check if the full result continues past this window."""
        return self.end_index < self.total_count

    def first(self) -> Optional[T]:
        return self.items[0] if self.items else None

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> T:
        return self.items[index]
