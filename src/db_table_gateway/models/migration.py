"""Schema migration plan models."""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from db_table_gateway.models.metadata import ColumnMetaData
from db_table_gateway.models.query import SQLStatement


class MigrationStep(BaseModel):
    """One statement needed to bring a table in line with its definition."""

    action: Literal["create_table", "add_column"] = Field(
        ..., description="Kind of change"
    )
    column: Optional[str] = Field(None, description="Affected column, if any")
    statement: SQLStatement = Field(..., description="Statement to execute")

    @property
    def sql(self) -> str:
        """Statement text for review."""
        return self.statement.literal


class MigrationPlan(BaseModel):
    """Reviewable set of changes that synchronizes a table with its definition.

    Columns found in the database but not declared locally are reported in
    ``undeclared_columns``; the plan never drops them.
    """

    table_name: str = Field(..., description="Table the plan applies to")
    steps: list[MigrationStep] = Field(
        default_factory=list, description="Statements to execute, in order"
    )
    undeclared_columns: list[ColumnMetaData] = Field(
        default_factory=list,
        description="Existing columns with no local definition",
    )

    @property
    def is_empty(self) -> bool:
        """Check if the table already matches its definition."""
        return not self.steps

    @property
    def creates_table(self) -> bool:
        return any(step.action == "create_table" for step in self.steps)

    @property
    def added_columns(self) -> list[str]:
        return [
            step.column
            for step in self.steps
            if step.action == "add_column" and step.column is not None
        ]

    def to_sql(self) -> list[str]:
        """Statements of the plan as literal SQL text."""
        return [step.sql for step in self.steps]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "table_name": "users",
                    "steps": [
                        {
                            "action": "add_column",
                            "column": "email",
                            "statement": {
                                "sql": "ALTER TABLE users ADD email VARCHAR(128)",
                                "params": {},
                                "literal": "ALTER TABLE users ADD email VARCHAR(128)",
                            },
                        }
                    ],
                    "undeclared_columns": [{"name": "legacy_flag"}],
                }
            ]
        }
    }
