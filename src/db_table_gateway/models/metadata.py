"""Live column metadata reported by database introspection."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ColumnMetaData(BaseModel):
    """Description of an existing column as reported by the database."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Column name")
    data_type: Optional[str] = Field(None, description="Reported column data type")
    nullable: Optional[bool] = Field(None, description="Whether column allows NULL")
    default: Optional[str] = Field(None, description="Default value expression")
    ordinal_position: Optional[int] = Field(
        None, description="Position of the column in the table, starting at 1"
    )
    comment: Optional[str] = Field(None, description="Column comment/description")
