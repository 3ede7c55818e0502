"""
Destination table schema model.

A schema is the ordered list of columns of a BigQuery table as reported by
the table metadata. Only the column types the transcoder knows how to coerce
are distinguished; everything else collapses into OTHER.
"""

from enum import Enum
from typing import Any, List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ColumnType(str, Enum):
    """Column types recognised by the record transcoder."""
    STRING = "STRING"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    OTHER = "OTHER"

    @classmethod
    def from_bigquery(cls, field_type: str) -> "ColumnType":
        """
        Map a BigQuery field type name to a ColumnType.

        Both legacy (INTEGER, BOOLEAN) and standard SQL (INT64, BOOL) names
        are accepted.
        """
        normalized = (field_type or "").upper()
        if normalized == "STRING":
            return cls.STRING
        if normalized in ("INTEGER", "INT64"):
            return cls.INTEGER
        if normalized in ("BOOLEAN", "BOOL"):
            return cls.BOOLEAN
        return cls.OTHER


class SchemaColumn(BaseModel):
    """A single column of a destination table."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Column name as stored in the warehouse"
    )
    type: ColumnType = Field(
        ColumnType.OTHER,
        alias="field_type",
        description="Coercion type of the column"
    )

    @field_validator('type', mode='before')
    @classmethod
    def normalize_type(cls, v: Any) -> ColumnType:
        """Accept raw BigQuery type names as well as ColumnType members."""
        if isinstance(v, ColumnType):
            return v
        return ColumnType.from_bigquery(str(v))


Schema = Tuple[SchemaColumn, ...]


def schema_from_fields(fields: List[Any]) -> Schema:
    """
    Build a Schema from BigQuery SchemaField objects (or anything exposing
    ``name`` and ``field_type``).

    Args:
        fields: Table schema fields in table order

    Returns:
        Immutable tuple of SchemaColumn
    """
    return tuple(
        SchemaColumn(name=field.name, field_type=field.field_type)
        for field in fields or []
    )


def column_names(schema: Schema) -> List[str]:
    """Return the column names of a schema in order."""
    return [column.name for column in schema]
