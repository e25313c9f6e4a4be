"""Schema metadata and typed references."""
from modeljoins.schema.column_reference import (
    ColumnReference,
    TableRef,
    qualify_column,
    requalify_column,
)
from modeljoins.schema.snapshot import ColumnInfo, SchemaSnapshot, TableInfo

__all__ = [
    "ColumnReference",
    "TableRef",
    "qualify_column",
    "requalify_column",
    "ColumnInfo",
    "SchemaSnapshot",
    "TableInfo",
]
