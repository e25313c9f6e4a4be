"""Schema snapshot: the tables and columns a join may reference.

A snapshot is optional.  Attach one to
:class:`~modeljoins.options.JoinOptions` and every ON column produced by the
planner is checked against it before the join is added::

    snapshot = SchemaSnapshot.model_validate(json.loads(path.read_text()))
    options = JoinOptions(snapshot=snapshot)

Snapshots can be written by hand (see ``tests/fixtures/schema.json``) or
reflected with :func:`~modeljoins.schema.converters.schema_from_sqlalchemy`.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class ColumnInfo(BaseModel):
    """One column.  ``type`` is informational only."""

    model_config = ConfigDict(extra="forbid")

    name: str
    type: str
    nullable: bool = True


class TableInfo(BaseModel):
    """One table and its columns, in declaration order.

    Attributes:
        name: Unqualified table name as used in SQL.
        columns: Column metadata.
        primary_key: Primary-key column names; several for a composite key,
            empty when the table has none.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    columns: list[ColumnInfo]
    primary_key: list[str] = Field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        return [c.name for c in self.columns]

    def column(self, name: str) -> ColumnInfo | None:
        return next((c for c in self.columns if c.name == name), None)


class SchemaSnapshot(BaseModel):
    """All tables known to the application, indexed by name.

    Raises:
        pydantic.ValidationError: If two tables share a name.
    """

    model_config = ConfigDict(extra="forbid")

    tables: list[TableInfo]

    _by_name: dict[str, TableInfo] = PrivateAttr(default_factory=dict)

    @field_validator("tables")
    @classmethod
    def _unique_names(cls, tables: list[TableInfo]) -> list[TableInfo]:
        seen: set[str] = set()
        for table in tables:
            if table.name in seen:
                raise ValueError(f"Duplicate table '{table.name}' in schema snapshot.")
            seen.add(table.name)
        return tables

    def model_post_init(self, __context: object) -> None:
        self._by_name = {t.name: t for t in self.tables}

    @property
    def table_names(self) -> list[str]:
        return list(self._by_name)

    def get_table(self, name: str) -> TableInfo | None:
        return self._by_name.get(name)

    def get_column(self, table_name: str, column_name: str) -> ColumnInfo | None:
        """Look up ``table_name.column_name``; ``None`` if either is unknown."""
        table = self._by_name.get(table_name)
        return table.column(column_name) if table is not None else None

    def get_column_names(self, table_name: str) -> list[str]:
        table = self._by_name.get(table_name)
        return [] if table is None else table.column_names
