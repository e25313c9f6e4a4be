"""Typed table and column references.

Owns the ``"table.column"`` and ``"table as alias"`` parsing that the query
builder, the grammar and the join planner all need, so qualification rules
live in one place.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modeljoins.schema.snapshot import SchemaSnapshot


@dataclass(frozen=True)
class ColumnReference:
    """A parsed ``table.column`` or bare ``column`` reference.

    Attributes:
        table: Table qualifier, or ``None`` for unqualified references.
        column: Column name.
    """

    table: str | None
    column: str

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, ref: str) -> ColumnReference:
        """Parse a ``"table.column"`` or bare ``"column"`` string.

        Args:
            ref: The raw column reference string.

        Returns:
            A :class:`ColumnReference` instance.
        """
        if "." in ref:
            table, column = ref.rsplit(".", 1)
            return cls(table=table, column=column)
        return cls(table=None, column=ref)

    # ------------------------------------------------------------------
    # Qualification
    # ------------------------------------------------------------------

    def qualify(self, table: str) -> ColumnReference:
        """Return this reference qualified with ``table``.

        Already-qualified references are returned unchanged, which makes
        qualification idempotent.
        """
        if self.qualified:
            return self
        return ColumnReference(table=table, column=self.column)

    def requalify(self, old: str, new: str) -> ColumnReference:
        """Move a reference qualified with ``old`` onto ``new``."""
        if self.table == old:
            return ColumnReference(table=new, column=self.column)
        return self

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_against(self, snapshot: SchemaSnapshot) -> None:
        """Raise :class:`~modeljoins.errors.SchemaError` if invalid.

        Checks that the table exists in the snapshot and the column exists
        on that table.  Unqualified references are not checked.

        Raises:
            SchemaError: On table or column not found.
        """
        from modeljoins.errors import SchemaError  # avoid circular import

        if self.table is None:
            return

        if snapshot.get_table(self.table) is None:
            raise SchemaError(
                f"Table '{self.table}' does not exist.",
                details={"table": self.table, "allowed_tables": snapshot.table_names},
            )

        if snapshot.get_column(self.table, self.column) is None:
            raise SchemaError(
                f"Column '{self.column}' does not exist on table '{self.table}'.",
                details={
                    "table": self.table,
                    "column": self.column,
                    "allowed_columns": snapshot.get_column_names(self.table),
                },
            )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def qualified(self) -> bool:
        """True when the reference includes a table qualifier."""
        return self.table is not None

    def __str__(self) -> str:
        if self.table:
            return f"{self.table}.{self.column}"
        return self.column


def qualify_column(column: str, table: str) -> str:
    """Qualify ``column`` with ``table`` unless it already has a qualifier."""
    return str(ColumnReference.parse(column).qualify(table))


def requalify_column(column: str, old: str, new: str) -> str:
    """Rewrite a ``old.column`` reference to ``new.column``."""
    return str(ColumnReference.parse(column).requalify(old, new))


@dataclass(frozen=True)
class TableRef:
    """A table in a FROM or JOIN position, optionally aliased.

    Attributes:
        name: The real table name.
        alias: Alias the rest of the query uses for the table, or ``None``.
    """

    name: str
    alias: str | None = None

    @classmethod
    def parse(cls, ref: str | TableRef) -> TableRef:
        """Parse ``"users"`` or ``"users as u"`` (case-insensitive ``as``)."""
        if isinstance(ref, TableRef):
            return ref
        parts = ref.split()
        if len(parts) == 3 and parts[1].lower() == "as":
            return cls(name=parts[0], alias=parts[2])
        return cls(name=ref.strip())

    @property
    def identity(self) -> str:
        """The name column references must use: the alias when present."""
        return self.alias or self.name

    def __str__(self) -> str:
        if self.alias:
            return f"{self.name} as {self.alias}"
        return self.name
