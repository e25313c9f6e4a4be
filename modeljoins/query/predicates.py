"""Immutable predicate nodes for WHERE and ON clauses.

Builders append these nodes in call order; the grammar renders them and the
join planner re-targets them onto a table alias with ``requalify``.  Every
node carries the ``boolean`` ("and"/"or") that joins it to the previous one.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Union

from modeljoins.schema.column_reference import requalify_column

#: Comparison operators the grammar knows how to render.
OPERATORS: tuple[str, ...] = (
    "=", "<", ">", "<=", ">=", "<>", "!=",
    "like", "not like", "ilike", "not ilike",
)

#: Booleans that join consecutive predicates.
BOOLEANS: tuple[str, ...] = ("and", "or")


@dataclass(frozen=True)
class BasicWhere:
    """``column <operator> value`` with the value bound as a parameter."""

    column: str
    operator: str
    value: Any
    boolean: str = "and"

    def requalify(self, old: str, new: str) -> BasicWhere:
        return replace(self, column=requalify_column(self.column, old, new))


@dataclass(frozen=True)
class ColumnWhere:
    """``first <operator> second`` comparing two columns (ON conditions)."""

    first: str
    operator: str
    second: str
    boolean: str = "and"

    def requalify(self, old: str, new: str) -> ColumnWhere:
        return replace(
            self,
            first=requalify_column(self.first, old, new),
            second=requalify_column(self.second, old, new),
        )


@dataclass(frozen=True)
class NullWhere:
    """``column IS [NOT] NULL``."""

    column: str
    negate: bool = False
    boolean: str = "and"

    def requalify(self, old: str, new: str) -> NullWhere:
        return replace(self, column=requalify_column(self.column, old, new))


@dataclass(frozen=True)
class InWhere:
    """``column [NOT] IN (values...)``."""

    column: str
    values: tuple[Any, ...]
    negate: bool = False
    boolean: str = "and"

    def requalify(self, old: str, new: str) -> InWhere:
        return replace(self, column=requalify_column(self.column, old, new))


@dataclass(frozen=True)
class NestedWhere:
    """A parenthesized group of predicates."""

    wheres: tuple[Where, ...]
    boolean: str = "and"

    def requalify(self, old: str, new: str) -> NestedWhere:
        return replace(self, wheres=tuple(w.requalify(old, new) for w in self.wheres))


@dataclass(frozen=True)
class RawWhere:
    """Raw SQL with ``?`` placeholders for ``bindings``.

    Raw fragments are opaque, so they are never re-targeted.
    """

    sql: str
    bindings: tuple[Any, ...] = ()
    boolean: str = "and"

    def requalify(self, old: str, new: str) -> RawWhere:
        return self


Where = Union[BasicWhere, ColumnWhere, NullWhere, InWhere, NestedWhere, RawWhere]


def requalify_wheres(wheres: tuple[Where, ...], old: str, new: str) -> tuple[Where, ...]:
    """Re-target every column reference qualified with ``old`` onto ``new``."""
    if old == new:
        return wheres
    return tuple(w.requalify(old, new) for w in wheres)
