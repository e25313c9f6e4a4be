"""Clause-level SQL builders.

Each class handles exactly one SQL clause.  ``JoinClauseBuilder`` shares the
outer :class:`~modeljoins.compile.context.RuntimeContext` through its
predicate builder, so parameters bound in ON clauses and in the WHERE clause
are numbered in one sequence.

Classes
-------
SelectClauseBuilder   — ``SELECT <columns>``
FromClauseBuilder     — ``FROM <table [AS alias]>``
JoinClauseBuilder     — ``<TYPE> JOIN … ON …``
OrderByClauseBuilder  — ``ORDER BY …``
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from modeljoins.compile.context import CompilationContext
from modeljoins.compile.expression_builder import IdentifierBuilder, PredicateBuilder
from modeljoins.errors import CompilationError
from modeljoins.schema.column_reference import TableRef

if TYPE_CHECKING:
    from modeljoins.query.builder import JoinClause


class SelectClauseBuilder:
    """Builds the ``SELECT …`` clause."""

    def __init__(self, ctx: CompilationContext) -> None:
        self._ident = IdentifierBuilder(ctx)

    def build(self, columns: list[str], distinct: bool = False) -> str:
        prefix = "SELECT DISTINCT" if distinct else "SELECT"
        if not columns:
            return f"{prefix} *"
        return f"{prefix} {', '.join(self._ident.column(c) for c in columns)}"


class FromClauseBuilder:
    """Builds the ``FROM <table>`` fragment."""

    def __init__(self, ctx: CompilationContext) -> None:
        self._ident = IdentifierBuilder(ctx)

    def build(self, table: TableRef | None) -> str:
        if table is None:
            raise CompilationError("Query has no FROM table.", clause="FROM")
        return f"FROM {self._ident.table(table)}"


class JoinClauseBuilder:
    """Builds a single ``JOIN … ON …`` fragment."""

    def __init__(self, ctx: CompilationContext, predicate_builder: PredicateBuilder) -> None:
        self._ident = IdentifierBuilder(ctx)
        self._pred = predicate_builder

    def build(self, join: JoinClause) -> str:
        table_sql = self._ident.table(join.table)
        keyword = f"{join.type.upper()} JOIN"
        if not join.wheres:
            if join.type != "cross":
                raise CompilationError(
                    f"{keyword} {join.table} has no ON condition.", clause="JOIN"
                )
            return f"{keyword} {table_sql}"
        return f"{keyword} {table_sql} ON {self._pred.build(join.wheres)}"


class OrderByClauseBuilder:
    """Builds the ``ORDER BY`` clause."""

    def __init__(self, ctx: CompilationContext) -> None:
        self._ident = IdentifierBuilder(ctx)

    def build(self, orders: list[tuple[str, str]]) -> str:
        parts = [f"{self._ident.column(column)} {direction.upper()}" for column, direction in orders]
        return f"ORDER BY {', '.join(parts)}"
