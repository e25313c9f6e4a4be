"""Identifier and predicate SQL compilers.

``IdentifierBuilder`` quotes table and column references; ``PredicateBuilder``
renders the predicate nodes of WHERE and ON clauses.  Both receive a
:class:`~modeljoins.compile.context.CompilationContext` (static config) and
the predicate builder also gets the :class:`RuntimeContext` (per-query
parameter state).
"""
from __future__ import annotations

from collections.abc import Sequence

from modeljoins.compile.context import CompilationContext, RuntimeContext
from modeljoins.errors import CompilationError
from modeljoins.query.predicates import (
    BasicWhere,
    ColumnWhere,
    InWhere,
    NestedWhere,
    NullWhere,
    RawWhere,
    Where,
)
from modeljoins.schema.column_reference import TableRef


class IdentifierBuilder:
    """Quotes ``table``, ``table AS alias``, ``table.column`` and ``table.*``."""

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def column(self, ref: str) -> str:
        if " as " in ref.lower():
            parts = ref.split()
            if len(parts) == 3 and parts[1].lower() == "as":
                quote = self._ctx.compiler.quote_identifier
                return f"{self.column(parts[0])} AS {quote(parts[2])}"
        return ".".join(self._segment(s) for s in ref.split("."))

    def table(self, ref: TableRef) -> str:
        quote = self._ctx.compiler.quote_identifier
        table_sql = ".".join(quote(s) for s in ref.name.split("."))
        if ref.alias:
            table_sql = f"{table_sql} AS {quote(ref.alias)}"
        return table_sql

    def _segment(self, segment: str) -> str:
        if segment == "*":
            return segment
        return self._ctx.compiler.quote_identifier(segment)


class PredicateBuilder:
    """Compiles a sequence of predicate nodes to a SQL condition.

    Args:
        ctx: Static compilation context.
        runtime: Shared parameter accumulator for this query.
    """

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime
        self._ident = IdentifierBuilder(ctx)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, wheres: Sequence[Where]) -> str:
        """Join the nodes with their booleans, dropping the leading one."""
        parts: list[str] = []
        for i, where in enumerate(wheres):
            sql = self._build_node(where)
            if i == 0:
                parts.append(sql)
            else:
                parts.append(f"{where.boolean.upper()} {sql}")
        return " ".join(parts)

    # ------------------------------------------------------------------
    # Node sub-compilers
    # ------------------------------------------------------------------

    def _build_node(self, where: Where) -> str:
        if isinstance(where, BasicWhere):
            return self._build_basic(where)
        if isinstance(where, ColumnWhere):
            return (
                f"{self._ident.column(where.first)} {where.operator} "
                f"{self._ident.column(where.second)}"
            )
        if isinstance(where, NullWhere):
            keyword = "IS NOT NULL" if where.negate else "IS NULL"
            return f"{self._ident.column(where.column)} {keyword}"
        if isinstance(where, InWhere):
            return self._build_in(where)
        if isinstance(where, NestedWhere):
            return f"({self.build(where.wheres)})"
        if isinstance(where, RawWhere):
            return self._build_raw(where)
        raise CompilationError(
            f"Unknown predicate type: {type(where).__name__}", clause="WHERE"
        )

    def _build_basic(self, where: BasicWhere) -> str:
        operator = where.operator.upper()
        if "LIKE" in operator:
            operator = self._ctx.compiler.like_operator(operator)
        placeholder = self._bind(where.value)
        return f"{self._ident.column(where.column)} {operator} {placeholder}"

    def _build_in(self, where: InWhere) -> str:
        if not where.values:
            # an empty IN list matches nothing; an empty NOT IN matches everything
            return "1 = 1" if where.negate else "0 = 1"
        keyword = "NOT IN" if where.negate else "IN"
        placeholders = ", ".join(self._bind(v) for v in where.values)
        return f"{self._ident.column(where.column)} {keyword} ({placeholders})"

    def _build_raw(self, where: RawWhere) -> str:
        pieces = where.sql.split("?")
        if len(pieces) - 1 != len(where.bindings):
            raise CompilationError(
                f"Raw predicate expects {len(pieces) - 1} bindings, "
                f"got {len(where.bindings)}.",
                clause="WHERE",
            )
        sql = pieces[0]
        for binding, piece in zip(where.bindings, pieces[1:]):
            sql += self._bind(binding) + piece
        return sql

    def _bind(self, value: object) -> str:
        name = self._runtime.add_value(value)
        return self._ctx.compiler.param_placeholder(name)
