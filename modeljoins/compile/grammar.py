"""QueryBuilder → SQL compilation logic.

``QueryGrammar`` is the top-level orchestrator.  It wires together the
clause-level sub-builders, then assembles the statement.  All
dialect-specific behaviour is delegated to the injected ``SQLCompiler``.

Sub-builder hierarchy
---------------------
QueryGrammar
  ├── PredicateBuilder      (expression_builder.py)
  ├── SelectClauseBuilder   (clause_builders.py)
  ├── FromClauseBuilder     (clause_builders.py)
  ├── JoinClauseBuilder     (clause_builders.py)
  └── OrderByClauseBuilder  (clause_builders.py)

A single :class:`~modeljoins.compile.context.RuntimeContext` is created per
``compile()`` call and shared by the JOIN and WHERE predicates, so
placeholder names follow the order of the SQL text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from modeljoins.compile.base import CompiledSQL, SQLCompiler
from modeljoins.compile.clause_builders import (
    FromClauseBuilder,
    JoinClauseBuilder,
    OrderByClauseBuilder,
    SelectClauseBuilder,
)
from modeljoins.compile.context import CompilationContext, RuntimeContext
from modeljoins.compile.expression_builder import PredicateBuilder

if TYPE_CHECKING:
    from modeljoins.query.builder import QueryBuilder


class QueryGrammar:
    """Compiles a :class:`~modeljoins.query.builder.QueryBuilder` to parameterized SQL.

    Args:
        compiler: Dialect-specific compiler instance.
    """

    def __init__(self, compiler: SQLCompiler) -> None:
        self._ctx = CompilationContext(compiler=compiler)

    def compile(self, query: QueryBuilder) -> CompiledSQL:
        """Compile ``query`` to parameterized SQL.

        Returns:
            :class:`~modeljoins.compile.base.CompiledSQL` with ``sql`` string
            and bound ``params``.

        Raises:
            CompilationError: If the query has no FROM table, a join has no
                ON condition, or a predicate node is unknown.
        """
        runtime = RuntimeContext()
        pred = PredicateBuilder(self._ctx, runtime)

        parts: list[str] = [
            SelectClauseBuilder(self._ctx).build(query.columns, query.distinct_rows),
            FromClauseBuilder(self._ctx).build(query.from_table),
        ]

        join_builder = JoinClauseBuilder(self._ctx, pred)
        for join in query.joins:
            parts.append(join_builder.build(join))

        if query.wheres:
            parts.append(f"WHERE {pred.build(query.wheres)}")

        if query.orders:
            parts.append(OrderByClauseBuilder(self._ctx).build(query.orders))

        if query.limit_value is not None:
            parts.append(f"LIMIT {query.limit_value}")

        if query.offset_value is not None:
            parts.append(f"OFFSET {query.offset_value}")

        return CompiledSQL(
            sql="\n".join(parts),
            params=runtime.params,
            dialect=self._ctx.compiler.dialect_name,
        )
