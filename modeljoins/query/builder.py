"""Fluent SQL query builder.

``QueryBuilder`` records the parts of a SELECT statement (table, columns,
joins, predicates, ordering, paging) and hands them to
:class:`~modeljoins.compile.grammar.QueryGrammar` for rendering.
``JoinClause`` is a builder whose predicates form a join's ON clause.

Example::

    query = (
        QueryBuilder("users")
        .join("posts", "posts.user_id", "=", "users.id")
        .where("users.active", True)
    )
    compiled = query.to_sql("sqlite")
"""
from __future__ import annotations

import copy
from collections.abc import Callable, Iterable
from typing import Any

from modeljoins.compile.base import CompiledSQL, SQLCompiler
from modeljoins.compile.grammar import QueryGrammar
from modeljoins.compile.registry import CompilerFactory
from modeljoins.errors import InvalidOperatorError, ValidationError
from modeljoins.options import normalize_join_type
from modeljoins.query.predicates import (
    BOOLEANS,
    OPERATORS,
    BasicWhere,
    ColumnWhere,
    InWhere,
    NestedWhere,
    NullWhere,
    RawWhere,
    Where,
)
from modeljoins.schema.column_reference import TableRef

_MISSING: Any = object()


def _check_operator(operator: Any) -> str:
    if not isinstance(operator, str) or operator.lower() not in OPERATORS:
        raise InvalidOperatorError(str(operator), list(OPERATORS))
    return operator.lower()


def _check_boolean(boolean: str) -> str:
    if boolean.lower() not in BOOLEANS:
        raise ValidationError(
            f"Unsupported boolean: '{boolean}'.",
            code="INVALID_BOOLEAN",
            details={"boolean": boolean, "allowed_booleans": list(BOOLEANS)},
        )
    return boolean.lower()


class QueryBuilder:
    """Mutable builder for a single SELECT statement.

    Every method that adds to the query returns the builder itself so calls
    can be chained.

    Args:
        table: Optional FROM table, ``"users"`` or ``"users as u"``.
    """

    def __init__(self, table: str | TableRef | None = None) -> None:
        self.from_table: TableRef | None = TableRef.parse(table) if table else None
        self.columns: list[str] = []
        self.distinct_rows = False
        self.joins: list[JoinClause] = []
        self.wheres: list[Where] = []
        self.orders: list[tuple[str, str]] = []
        self.limit_value: int | None = None
        self.offset_value: int | None = None

    # ------------------------------------------------------------------
    # FROM / SELECT
    # ------------------------------------------------------------------

    def from_(self, table: str | TableRef) -> QueryBuilder:
        self.from_table = TableRef.parse(table)
        return self

    def select(self, *columns: str) -> QueryBuilder:
        self.columns = list(columns)
        return self

    def add_select(self, *columns: str) -> QueryBuilder:
        self.columns.extend(columns)
        return self

    def distinct(self) -> QueryBuilder:
        self.distinct_rows = True
        return self

    # ------------------------------------------------------------------
    # WHERE
    # ------------------------------------------------------------------

    def where(
        self,
        column: str | Callable[[QueryBuilder], Any],
        operator: Any = None,
        value: Any = _MISSING,
        boolean: str = "and",
    ) -> QueryBuilder:
        """Add a ``column <operator> value`` predicate.

        ``where("a", 1)`` is shorthand for ``where("a", "=", 1)``; comparing
        with ``None`` through ``=`` / ``!=`` becomes ``IS [NOT] NULL``.
        Passing a callable opens a parenthesized group: the callable
        receives a fresh builder and its predicates are nested.
        """
        if callable(column):
            nested = self.for_nested_where()
            column(nested)
            return self.add_nested_where_query(nested, boolean)

        if value is _MISSING:
            operator, value = "=", operator

        operator = _check_operator(operator)
        if value is None and operator in ("=", "!=", "<>"):
            return self.where_null(column, boolean, negate=operator != "=")

        self.wheres.append(BasicWhere(column, operator, value, _check_boolean(boolean)))
        return self

    def or_where(
        self,
        column: str | Callable[[QueryBuilder], Any],
        operator: Any = None,
        value: Any = _MISSING,
    ) -> QueryBuilder:
        return self.where(column, operator, value, boolean="or")

    def where_column(
        self,
        first: str,
        operator: str | None = None,
        second: str | None = None,
        boolean: str = "and",
    ) -> QueryBuilder:
        """Compare two columns; ``where_column("a", "b")`` means ``a = b``."""
        if second is None:
            operator, second = "=", operator
        if second is None:
            raise ValidationError(
                f"where_column('{first}') needs a second column.",
                code="MISSING_COLUMN",
                details={"first": first},
            )
        self.wheres.append(
            ColumnWhere(first, _check_operator(operator), second, _check_boolean(boolean))
        )
        return self

    def or_where_column(
        self, first: str, operator: str | None = None, second: str | None = None
    ) -> QueryBuilder:
        return self.where_column(first, operator, second, boolean="or")

    def where_null(self, column: str, boolean: str = "and", negate: bool = False) -> QueryBuilder:
        self.wheres.append(NullWhere(column, negate, _check_boolean(boolean)))
        return self

    def where_not_null(self, column: str, boolean: str = "and") -> QueryBuilder:
        return self.where_null(column, boolean, negate=True)

    def or_where_null(self, column: str) -> QueryBuilder:
        return self.where_null(column, boolean="or")

    def where_in(
        self,
        column: str,
        values: Iterable[Any],
        boolean: str = "and",
        negate: bool = False,
    ) -> QueryBuilder:
        self.wheres.append(InWhere(column, tuple(values), negate, _check_boolean(boolean)))
        return self

    def where_not_in(self, column: str, values: Iterable[Any], boolean: str = "and") -> QueryBuilder:
        return self.where_in(column, values, boolean, negate=True)

    def where_raw(self, sql: str, bindings: Iterable[Any] = (), boolean: str = "and") -> QueryBuilder:
        self.wheres.append(RawWhere(sql, tuple(bindings), _check_boolean(boolean)))
        return self

    def for_nested_where(self) -> QueryBuilder:
        """Return an empty builder for collecting a nested predicate group."""
        return QueryBuilder(self.from_table)

    def add_nested_where_query(self, query: QueryBuilder, boolean: str = "and") -> QueryBuilder:
        """Fold ``query``'s predicates into this builder as one ``( … )`` group.

        A query without predicates adds nothing, so no empty parentheses are
        ever rendered.
        """
        if query.wheres:
            self.wheres.append(NestedWhere(tuple(query.wheres), _check_boolean(boolean)))
        return self

    # ------------------------------------------------------------------
    # JOIN
    # ------------------------------------------------------------------

    def join(
        self,
        table: str | TableRef,
        first: str | Callable[[JoinClause], Any] | None = None,
        operator: str | None = None,
        second: str | None = None,
        type: str = "inner",
    ) -> QueryBuilder:
        """Add a join.

        ``first`` is either the left ON column (with ``operator`` and
        ``second``) or a callable that receives the :class:`JoinClause` and
        builds the ON clause itself.
        """
        join = JoinClause(self, type, table)
        if callable(first):
            first(join)
        elif first is not None:
            join.on(first, operator, second)
        self.joins.append(join)
        return self

    def left_join(
        self,
        table: str | TableRef,
        first: str | Callable[[JoinClause], Any] | None = None,
        operator: str | None = None,
        second: str | None = None,
    ) -> QueryBuilder:
        return self.join(table, first, operator, second, type="left")

    def right_join(
        self,
        table: str | TableRef,
        first: str | Callable[[JoinClause], Any] | None = None,
        operator: str | None = None,
        second: str | None = None,
    ) -> QueryBuilder:
        return self.join(table, first, operator, second, type="right")

    def cross_join(self, table: str | TableRef) -> QueryBuilder:
        return self.join(table, type="cross")

    # ------------------------------------------------------------------
    # ORDER BY / LIMIT / OFFSET
    # ------------------------------------------------------------------

    def order_by(self, column: str, direction: str = "asc") -> QueryBuilder:
        direction = direction.lower()
        if direction not in ("asc", "desc"):
            raise ValidationError(
                f"Order direction must be 'asc' or 'desc', got '{direction}'.",
                code="INVALID_DIRECTION",
                details={"direction": direction},
            )
        self.orders.append((column, direction))
        return self

    def limit(self, value: int) -> QueryBuilder:
        self.limit_value = max(int(value), 0)
        return self

    def offset(self, value: int) -> QueryBuilder:
        self.offset_value = max(int(value), 0)
        return self

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def clone(self) -> QueryBuilder:
        """Return an independent copy; predicates are immutable and shared."""
        clone = copy.copy(self)
        clone.columns = list(self.columns)
        clone.joins = [join.clone() for join in self.joins]
        clone.wheres = list(self.wheres)
        clone.orders = list(self.orders)
        return clone

    def to_sql(self, dialect: str | SQLCompiler = "postgres") -> CompiledSQL:
        """Compile the query for ``dialect`` (a registered name or compiler)."""
        return QueryGrammar(CompilerFactory.resolve(dialect)).compile(self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} from={self.from_table} joins={len(self.joins)} wheres={len(self.wheres)}>"


class JoinClause(QueryBuilder):
    """The ON clause of one join.

    Predicates added through ``on`` compare two columns; the inherited
    ``where`` family binds values.  Both end up in the ON clause.

    Args:
        parent: The query the join belongs to.
        type: Join type (``inner``, ``left``, ``right``, ``full``, ``cross``).
        table: Joined table, ``"posts"`` or ``"posts as p"``.
    """

    def __init__(self, parent: QueryBuilder, type: str, table: str | TableRef) -> None:
        super().__init__()
        self.parent = parent
        self.type = normalize_join_type(type)
        self.table = TableRef.parse(table)

    def on(
        self,
        first: str | Callable[[JoinClause], Any],
        operator: str | None = None,
        second: str | None = None,
        boolean: str = "and",
    ) -> JoinClause:
        """Add an ON condition; a callable opens a nested group."""
        if callable(first):
            nested = self.for_nested_where()
            first(nested)
            self.add_nested_where_query(nested, boolean)
            return self
        self.where_column(first, operator, second, boolean)
        return self

    def or_on(
        self,
        first: str | Callable[[JoinClause], Any],
        operator: str | None = None,
        second: str | None = None,
    ) -> JoinClause:
        return self.on(first, operator, second, boolean="or")

    def for_nested_where(self) -> JoinClause:
        return JoinClause(self.parent, self.type, self.table)

    def clone(self) -> JoinClause:
        clone = copy.copy(self)
        clone.wheres = list(self.wheres)
        return clone
