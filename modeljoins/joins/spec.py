"""The materialized plan of one relationship join."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from modeljoins.query.builder import QueryBuilder
from modeljoins.query.predicates import Where
from modeljoins.schema.column_reference import TableRef

if TYPE_CHECKING:
    from modeljoins.orm.model import Model
    from modeljoins.orm.scopes import Scope


@dataclass(frozen=True)
class JoinSpec:
    """Everything needed to add one join to a builder.

    Attributes:
        table: Joined table, with its alias when one is used.
        join_type: Normalized SQL join type.
        first: Qualified ON column of the joined table.
        second: Qualified ON column of the base table.
        operator: ON comparison operator.
        nested: Predicates folded into ON as one parenthesized group.
        outer_scopes: Scopes re-applied to the outer query after the join.
        scope_model: Model the outer scopes qualify with.
    """

    table: TableRef
    join_type: str
    first: str
    second: str
    operator: str = "="
    nested: tuple[Where, ...] = ()
    outer_scopes: tuple[Scope, ...] = ()
    scope_model: Model | None = field(default=None, compare=False)

    def nested_query(self) -> QueryBuilder:
        """A builder holding only the nested predicates."""
        query = QueryBuilder(self.table)
        query.wheres = list(self.nested)
        return query
