"""Query building: fluent builder, join clauses and predicate nodes."""
from modeljoins.query.builder import JoinClause, QueryBuilder
from modeljoins.query.predicates import (
    BasicWhere,
    ColumnWhere,
    InWhere,
    NestedWhere,
    NullWhere,
    RawWhere,
    Where,
)

__all__ = [
    "JoinClause",
    "QueryBuilder",
    "BasicWhere",
    "ColumnWhere",
    "InWhere",
    "NestedWhere",
    "NullWhere",
    "RawWhere",
    "Where",
]
