"""modeljoins – relationship-aware joins for a model query builder.

Join Models. Don't Spell Out Keys.

Public API
----------
``Builder.join_many``
    Join a model whose table holds a foreign key to the current one.

``Builder.join_one``
    Join a model the current table holds a foreign key to; the joined
    model's scopes also constrain the outer query.

``Builder.join_relation``
    Join a declared relationship by name.

Re-exported types
-----------------
``Model``, ``Builder``, the relationship declarations, ``Scope``,
``QueryBuilder``, ``JoinOptions``, ``JoinPlanner``, ``JoinSpec``,
``SchemaSnapshot``, ``CompiledSQL`` and all error classes.

Extensibility
-------------
New dialect compilers can be registered via::

    from modeljoins import CompilerFactory, SQLCompiler

    @CompilerFactory.register("duckdb")
    class DuckDBCompiler(SQLCompiler):
        dialect_name = "duckdb"
        placeholder_format = "${name}"

After registration, ``to_sql("duckdb")`` picks it up.
"""

from __future__ import annotations

from modeljoins.errors import (
    CompilationError,
    InvalidJoinSpecError,
    InvalidJoinTypeError,
    InvalidOperatorError,
    ModelJoinsError,
    RelationshipNotFoundError,
    SchemaError,
    UnknownModelError,
    UnsupportedQueryableError,
    UnsupportedRelationshipKindError,
    ValidationError,
)
from modeljoins.options import JoinOptions
from modeljoins.schema.converters import schema_from_metadata, schema_from_sqlalchemy
from modeljoins.schema.snapshot import ColumnInfo, SchemaSnapshot, TableInfo
from modeljoins.compile import CompiledSQL, CompilerFactory, SQLCompiler
from modeljoins.query.builder import JoinClause, QueryBuilder
from modeljoins.orm import (
    BelongsTo,
    BelongsToMany,
    Builder,
    CallableScope,
    HasMany,
    HasOne,
    Model,
    ModelRegistry,
    Relation,
    Scope,
    belongs_to,
    belongs_to_many,
    has_many,
    has_one,
)
from modeljoins.joins import JoinPlanner, JoinSpec, JoinsModels, Queryable, resolve_queryable

__all__ = [
    # Errors
    "ModelJoinsError",
    "ValidationError",
    "CompilationError",
    "InvalidJoinSpecError",
    "InvalidJoinTypeError",
    "InvalidOperatorError",
    "RelationshipNotFoundError",
    "SchemaError",
    "UnknownModelError",
    "UnsupportedQueryableError",
    "UnsupportedRelationshipKindError",
    # Configuration and schema
    "JoinOptions",
    "ColumnInfo",
    "SchemaSnapshot",
    "TableInfo",
    "schema_from_metadata",
    "schema_from_sqlalchemy",
    # Query building
    "CompiledSQL",
    "CompilerFactory",
    "SQLCompiler",
    "JoinClause",
    "QueryBuilder",
    # ORM
    "Model",
    "Builder",
    "ModelRegistry",
    "Relation",
    "HasOne",
    "HasMany",
    "BelongsTo",
    "BelongsToMany",
    "has_one",
    "has_many",
    "belongs_to",
    "belongs_to_many",
    "Scope",
    "CallableScope",
    # Joins
    "JoinPlanner",
    "JoinSpec",
    "JoinsModels",
    "Queryable",
    "resolve_queryable",
]
