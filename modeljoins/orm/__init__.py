"""Minimal ORM layer: models, model-aware builders, relationships and scopes."""
from modeljoins.orm.model import Model
from modeljoins.orm.builder import Builder
from modeljoins.orm.registry import ModelRegistry
from modeljoins.orm.relations import (
    BelongsTo,
    BelongsToMany,
    HasMany,
    HasOne,
    HasOneOrMany,
    Relation,
    RelationProperty,
    belongs_to,
    belongs_to_many,
    has_many,
    has_one,
)
from modeljoins.orm.scopes import CallableScope, Scope, as_scope

__all__ = [
    "Model",
    "Builder",
    "ModelRegistry",
    "BelongsTo",
    "BelongsToMany",
    "HasMany",
    "HasOne",
    "HasOneOrMany",
    "Relation",
    "RelationProperty",
    "belongs_to",
    "belongs_to_many",
    "has_many",
    "has_one",
    "CallableScope",
    "Scope",
    "as_scope",
]
