"""Relationship joins: planner, join specs and the builder mixin."""
from modeljoins.joins.planner import JoinPlanner
from modeljoins.joins.queryable import Queryable, resolve_queryable
from modeljoins.joins.spec import JoinSpec
from modeljoins.joins.mixin import JoinsModels

__all__ = [
    "JoinPlanner",
    "JoinSpec",
    "JoinsModels",
    "Queryable",
    "resolve_queryable",
]
