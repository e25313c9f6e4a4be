"""Pydantic configuration for relationship joins.

``JoinOptions`` is attached to a model class (``Model.join_options``) and
copied onto every builder the model creates.  A single builder can be given
different options with :meth:`~modeljoins.orm.builder.Builder.with_join_options`::

    from modeljoins import JoinOptions

    # legacy behaviour: unsupported relationship kinds are skipped silently
    User.query().with_join_options(JoinOptions(strict_relationships=False))

    # validate join columns against a reflected schema
    options = JoinOptions(snapshot=schema_from_sqlalchemy(engine))
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from modeljoins.errors import InvalidJoinTypeError
from modeljoins.schema.snapshot import SchemaSnapshot

#: Supported compiler targets.
DialectTarget = Literal["postgres", "sqlite", "mysql"]

#: SQL join kinds the grammar can render.
JOIN_TYPES: tuple[str, ...] = ("inner", "left", "right", "full", "cross")


def normalize_join_type(join_type: str) -> str:
    """Return the lower-case join type, or raise if it is not supported.

    Raises:
        InvalidJoinTypeError: If ``join_type`` is not one of :data:`JOIN_TYPES`.
    """
    normalized = join_type.strip().lower()
    if normalized not in JOIN_TYPES:
        raise InvalidJoinTypeError(join_type, list(JOIN_TYPES))
    return normalized


class JoinOptions(BaseModel):
    """Behavioural switches for the join planner.

    Attributes:
        strict_relationships: When ``True`` (default), ``join_relation`` on a
            relationship kind other than has-one/has-many/belongs-to raises
            :class:`~modeljoins.errors.UnsupportedRelationshipKindError`.
            When ``False`` the request is logged and the builder is returned
            unchanged.
        snapshot: Optional schema snapshot.  When set, the planner checks
            that both ON columns exist before adding the join.  Naming
            conventions are never checked without it.
        dialect: Default compiler target for ``Builder.to_sql()``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    strict_relationships: bool = True
    snapshot: SchemaSnapshot | None = None
    dialect: DialectTarget = "postgres"
